import logging
import uuid

from pydantic import BaseModel, ConfigDict, Field

from models.event import Event, EventName
from models.event_sink import EventDispatcher

logger = logging.getLogger(__name__)

# Known values of editSummaryTapped, see
# https://meta.wikimedia.org/wiki/Schema_talk:MobileWikiAppEdit#Schema_missing_enum_for_editSummaryTapped
# Other values are forwarded as they are.
EDIT_SUMMARY_TAP_KEYS = frozenset({"typo", "grammar", "links", "other"})


class EditFunnel(BaseModel):
    """
    Logs one edit attempt as MobileWikiAppEdit events.

    The session token is created with the funnel and stays the same for every
    event it logs. The nominal order of calls is
        start -> preview -> saveAttempt -> saved
    with captcha, abuse filter and error detours before a retried saveAttempt,
    but any order is accepted and logged as called.

    Every call hands exactly one event to the sink, in call order. Sink
    failures are logged here and never reach the caller.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    sink: EventDispatcher
    session_token: str = Field(default_factory=lambda: str(uuid.uuid4()))

    def _log(self, name: EventName, **payload: str | int | bool):
        event = Event(name=name, session_token=self.session_token, payload=payload)
        try:
            self.sink.log(event)
        except Exception as e:
            logger.warning("Event sink rejected %s event: %s", name.value, e)

    def log_start(self):
        self._log(EventName.START)

    def log_preview(self):
        self._log(EventName.PREVIEW)

    def log_edit_summary_tap(self, edit_summary_tapped: str):
        if edit_summary_tapped not in EDIT_SUMMARY_TAP_KEYS:
            logger.debug("Unknown editSummaryTapped value: %s", edit_summary_tapped)
        self._log(EventName.EDIT_SUMMARY_TAP, editSummaryTapped=edit_summary_tapped)

    def log_saved_revision(self, rev_id: int):
        self._log(EventName.SAVED, revID=rev_id)

    def log_captcha_shown(self):
        self._log(EventName.CAPTCHA_SHOWN)

    def log_captcha_failure(self):
        self._log(EventName.CAPTCHA_FAILURE)

    def log_abuse_filter_warning(self, name: str):
        self._log(EventName.ABUSE_FILTER_WARNING, abuseFilterName=name)

    def log_abuse_filter_error(self, name: str):
        self._log(EventName.ABUSE_FILTER_ERROR, abuseFilterName=name)

    def log_abuse_filter_warning_ignore(self, name: str):
        self._log(EventName.ABUSE_FILTER_WARNING_IGNORE, abuseFilterName=name)

    def log_abuse_filter_warning_back(self, name: str):
        self._log(EventName.ABUSE_FILTER_WARNING_BACK, abuseFilterName=name)

    def log_save_attempt(self):
        self._log(EventName.SAVE_ATTEMPT)

    def log_error(self, code: str):
        self._log(EventName.ERROR, errorText=code)

    def log_wikidata_description_edit_start(self, is_editing_existing: bool):
        self._log(
            EventName.WIKIDATA_DESCRIPTION_EDIT_START,
            isEditingExisting=is_editing_existing,
        )

    def log_wikidata_description_edit_ready(self, is_editing_existing: bool):
        self._log(
            EventName.WIKIDATA_DESCRIPTION_EDIT_READY,
            isEditingExisting=is_editing_existing,
        )

    def log_wikidata_description_edit_save_attempt(self, is_editing_existing: bool):
        self._log(
            EventName.WIKIDATA_DESCRIPTION_EDIT_SAVE_ATTEMPT,
            isEditingExisting=is_editing_existing,
        )

    def log_wikidata_description_edit_saved(self, is_editing_existing: bool):
        self._log(
            EventName.WIKIDATA_DESCRIPTION_EDIT_SAVED,
            isEditingExisting=is_editing_existing,
        )

    def log_wikidata_description_edit_error(self, is_editing_existing: bool):
        self._log(
            EventName.WIKIDATA_DESCRIPTION_EDIT_ERROR,
            isEditingExisting=is_editing_existing,
        )
