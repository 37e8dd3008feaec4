from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

import config


class EventName(str, Enum):
    """The actions of the MobileWikiAppEdit schema"""

    START = "start"
    PREVIEW = "preview"
    EDIT_SUMMARY_TAP = "editSummaryTap"
    SAVED = "saved"
    CAPTCHA_SHOWN = "captchaShown"
    CAPTCHA_FAILURE = "captchaFailure"
    ABUSE_FILTER_WARNING = "abuseFilterWarning"
    ABUSE_FILTER_ERROR = "abuseFilterError"
    ABUSE_FILTER_WARNING_IGNORE = "abuseFilterWarningIgnore"
    ABUSE_FILTER_WARNING_BACK = "abuseFilterWarningBack"
    SAVE_ATTEMPT = "saveAttempt"
    ERROR = "error"
    WIKIDATA_DESCRIPTION_EDIT_START = "wikidataDescriptionEditStart"
    WIKIDATA_DESCRIPTION_EDIT_READY = "wikidataDescriptionEditReady"
    WIKIDATA_DESCRIPTION_EDIT_SAVE_ATTEMPT = "wikidataDescriptionEditSaveAttempt"
    WIKIDATA_DESCRIPTION_EDIT_SAVED = "wikidataDescriptionEditSaved"
    WIKIDATA_DESCRIPTION_EDIT_ERROR = "wikidataDescriptionEditError"


class Event(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: EventName
    session_token: str
    payload: dict[str, str | int | bool] = {}
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_eventgate(self) -> dict[str, Any]:
        """Body accepted by the EventGate intake service"""
        return {
            "$schema": config.EDIT_SCHEMA,
            "meta": {"stream": config.EDIT_STREAM},
            "dt": self.timestamp.isoformat().replace("+00:00", "Z"),
            "event": {
                "action": self.name.value,
                "session_token": self.session_token,
                **self.payload,
            },
        }
