from enum import Enum


class FetchErrorCause(str, Enum):
    NETWORK = "network"
    HTTP_STATUS = "http-status"
    API = "api"
    DECODE = "decode"


class FetchError(Exception):
    """
    The failure outcome of a revision window fetch.

    network and http-status are transport problems a caller may retry,
    api is a well-formed refusal from MediaWiki (code holds the API error
    code, e.g. "missingtitle") and decode means the response could not be
    turned into a valid window.
    """

    def __init__(
        self,
        cause: FetchErrorCause,
        message: str = "",
        code: str | None = None,
        status_code: int | None = None,
    ):
        self.cause = cause
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(str(self))

    def __str__(self):
        parts = [self.cause.value]
        if self.code:
            parts.append(self.code)
        if self.status_code is not None:
            parts.append(f"HTTP {self.status_code}")
        text = ": ".join(parts)
        if self.message:
            text = f"{text} ({self.message})"
        return text

    @property
    def is_retryable(self) -> bool:
        return self.cause in (FetchErrorCause.NETWORK, FetchErrorCause.HTTP_STATUS)

    @property
    def is_missing_article(self) -> bool:
        return self.cause == FetchErrorCause.API and self.code == "missingtitle"
