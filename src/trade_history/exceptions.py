"""Exception hierarchy for the trade history fetcher."""

from typing import Optional


class TradeHistoryError(Exception):
    """Base class for all trade history errors."""


class InvalidQueryError(TradeHistoryError, ValueError):
    """Query filter failed validation before any request was made."""


class APIError(TradeHistoryError):
    """Unrecoverable response from the data API."""

    def __init__(self, status: int, reason: Optional[str] = None, url: Optional[str] = None):
        self.status = status
        self.reason = reason or ""
        self.url = url
        super().__init__(f"API error: HTTP {status} {self.reason}".rstrip())


class TransientAPIError(APIError):
    """Rate limited (429) or server error (5xx) response, eligible for retry."""


class RetriesExhaustedError(TradeHistoryError):
    """A page fetch kept failing transiently after every retry."""

    def __init__(self, retries: int, last_error: Optional[BaseException] = None):
        self.retries = retries
        self.last_error = last_error
        message = f"Failed after {retries} retries"
        if last_error is not None:
            message += f": {last_error}"
        super().__init__(message)
