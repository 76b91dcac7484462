"""Domain errors raised at the collaborator boundaries."""

from enum import Enum


class AnnouncerError(Exception):
    """Base class for all announcer errors."""


class ConfigurationError(AnnouncerError):
    """Raised when required settings for a collaborator are missing."""


class FetchError(AnnouncerError):
    """Raised when the announcement feed is unreachable or wholly unparsable."""


class StoreError(AnnouncerError):
    """Raised when the state store cannot read or write a record."""


class SinkErrorKind(str, Enum):
    """Failure categories reported by a notification sink."""

    REFERENCE_STALE = "reference_stale"
    RATE_LIMITED = "rate_limited"
    TIMEOUT = "timeout"
    TRANSPORT = "transport"
    API = "api"


class SinkError(AnnouncerError):
    """Raised when posting or editing a chat message fails."""

    def __init__(
        self,
        message: str,
        kind: SinkErrorKind = SinkErrorKind.API,
        retry_after: float | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.retry_after = retry_after

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.args[0]}"


class ReconcileInProgressError(AnnouncerError):
    """Raised when a reconciliation run is requested while one is running."""
