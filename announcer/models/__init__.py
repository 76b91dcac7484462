"""Domain models."""

from announcer.models.announcement import Announcement
from announcer.models.state import MessageRef, StateRecord
from announcer.models.summary import Action, IdentityOutcome, RunStatus, RunSummary

__all__ = [
    "Announcement",
    "MessageRef",
    "StateRecord",
    "Action",
    "IdentityOutcome",
    "RunStatus",
    "RunSummary",
]
