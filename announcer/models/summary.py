"""Reconciliation run results."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum


class Action(str, Enum):
    """Outcome of reconciling a single announcement."""

    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    FAILED = "failed"


class RunStatus(str, Enum):
    """Overall status of a reconciliation run."""

    SUCCESS = "success"
    PARTIAL = "partial"
    FAILED = "failed"


@dataclass(frozen=True)
class IdentityOutcome:
    """Result for one announcement identity."""

    identity: str
    action: Action
    stage: str | None = None
    error: str | None = None


@dataclass
class RunSummary:
    """Aggregated result of a reconciliation run."""

    dry_run: bool = False
    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    finished_at: datetime | None = None
    error: str | None = None
    outcomes: list[IdentityOutcome] = field(default_factory=list)

    def record(self, outcome: IdentityOutcome) -> None:
        """Add a per-identity outcome."""
        self.outcomes.append(outcome)

    def finish(self, error: str | None = None) -> "RunSummary":
        """Mark run as finished.

        Args:
            error: Run-level error, set when the run aborted

        Returns:
            This summary
        """
        self.error = error
        self.finished_at = datetime.now(UTC)
        return self

    def _count(self, action: Action) -> int:
        return sum(1 for outcome in self.outcomes if outcome.action == action)

    @property
    def created(self) -> int:
        return self._count(Action.CREATED)

    @property
    def updated(self) -> int:
        return self._count(Action.UPDATED)

    @property
    def unchanged(self) -> int:
        return self._count(Action.UNCHANGED)

    @property
    def failed(self) -> int:
        return self._count(Action.FAILED)

    @property
    def status(self) -> RunStatus:
        if self.error is not None:
            return RunStatus.FAILED
        if self.failed:
            return RunStatus.PARTIAL
        return RunStatus.SUCCESS

    @property
    def ok(self) -> bool:
        return self.status == RunStatus.SUCCESS

    def __str__(self) -> str:
        return (
            f"{self.status.value}: created={self.created} updated={self.updated} "
            f"unchanged={self.unchanged} failed={self.failed}"
        )
