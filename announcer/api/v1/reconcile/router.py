"""Reconciliation trigger endpoint."""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from announcer.container import get_health_checker, get_reconciler
from announcer.exceptions import ReconcileInProgressError
from announcer.models.summary import Action, RunStatus, RunSummary
from announcer.services.health_service import HealthChecker
from announcer.services.reconcile_service import run_reconciliation
from announcer.services.reconciler import Reconciler

router = APIRouter(tags=["reconcile"])


class IdentityOutcomeResponse(BaseModel):
    """Outcome for one announcement."""

    identity: str
    action: Action
    stage: str | None = None
    error: str | None = None


class ReconcileResponse(BaseModel):
    """Response model for a reconciliation run."""

    status: RunStatus = Field(..., description="success, partial or failed")
    dry_run: bool
    created: int
    updated: int
    unchanged: int
    failed: int
    error: str | None = Field(default=None, description="Run-level error")
    started_at: datetime
    finished_at: datetime | None
    outcomes: list[IdentityOutcomeResponse] = Field(default_factory=list)

    @classmethod
    def from_summary(cls, summary: RunSummary) -> "ReconcileResponse":
        return cls(
            status=summary.status,
            dry_run=summary.dry_run,
            created=summary.created,
            updated=summary.updated,
            unchanged=summary.unchanged,
            failed=summary.failed,
            error=summary.error,
            started_at=summary.started_at,
            finished_at=summary.finished_at,
            outcomes=[
                IdentityOutcomeResponse(
                    identity=o.identity, action=o.action, stage=o.stage, error=o.error
                )
                for o in summary.outcomes
            ],
        )


@router.post("/reconcile", response_model=ReconcileResponse)
async def reconcile(
    reconciler: Reconciler = Depends(get_reconciler),  # noqa: B008
    checker: HealthChecker = Depends(get_health_checker),  # noqa: B008
) -> JSONResponse:
    """Reconcile the feed with the chat channel now.

    Returns 502 when the feed could not be fetched, 200 otherwise with the
    run status in the body.
    """
    try:
        summary = await run_reconciliation(reconciler, trigger="http", checker=checker)
    except ReconcileInProgressError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e

    body = ReconcileResponse.from_summary(summary)
    status_code = (
        status.HTTP_502_BAD_GATEWAY if summary.status == RunStatus.FAILED else status.HTTP_200_OK
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))
