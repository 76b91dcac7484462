"""API v1 router - aggregates all domain routers."""

from fastapi import APIRouter

from announcer.api.v1.health import router as health_router
from announcer.api.v1.reconcile import router as reconcile_router

router = APIRouter()

router.include_router(health_router)
router.include_router(reconcile_router)
