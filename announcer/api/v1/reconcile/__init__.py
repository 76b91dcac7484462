"""Reconciliation trigger endpoints."""

from announcer.api.v1.reconcile.router import router

__all__ = ["router"]
