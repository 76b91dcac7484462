"""Collaborator wiring and FastAPI dependency helpers."""

from loguru import logger

from announcer.config import Config, config
from announcer.services.reconciler import Reconciler
from announcer.sinks import DryRunSink, NotificationSink, SlackSink
from announcer.sources import AnnouncementSource, RSSFeedSource
from announcer.stores import DryRunStateStore, RedisStateStore, StateStore


def build_source(cfg: Config) -> AnnouncementSource:
    """Create the announcement source.

    The source is real in every mode.
    """
    return RSSFeedSource(cfg.feed)


def build_store(cfg: Config) -> StateStore:
    """Create the state store for the configured mode."""
    if cfg.dry_run:
        logger.info("Dry-run mode: state is kept in memory")
        return DryRunStateStore()
    return RedisStateStore.from_config(
        cfg.redis, in_cluster=cfg.in_cluster, default_channel=cfg.slack.channel_id
    )


def build_sink(cfg: Config) -> NotificationSink:
    """Create the notification sink for the configured mode."""
    if cfg.dry_run:
        logger.info("Dry-run mode: Slack messages are logged only")
        return DryRunSink()
    return SlackSink(cfg.slack)


def build_reconciler(cfg: Config) -> Reconciler:
    """Validate configuration and assemble a Reconciler.

    Args:
        cfg: Application configuration

    Returns:
        Reconciler wired with real or dry-run collaborators

    Raises:
        ConfigurationError: If settings required in normal mode are missing
    """
    cfg.validate_collaborators()

    return Reconciler(
        source=build_source(cfg),
        store=build_store(cfg),
        sink=build_sink(cfg),
        fetch_timeout=cfg.reconcile.fetch_timeout,
        sink_timeout=cfg.reconcile.sink_timeout,
        store_timeout=cfg.reconcile.store_timeout,
        dry_run=cfg.dry_run,
    )


_reconciler: Reconciler | None = None


def get_reconciler() -> Reconciler:
    """Get or create the Reconciler singleton.

    Returns:
        Reconciler built from the module-level config
    """
    global _reconciler
    if _reconciler is None:
        _reconciler = build_reconciler(config)
    return _reconciler


async def reset_reconciler() -> None:
    """Close and drop the Reconciler singleton."""
    global _reconciler
    if _reconciler is not None:
        await _reconciler.store.close()
    _reconciler = None


def get_config() -> Config:
    """Get config for FastAPI dependency injection.

    Returns:
        Config singleton (module-level)
    """
    return config


def get_health_checker():
    """Get health checker for FastAPI dependency injection.

    Returns:
        HealthChecker singleton (module-level)
    """
    from announcer.services.health_service import health_checker

    return health_checker
