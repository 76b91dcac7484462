"""Main application entry point."""

import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from loguru import logger

from announcer import __version__
from announcer.api.v1.health import router as health_router
from announcer.api.v1.reconcile import router as reconcile_router
from announcer.api.v1.router import router as api_v1_router
from announcer.config import Config, config
from announcer.container import get_reconciler, reset_reconciler
from announcer.exceptions import ConfigurationError
from announcer.services.scheduler_service import SchedulerService

scheduler_service: SchedulerService | None = None


def setup_logging(cfg: Config) -> None:
    """Configure logging."""
    log_level = cfg.logging.level
    logger.remove()

    if cfg.logging.json_format:
        logger.add(
            sys.stdout,
            level=log_level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}",
            serialize=True,
        )
    else:
        logger.add(
            sys.stdout,
            level=log_level,
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}:{function}:{line}</cyan> | <level>{message}</level>",
        )

    if cfg.logging.file:
        log_path = Path(cfg.logging.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path,
            level=log_level,
            rotation=cfg.logging.rotation,
            retention=cfg.logging.retention,
            compression="zip",
            serialize=cfg.logging.json_format,
        )

    logger.info(f"Logging configured at {log_level} level")


async def startup() -> None:
    """Initialize application components."""
    global scheduler_service

    setup_logging(config)
    logger.info("Good morning, starting announcer...")

    try:
        reconciler = get_reconciler()
    except ConfigurationError as e:
        logger.error(f"Failed to start application: {e}")
        sys.exit(1)

    if config.dry_run:
        logger.warning("Running in dry-run mode, nothing is posted or stored")

    if config.scheduler.enabled:
        scheduler_service = SchedulerService(reconciler, config.scheduler)
        scheduler_service.initialize()
        await scheduler_service.start()

    logger.info("Application started successfully")


async def shutdown() -> None:
    """Gracefully shutdown application."""
    global scheduler_service

    logger.info("Shutting down application...")

    try:
        if scheduler_service is not None:
            await scheduler_service.stop()
            scheduler_service = None

        await reset_reconciler()
        logger.info("Application shutdown complete")

    except Exception as e:
        logger.error(f"Error during shutdown: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager.

    Args:
        app: FastAPI instance

    Yields:
        None
    """
    await startup()

    yield

    await shutdown()


app = FastAPI(
    title="announcer",
    description="Posts and edits Slack messages to match an announcement feed",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(reconcile_router)
app.include_router(health_router)
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/", response_class=PlainTextResponse)
async def root() -> str:
    """Greeting pointing at the feed."""
    return f"Hello, check out {config.feed.url.removesuffix('rss.xml')}!"


def run() -> None:
    """Serve the application with uvicorn."""
    import uvicorn

    uvicorn.run(
        "announcer.main:app",
        host=config.server.host,
        port=config.server.port,
        log_config=None,
        access_log=False,
    )


if __name__ == "__main__":
    run()
