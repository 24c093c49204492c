from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from src.core.config import config
from src.core.errors import ConfigurationError
from src.core.utils.logging import configure_logging
from src.integrations.github import github_client_factory
from src.webhooks.dispatcher import get_dispatcher
from src.webhooks.router import router as webhook_router

# --- Application Setup ---

configure_logging(config.logging)
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Application startup and shutdown logic."""
    # Deliveries are rejected with 500 until the GitHub App settings are complete
    try:
        config.validate()
    except ConfigurationError as e:
        logger.warning("github_settings_missing", error=str(e), missing=config.missing_github_settings())

    # Build the handler registry once, before the first delivery
    dispatcher = get_dispatcher()
    logger.info("github_monitor_started", events=dispatcher.event_keys, environment=config.environment)

    yield

    await github_client_factory.close()
    logger.info("github_monitor_stopped")


app = FastAPI(
    title="GitHub Monitor",
    description="Policy enforcement for GitHub repositories driven by webhooks.",
    version="0.1.0",
    debug=config.debug,
    lifespan=lifespan,
)

# --- Include Routers ---

app.include_router(webhook_router, prefix="/webhooks", tags=["GitHub Webhooks"])

# --- Root Endpoint ---


@app.get("/", tags=["Health Check"])
async def read_root():
    """A simple health check endpoint to confirm the service is running."""
    return {"status": "ok", "message": "GitHub monitor is running."}
