"""FastAPI application factory and lifecycle wiring."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import uvicorn
from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from pika_docs.config import load_settings
from pika_docs.database.client import CosmosClient
from pika_docs.events import ServiceBusPublisher
from pika_docs.logging import configure_logging
from pika_docs.routes import assignment_docs, assignments, health, register_error_handlers

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from pika_docs.config import CosmosConfig

logger = logging.getLogger(__name__)

_DEV_SECRET = "pika-dev-secret"  # noqa: S105


async def init_database(config: CosmosConfig) -> CosmosClient:
    """Open the Cosmos DB client."""
    cosmos = CosmosClient(config)
    await cosmos.initialize()
    return cosmos


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = app.state.settings
    cosmos = await init_database(settings.cosmos)
    publisher = ServiceBusPublisher(settings.servicebus)
    app.state.cosmos = cosmos
    app.state.event_publisher = publisher
    logger.info("Pika docs API started: env=%s", settings.app.env)
    try:
        yield
    finally:
        await publisher.close()
        await cosmos.close()
        logger.info("Pika docs API stopped")


def create_app() -> FastAPI:
    """Build the API with settings, logging and session middleware in place."""
    settings = load_settings()
    configure_logging(settings.app.log_level)

    secret_key = settings.app.secret_key
    if not secret_key:
        if not settings.app.is_development:
            raise RuntimeError("APP_SECRET_KEY must be set outside development")
        logger.warning("APP_SECRET_KEY is not set, using the development secret")
        secret_key = _DEV_SECRET

    app = FastAPI(title="Pika Docs", lifespan=lifespan)
    app.state.settings = settings
    app.add_middleware(
        SessionMiddleware,
        secret_key=secret_key,
        https_only=not settings.app.is_development,
    )
    register_error_handlers(app)
    app.include_router(health.router)
    app.include_router(assignment_docs.router)
    app.include_router(assignments.router)
    return app


def main() -> None:
    """Run the API with uvicorn."""
    uvicorn.run("pika_docs.app:create_app", factory=True, host="0.0.0.0", port=8000)  # noqa: S104
