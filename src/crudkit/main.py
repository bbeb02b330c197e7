"""
Application factory.

    uvicorn crudkit.main:create_app --factory

`create_app` accepts an already-open database handle so tests can run the full
HTTP stack against an in-memory collection double; without one, the lifespan
opens the Mongo client on startup and closes it on shutdown.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from crudkit.api.v1.error_handlers import register_exception_handlers
from crudkit.api.v1.routers import api_router, health_router
from crudkit.config.settings import Settings, get_settings
from crudkit.container import build_container
from crudkit.core.logging import RequestIDMiddleware, setup_logging
from crudkit.database.client import create_client, ensure_indexes, get_database
from crudkit.exceptions.base import DatabaseError
from crudkit.utils.metadata import get_project_version

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, database=None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = None
        if app.state.database is None:
            client = create_client(settings)
            app.state.database = get_database(client, settings)
            app.state.container = build_container(settings, app.state.database)

        try:
            await ensure_indexes(app.state.database)
        except DatabaseError as exc:
            # the app still starts; /health reports the store as unavailable
            logger.warning("app.startup.indexes_failed", extra={"kind": exc.kind.value})

        logger.info("app.startup", extra={"env": settings.ENV, "database": settings.DATABASE_NAME})
        try:
            yield
        finally:
            if client is not None:
                await client.close()
            logger.info("app.shutdown")

    app = FastAPI(title=settings.APP_NAME, version=get_project_version(default="0.0.0"), lifespan=lifespan)

    app.state.settings = settings
    app.state.database = database
    app.state.container = build_container(settings, database) if database is not None else None

    app.add_middleware(RequestIDMiddleware)
    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(api_router)
    return app
