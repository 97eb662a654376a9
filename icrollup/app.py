"""IC Action Rollup — FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from icrollup.config import Settings, get_settings
from icrollup.middleware import (
    configure_cors,
    configure_error_handlers,
    configure_rate_limiting,
    lifespan,
    logging_middleware,
)
from icrollup.routers import actions, health, plans
from icrollup.services.datastore_client import DataStoreClient
from icrollup.services.snapshot import DataSource
from icrollup.store import data_store


def build_data_source(settings: Settings) -> DataSource:
    """REST client when a data-store url is configured, else the in-memory store."""
    if settings.uses_remote_datastore:
        return DataStoreClient(
            base_url=settings.datastore_url,
            api_key=settings.datastore_api_key,
            timeout=settings.datastore_timeout_seconds,
        )
    return data_store


def create_app(settings: Settings | None = None, data_source: DataSource | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Consolidated action view of an internal-control action plan",
        version=settings.app_version,
        lifespan=lifespan,
    )

    # Store settings and the data source on app state
    app.state.settings = settings
    app.state.data_source = data_source if data_source is not None else build_data_source(settings)

    # Middleware
    app.middleware("http")(logging_middleware)
    configure_cors(app, settings)
    configure_rate_limiting(app, settings)
    configure_error_handlers(app)

    # Routers
    app.include_router(health.router)
    app.include_router(plans.router)
    app.include_router(actions.router)

    return app


# Default app instance for uvicorn
app = create_app()
