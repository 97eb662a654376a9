"""Tests for configuration, middleware, health endpoints and models."""

from __future__ import annotations

import inspect
from datetime import datetime, timezone

import httpx
import pytest
from fastapi.testclient import TestClient
from pydantic import ValidationError
from slowapi import Limiter
from sqlalchemy.orm import DeclarativeBase

from icrollup.app import build_data_source, create_app
from icrollup.config import Settings, get_settings
from icrollup.middleware import (
    configure_structured_logging,
    get_limiter,
    is_shutdown_requested,
    lifespan,
)
from icrollup.models import Action, ActionPlan, Base, ConditionAssessment, Department
from icrollup.models.base import utcnow
from icrollup.services.datastore_client import DataStoreClient
from icrollup.store import data_store


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.app_name == "IC Action Rollup"
        assert settings.datastore_retries == 1
        assert settings.uses_remote_datastore is False

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("ICROLLUP_DATASTORE_URL", "https://db.example.test")
        monkeypatch.setenv("ICROLLUP_DATASTORE_RETRIES", "3")
        settings = get_settings()
        assert settings.uses_remote_datastore is True
        assert settings.datastore_retries == 3

    def test_invalid_environment(self):
        with pytest.raises(ValidationError):
            Settings(environment="qa")

    def test_retries_bounded(self):
        with pytest.raises(ValidationError):
            Settings(datastore_retries=10)

    def test_allowed_origins_list(self):
        settings = Settings(allowed_origins="http://a.test, http://b.test")
        assert settings.allowed_origins_list == ["http://a.test", "http://b.test"]


class TestAppFactory:
    def test_memory_store_by_default(self, settings):
        assert build_data_source(settings) is data_store

    def test_rest_client_when_configured(self):
        source = build_data_source(Settings(datastore_url="https://db.example.test", datastore_api_key="k"))
        assert isinstance(source, DataStoreClient)
        assert source.base_url == "https://db.example.test"

    def test_routes_registered(self, app):
        paths = app.openapi()["paths"]
        assert "/api/plans" in paths
        assert "/api/actions/{plan_id}" in paths
        assert "/api/actions/{plan_id}/export.pdf" in paths

    def test_request_id_header(self, client):
        resp = client.get("/health/live", headers={"X-Request-ID": "req-42"})
        assert resp.headers["X-Request-ID"] == "req-42"


class TestMiddleware:
    def test_get_limiter(self, settings):
        assert isinstance(get_limiter(settings), Limiter)

    def test_structured_logging_json(self, settings):
        configure_structured_logging(settings.model_copy(update={"log_format": "json"}))

    def test_structured_logging_console(self, settings):
        configure_structured_logging(settings)

    def test_lifespan_is_async_context_manager(self):
        assert inspect.isasyncgenfunction(inspect.unwrap(lifespan))

    def test_lifespan_runs(self, app):
        with TestClient(app) as client:
            assert client.get("/health/live").status_code == 200
        assert is_shutdown_requested() is True


class TestHealth:
    def test_health(self, client):
        data = client.get("/health").json()
        assert data["status"] == "healthy"
        assert data["data_source"] == "memory"

    def test_ready_memory(self, client):
        data = client.get("/health/ready").json()
        assert data["status"] == "healthy"
        assert [s["service"] for s in data["services"]] == ["app"]

    def test_ready_rest_unreachable(self, settings):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        source = DataStoreClient("https://db.example.test", "k", transport=httpx.MockTransport(handler))
        client = TestClient(create_app(settings, data_source=source))
        data = client.get("/health/ready").json()
        assert data["status"] == "unhealthy"
        assert data["data_source"] == "rest"

    def test_live(self, client):
        assert client.get("/health/live").json() == {"status": "alive"}


class TestModels:
    def test_utcnow(self):
        now = utcnow()
        assert now.tzinfo == timezone.utc
        assert now <= datetime.now(timezone.utc)

    def test_base_is_declarative(self):
        assert issubclass(Base, DeclarativeBase)

    def test_table_names(self):
        assert ActionPlan.__tablename__ == "ic_action_plans"
        assert Action.__tablename__ == "ic_actions"
        assert ConditionAssessment.__tablename__ == "ic_condition_assessments"
        assert Department.__tablename__ == "departments"

    def test_action_columns_match_raw_rows(self):
        columns = {c.name for c in Action.__table__.columns}
        for name in (
            "all_units_responsible",
            "responsible_department_ids",
            "special_responsible_types",
            "all_units_collaborating",
            "collaborating_department_ids",
            "special_collaborating_types",
            "output_result",
            "notes",
        ):
            assert name in columns
