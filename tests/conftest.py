"""Shared test fixtures for the action rollup test suite."""

from __future__ import annotations

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from icrollup.app import create_app
from icrollup.config import Settings
from icrollup.services.domain import (
    ActionRecord,
    ActionStatus,
    AllUnits,
    Component,
    Condition,
    Department,
    ExplicitUnits,
    PlanSnapshot,
    SpecialUnit,
    Standard,
)
from icrollup.store import data_store

TODAY = date(2026, 3, 15)
ORG_ID = "org-1"
PLAN_ID = "plan-1"


def _test_settings() -> Settings:
    """Return settings suitable for testing."""
    return Settings(
        environment="development",
        debug=True,
        log_format="console",
        rate_limit_default="1000/minute",
        rate_limit_burst="2000/minute",
        allowed_origins="http://localhost:5173,http://localhost:3000",
        datastore_url="",
    )


@pytest.fixture
def settings():
    """Test settings."""
    return _test_settings()


@pytest.fixture
def app(settings):
    """Create a fresh FastAPI app backed by the in-memory store."""
    return create_app(settings, data_source=data_store)


@pytest.fixture
def client(app):
    """HTTP test client."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def reset_store():
    """Reset the global data store before each test."""
    data_store.reset()
    yield
    data_store.reset()


@pytest.fixture
def today():
    """Fixed reference date for delay calculations."""
    return TODAY


@pytest.fixture
def headers():
    """Tenant headers of the sample organisation."""
    return {"X-Organization-ID": ORG_ID, "X-User-ID": "user-1"}


@pytest.fixture
def sample_snapshot():
    """KOS → KOS-1 with C1 (narrative only) and C2 (two actions)."""
    return PlanSnapshot(
        plan_id=PLAN_ID,
        actions=(
            ActionRecord(
                id="a-1",
                code="KOS1.2.1",
                title="Görev tanımlarının güncellenmesi",
                condition_id="cond-2",
                status=ActionStatus.COMPLETED,
                progress=100,
                target_date=TODAY - timedelta(days=10),
                completion_date=TODAY - timedelta(days=12),
                responsible=ExplicitUnits(department_ids=("d-1",)),
                output_result="Güncel görev tanımları",
            ),
            ActionRecord(
                id="a-2",
                code="KOS1.2.2",
                title="Hassas görevlerin belirlenmesi",
                condition_id="cond-2",
                status=ActionStatus.IN_PROGRESS,
                progress=40,
                target_date=TODAY - timedelta(days=1),
                responsible=AllUnits(),
                collaborating=ExplicitUnits(
                    department_ids=("d-2",),
                    special_units=(SpecialUnit.TOP_MANAGEMENT,),
                ),
            ),
        ),
        conditions=(
            Condition(id="cond-1", code="KOS1.1", description="Etik kurallar bilinmelidir.", standard_id="std-1"),
            Condition(id="cond-2", code="KOS1.2", description="Görevler yazılı olmalıdır.", standard_id="std-1"),
        ),
        standards=(
            Standard(id="std-1", code="KOS-1", name="Etik Değerler ve Dürüstlük", component_id="comp-kos"),
        ),
        components=(
            Component(id="comp-kos", code="KOS", name="Kontrol Ortamı"),
        ),
        departments=(
            Department(id="d-1", name="Mali Hizmetler"),
            Department(id="d-2", name="İnsan Kaynakları"),
        ),
        current_situations={"cond-1": "ok"},
    )


@pytest.fixture
def sample_plan():
    """Load the sample scenario into the in-memory store; returns the plan id."""
    data_store.add_plan(ORG_ID, {"id": "plan-old", "name": "2025 Eylem Planı", "is_active": False})
    data_store.add_plan(ORG_ID, {"id": PLAN_ID, "name": "2026 Eylem Planı", "is_active": True})
    data_store.add_department(ORG_ID, {"id": "d-1", "name": "Mali Hizmetler"})
    data_store.add_department(ORG_ID, {"id": "d-2", "name": "İnsan Kaynakları"})

    data_store.add_component({"id": "comp-kos", "code": "KOS", "name": "Kontrol Ortamı", "order_index": 0})
    data_store.add_standard({
        "id": "std-1", "code": "KOS-1", "name": "Etik Değerler ve Dürüstlük", "component_id": "comp-kos",
    })
    data_store.add_condition({
        "id": "cond-1", "code": "KOS1.1", "description": "Etik kurallar bilinmelidir.", "standard_id": "std-1",
    })
    data_store.add_condition({
        "id": "cond-2", "code": "KOS1.2", "description": "Görevler yazılı olmalıdır.", "standard_id": "std-1",
    })

    data_store.add_action(ORG_ID, PLAN_ID, {
        "id": "a-1",
        "code": "KOS1.2.1",
        "title": "Görev tanımlarının güncellenmesi",
        "condition_id": "cond-2",
        "status": "COMPLETED",
        "progress": 100,
        "target_date": (TODAY - timedelta(days=10)).isoformat(),
        "completion_date": (TODAY - timedelta(days=12)).isoformat(),
        "responsible_department_ids": ["d-1"],
        "output_result": "Güncel görev tanımları",
    })
    data_store.add_action(ORG_ID, PLAN_ID, {
        "id": "a-2",
        "code": "KOS1.2.2",
        "title": "Hassas görevlerin belirlenmesi",
        "condition_id": "cond-2",
        "status": "IN_PROGRESS",
        "progress": 40,
        "target_date": (TODAY - timedelta(days=1)).isoformat(),
        "all_units_responsible": True,
        "collaborating_department_ids": ["d-2"],
        "special_collaborating_types": ["TOP_MANAGEMENT"],
    })
    data_store.set_current_situation(ORG_ID, PLAN_ID, "cond-1", "ok")
    return PLAN_ID
