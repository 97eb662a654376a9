"""Bulk snapshot fetching and raw-row parsing.

Data sources (the in-memory store and the REST client) return plain
dicts shaped like the backend tables. This module turns them into the
frozen domain records, fetching each table once per plan selection.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Protocol

import structlog

from icrollup.context import RequestContext
from icrollup.services.domain import (
    PERSISTED_STATUSES,
    ActionPlan,
    ActionRecord,
    ActionStatus,
    Component,
    Condition,
    Department,
    PlanSnapshot,
    Standard,
    make_assignment,
)

logger = structlog.get_logger()

Row = dict[str, Any]


class DataSource(Protocol):
    """Bulk query interface of the backing data store.

    Every method returns a (possibly empty) list; "no rows" is never an
    error. Query failures surface as a single exception.
    """

    async def fetch_plans(self, ctx: RequestContext) -> list[Row]: ...

    async def fetch_actions(self, ctx: RequestContext, plan_id: str) -> list[Row]: ...

    async def fetch_condition_assessments(self, ctx: RequestContext, plan_id: str) -> list[Row]: ...

    async def fetch_conditions(self, ctx: RequestContext, ids: list[str]) -> list[Row]: ...

    async def fetch_standards(self, ctx: RequestContext, ids: list[str]) -> list[Row]: ...

    async def fetch_components(self, ctx: RequestContext, ids: list[str]) -> list[Row]: ...

    async def fetch_departments(self, ctx: RequestContext) -> list[Row]: ...


# ─── Parsing ─────────────────────────────────────────────────────────────────

def parse_date(value: Any) -> date | None:
    """Accept dates, ISO date strings and ISO timestamps; anything else is ``None``."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def parse_status(value: Any) -> ActionStatus:
    try:
        status = ActionStatus(str(value).upper())
    except ValueError:
        status = None
    if status not in PERSISTED_STATUSES:
        logger.warning("unknown_action_status", status=value)
        return ActionStatus.NOT_STARTED
    return status


def parse_progress(value: Any) -> int:
    try:
        progress = int(round(float(value)))
    except (TypeError, ValueError):
        return 0
    return max(0, min(100, progress))


def parse_action(raw: Row) -> ActionRecord:
    return ActionRecord(
        id=str(raw["id"]),
        code=raw.get("code") or "",
        title=raw.get("title") or "",
        condition_id=raw.get("condition_id"),
        status=parse_status(raw.get("status")),
        description=raw.get("description") or "",
        progress=parse_progress(raw.get("progress")),
        start_date=parse_date(raw.get("start_date")),
        target_date=parse_date(raw.get("target_date")),
        completion_date=parse_date(raw.get("completion_date")),
        is_continuous=bool(raw.get("is_continuous")),
        responsible=make_assignment(
            bool(raw.get("all_units_responsible")),
            raw.get("responsible_department_ids"),
            raw.get("special_responsible_types"),
        ),
        collaborating=make_assignment(
            bool(raw.get("all_units_collaborating")),
            raw.get("collaborating_department_ids"),
            raw.get("special_collaborating_types"),
        ),
        output_result=raw.get("output_result") or "",
        notes=raw.get("notes") or "",
    )


def parse_condition(raw: Row) -> Condition:
    return Condition(
        id=str(raw["id"]),
        code=raw.get("code") or "",
        description=raw.get("description") or "",
        standard_id=raw.get("standard_id"),
        provides_reasonable_assurance=bool(raw.get("provides_reasonable_assurance")),
    )


def parse_standard(raw: Row) -> Standard:
    return Standard(
        id=str(raw["id"]),
        code=raw.get("code") or "",
        name=raw.get("name") or "",
        component_id=raw.get("component_id"),
        order_index=int(raw.get("order_index") or 0),
    )


def parse_component(raw: Row) -> Component:
    return Component(
        id=str(raw["id"]),
        code=raw.get("code") or "",
        name=raw.get("name") or "",
        order_index=int(raw.get("order_index") or 0),
    )


def parse_department(raw: Row) -> Department:
    return Department(id=str(raw["id"]), name=raw.get("name") or "")


def parse_plan(raw: Row) -> ActionPlan:
    return ActionPlan(
        id=str(raw["id"]),
        organization_id=str(raw.get("organization_id") or ""),
        name=raw.get("name") or "",
        is_active=bool(raw.get("is_active")),
    )


def pick_active_plan(plans: list[ActionPlan]) -> ActionPlan | None:
    """The organisation's active plan; ``None`` when no plan is active."""
    for plan in plans:
        if plan.is_active:
            return plan
    return None


# ─── Fetching ────────────────────────────────────────────────────────────────

def _distinct(values) -> list[str]:
    return sorted({str(v) for v in values if v})


async def fetch_plan_snapshot(source: DataSource, ctx: RequestContext, plan_id: str) -> PlanSnapshot:
    """Fetch everything the rollup needs for one plan.

    One query per table: taxonomy rows are requested by the distinct id
    sets the actions and assessments reference, never row by row.
    """
    actions = [parse_action(r) for r in await source.fetch_actions(ctx, plan_id)]
    assessments = await source.fetch_condition_assessments(ctx, plan_id)

    current_situations = {
        str(a["condition_id"]): a["current_situation"]
        for a in assessments
        if a.get("condition_id") and (a.get("current_situation") or "").strip()
    }

    condition_ids = _distinct([a.condition_id for a in actions] + list(current_situations))
    conditions = [parse_condition(r) for r in await source.fetch_conditions(ctx, condition_ids)]

    standard_ids = _distinct(c.standard_id for c in conditions)
    standards = [parse_standard(r) for r in await source.fetch_standards(ctx, standard_ids)]

    component_ids = _distinct(s.component_id for s in standards)
    components = [parse_component(r) for r in await source.fetch_components(ctx, component_ids)]

    departments = [parse_department(r) for r in await source.fetch_departments(ctx)]

    return PlanSnapshot(
        plan_id=plan_id,
        actions=tuple(actions),
        conditions=tuple(conditions),
        standards=tuple(standards),
        components=tuple(components),
        departments=tuple(departments),
        current_situations=current_situations,
    )
