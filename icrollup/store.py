"""In-memory data store for the rollup service.

Serves the same bulk queries as the REST data-store client and is used
during development and testing. In production the hosted backend is
queried through ``DataStoreClient``.
"""

from __future__ import annotations

from typing import Any

from icrollup.context import RequestContext


class DataStore:
    """In-memory tables keyed the way the backend scopes them."""

    def __init__(self) -> None:
        self.plans: dict[str, list[dict[str, Any]]] = {}  # org_id -> plans
        self.departments: dict[str, list[dict[str, Any]]] = {}  # org_id -> departments
        self.actions: dict[str, list[dict[str, Any]]] = {}  # plan_id -> actions
        self.assessments: dict[str, list[dict[str, Any]]] = {}  # plan_id -> assessments
        # Taxonomy is shared by every tenant
        self.components: dict[str, dict[str, Any]] = {}
        self.standards: dict[str, dict[str, Any]] = {}
        self.conditions: dict[str, dict[str, Any]] = {}

    def reset(self) -> None:
        """Clear all data — used in tests."""
        self.__init__()

    def add_plan(self, org_id: str, plan: dict[str, Any]) -> None:
        """Add an action plan; activating it deactivates the others."""
        plans = self.plans.setdefault(org_id, [])
        if plan.get("is_active"):
            for existing in plans:
                existing["is_active"] = False
        plans.append({"organization_id": org_id, **plan})

    def add_department(self, org_id: str, department: dict[str, Any]) -> None:
        self.departments.setdefault(org_id, []).append({"organization_id": org_id, **department})

    def add_component(self, component: dict[str, Any]) -> None:
        self.components[component["id"]] = component

    def add_standard(self, standard: dict[str, Any]) -> None:
        self.standards[standard["id"]] = standard

    def add_condition(self, condition: dict[str, Any]) -> None:
        self.conditions[condition["id"]] = condition

    def add_action(self, org_id: str, plan_id: str, action: dict[str, Any]) -> None:
        self.actions.setdefault(plan_id, []).append(
            {"organization_id": org_id, "action_plan_id": plan_id, **action}
        )

    def set_current_situation(
        self, org_id: str, plan_id: str, condition_id: str, text: str
    ) -> None:
        """Record the "current situation" narrative of a condition for a plan."""
        rows = self.assessments.setdefault(plan_id, [])
        for row in rows:
            if row["condition_id"] == condition_id:
                row["current_situation"] = text
                return
        rows.append({
            "organization_id": org_id,
            "action_plan_id": plan_id,
            "condition_id": condition_id,
            "current_situation": text,
        })

    def _scoped(self, rows: list[dict[str, Any]], ctx: RequestContext) -> list[dict[str, Any]]:
        return [dict(r) for r in rows if r.get("organization_id") == ctx.organization_id]

    # Bulk queries, same shape as DataStoreClient

    async def fetch_plans(self, ctx: RequestContext) -> list[dict[str, Any]]:
        return [dict(p) for p in self.plans.get(ctx.organization_id, [])]

    async def fetch_actions(self, ctx: RequestContext, plan_id: str) -> list[dict[str, Any]]:
        return self._scoped(self.actions.get(plan_id, []), ctx)

    async def fetch_condition_assessments(self, ctx: RequestContext, plan_id: str) -> list[dict[str, Any]]:
        return self._scoped(self.assessments.get(plan_id, []), ctx)

    async def fetch_conditions(self, ctx: RequestContext, ids: list[str]) -> list[dict[str, Any]]:
        return [dict(self.conditions[i]) for i in ids if i in self.conditions]

    async def fetch_standards(self, ctx: RequestContext, ids: list[str]) -> list[dict[str, Any]]:
        return [dict(self.standards[i]) for i in ids if i in self.standards]

    async def fetch_components(self, ctx: RequestContext, ids: list[str]) -> list[dict[str, Any]]:
        return [dict(self.components[i]) for i in ids if i in self.components]

    async def fetch_departments(self, ctx: RequestContext) -> list[dict[str, Any]]:
        return [dict(d) for d in self.departments.get(ctx.organization_id, [])]


# Global singleton — replaced in tests
data_store = DataStore()
