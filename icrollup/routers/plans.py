"""Action plan endpoints and plan resolution helpers."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request

from icrollup.context import RequestContext, get_request_context
from icrollup.schemas.plans import PlanListResponse, PlanResponse
from icrollup.services.datastore_client import DataStoreClientError
from icrollup.services.domain import ActionPlan
from icrollup.services.snapshot import DataSource, parse_plan, pick_active_plan

logger = structlog.get_logger()

router = APIRouter(prefix="/api/plans", tags=["plans"])

ACTIVE_PLAN = "active"


def get_data_source(request: Request) -> DataSource:
    """The data source configured on the application."""
    return request.app.state.data_source


async def _load_plans(source: DataSource, ctx: RequestContext) -> list[ActionPlan]:
    try:
        return [parse_plan(p) for p in await source.fetch_plans(ctx)]
    except DataStoreClientError as exc:
        logger.error("plan_list_failed", organization_id=ctx.organization_id, error=str(exc))
        raise HTTPException(status_code=503, detail="Plan list could not be loaded")


async def resolve_plan_id(source: DataSource, ctx: RequestContext, plan_id: str) -> str:
    """Map ``active`` to the organisation's active plan.

    Explicit ids must belong to the caller's organisation. Raises 404
    when the plan is unknown or no plan is active.
    """
    plans = await _load_plans(source, ctx)
    if plan_id == ACTIVE_PLAN:
        active = pick_active_plan(plans)
        if active is None:
            raise HTTPException(status_code=404, detail="No active action plan for this organisation")
        return active.id
    if not any(p.id == plan_id for p in plans):
        raise HTTPException(status_code=404, detail=f"Action plan '{plan_id}' not found")
    return plan_id


@router.get("", response_model=PlanListResponse)
async def list_plans(
    ctx: RequestContext = Depends(get_request_context),
    source: DataSource = Depends(get_data_source),
) -> PlanListResponse:
    """List the organisation's action plans."""
    plans = await _load_plans(source, ctx)

    active = pick_active_plan(plans)
    return PlanListResponse(
        organization_id=ctx.organization_id,
        active_plan_id=active.id if active else None,
        plans=[PlanResponse(id=p.id, name=p.name, is_active=p.is_active) for p in plans],
    )


@router.get("/active", response_model=PlanResponse)
async def get_active_plan(
    ctx: RequestContext = Depends(get_request_context),
    source: DataSource = Depends(get_data_source),
) -> PlanResponse:
    """The default plan selection of the organisation."""
    plans = await _load_plans(source, ctx)

    plan = pick_active_plan(plans)
    if plan is None:
        raise HTTPException(status_code=404, detail="No active action plan for this organisation")
    return PlanResponse(id=plan.id, name=plan.name, is_active=plan.is_active)
