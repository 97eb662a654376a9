"""All Actions rollup API endpoints."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from fastapi.responses import StreamingResponse

from icrollup.context import RequestContext, get_request_context
from icrollup.routers.plans import get_data_source, resolve_plan_id
from icrollup.schemas.rollup import (
    ActionRow,
    AppliedControls,
    ComponentNode,
    ComponentStat,
    ConditionNode,
    GlobalStats,
    RollupResponse,
    StandardNode,
    StatsResponse,
)
from icrollup.services.domain import STATUS_LABELS, AllUnits, RealAction, RollupRow, is_delayed
from icrollup.services.exporters import build_export_matrix, export_pdf, export_xlsx
from icrollup.services.filters import STATUS_FILTER_VALUES, FilterState
from icrollup.services.grouping import ComponentGroup
from icrollup.services.rollup_engine import RollupView, SnapshotLoader, compute_rollup_view
from icrollup.services.snapshot import DataSource
from icrollup.services.sorting import SORT_KEYS, SortState

router = APIRouter(prefix="/api/actions", tags=["actions"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class RollupControls:
    """Filter, sort and reference-date query parameters of the rollup."""

    def __init__(
        self,
        component_id: str | None = Query(default=None),
        standard_id: str | None = Query(default=None),
        responsible_department_id: str | None = Query(default=None),
        collaborating_department_id: str | None = Query(default=None),
        search: str | None = Query(default=None, max_length=200),
        status: str | None = Query(default=None),
        sort: str = Query(default="delay"),
        direction: str = Query(default="asc", pattern=r"^(asc|desc)$"),
        as_of: date | None = Query(default=None, description="Reference date for delay calculation"),
    ) -> None:
        if status and status not in STATUS_FILTER_VALUES:
            raise HTTPException(status_code=422, detail=f"Unknown status filter '{status}'")
        if sort not in SORT_KEYS:
            raise HTTPException(status_code=422, detail=f"Unknown sort key '{sort}'")

        self.filters = FilterState(
            component_id=component_id or None,
            standard_id=standard_id or None,
            responsible_department_id=responsible_department_id or None,
            collaborating_department_id=collaborating_department_id or None,
            search=search or None,
            status=status or None,
        )
        self.sort = SortState(key=sort, ascending=direction == "asc")
        self.as_of = as_of


async def _load_view(
    request: Request,
    plan_id: str,
    ctx: RequestContext,
    source: DataSource,
    controls: RollupControls,
) -> RollupView:
    plan_id = await resolve_plan_id(source, ctx, plan_id)
    loader = SnapshotLoader(source, retries=request.app.state.settings.datastore_retries)
    snapshot = await loader.load(ctx, plan_id)
    if snapshot is None:
        raise HTTPException(status_code=503, detail=loader.error)
    return compute_rollup_view(snapshot, controls.filters, controls.sort, controls.as_of)


def _action_row(row: RollupRow) -> ActionRow:
    base = {
        "id": row.id,
        "code": row.code,
        "title": row.title,
        "description": row.description,
        "status": row.status.value,
        "status_label": STATUS_LABELS[row.status],
        "is_synthetic": row.is_synthetic,
        "progress": row.progress,
        "target_date": row.target_date,
        "is_continuous": row.is_continuous,
        "delay_days": row.delay_days,
        "is_delayed": is_delayed(row),
    }
    if not isinstance(row, RealAction):
        return ActionRow(**base)

    record = row.record
    return ActionRow(
        **base,
        start_date=record.start_date,
        completion_date=record.completion_date,
        all_units_responsible=isinstance(record.responsible, AllUnits),
        responsible_departments=list(row.responsible_names),
        responsible_special_units=list(row.responsible_special_labels),
        all_units_collaborating=isinstance(record.collaborating, AllUnits),
        collaborating_departments=list(row.collaborating_names),
        collaborating_special_units=list(row.collaborating_special_labels),
        output_result=record.output_result,
        notes=record.notes,
    )


def _component_node(component: ComponentGroup) -> ComponentNode:
    return ComponentNode(
        key=component.key,
        id=component.id,
        code=component.code,
        name=component.name,
        standards=[
            StandardNode(
                key=standard.key,
                code=standard.code,
                name=standard.name,
                conditions=[
                    ConditionNode(
                        key=condition.key,
                        code=condition.code,
                        description=condition.description,
                        current_situation=condition.current_situation,
                        provides_reasonable_assurance=condition.provides_reasonable_assurance,
                        actions=[_action_row(r) for r in condition.rows],
                    )
                    for condition in standard.conditions
                ],
            )
            for standard in component.standards
        ],
    )


def _export_filename(extension: str, on: date) -> str:
    return f"Eylem_Plani_{on.isoformat()}.{extension}"


@router.get("/{plan_id}", response_model=RollupResponse)
async def get_rollup(
    plan_id: str,
    request: Request,
    controls: RollupControls = Depends(),
    ctx: RequestContext = Depends(get_request_context),
    source: DataSource = Depends(get_data_source),
) -> RollupResponse:
    """Grouped, filtered and sorted All Actions view of a plan (``active`` allowed)."""
    view = await _load_view(request, plan_id, ctx, source, controls)
    stats = view.global_stats

    summary = (
        f"{len(view.rows)} row(s) shown across {len(view.tree)} component(s). "
        f"{stats['total']} action(s) in scope, {stats['delayed']} delayed, "
        f"{stats['no_action']} condition(s) need no action."
    )

    return RollupResponse(
        plan_id=view.plan_id,
        generated_on=view.today,
        controls=AppliedControls(
            component_id=view.filters.component_id,
            standard_id=view.filters.standard_id,
            responsible_department_id=view.filters.responsible_department_id,
            collaborating_department_id=view.filters.collaborating_department_id,
            search=view.filters.search,
            status=view.filters.status,
            sort=view.sort.key,
            direction="asc" if view.sort.ascending else "desc",
        ),
        visible_count=len(view.rows),
        tree=[_component_node(c) for c in view.tree],
        stats=GlobalStats(**stats),
        component_stats=[ComponentStat(**c) for c in view.component_stats],
        summary=summary,
    )


@router.get("/{plan_id}/stats", response_model=StatsResponse)
async def get_rollup_stats(
    plan_id: str,
    request: Request,
    controls: RollupControls = Depends(),
    ctx: RequestContext = Depends(get_request_context),
    source: DataSource = Depends(get_data_source),
) -> StatsResponse:
    """Global and per-component counters only."""
    view = await _load_view(request, plan_id, ctx, source, controls)
    return StatsResponse(
        plan_id=view.plan_id,
        stats=GlobalStats(**view.global_stats),
        component_stats=[ComponentStat(**c) for c in view.component_stats],
    )


@router.get("/{plan_id}/export.xlsx")
async def export_rollup_xlsx(
    plan_id: str,
    request: Request,
    controls: RollupControls = Depends(),
    ctx: RequestContext = Depends(get_request_context),
    source: DataSource = Depends(get_data_source),
) -> StreamingResponse:
    """Download the rollup as a spreadsheet."""
    view = await _load_view(request, plan_id, ctx, source, controls)
    buf = export_xlsx(build_export_matrix(list(view.tree)))
    filename = _export_filename("xlsx", view.today)
    return StreamingResponse(
        buf,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{plan_id}/export.pdf")
async def export_rollup_pdf(
    plan_id: str,
    request: Request,
    controls: RollupControls = Depends(),
    ctx: RequestContext = Depends(get_request_context),
    source: DataSource = Depends(get_data_source),
) -> Response:
    """Download the rollup as a printable PDF table."""
    view = await _load_view(request, plan_id, ctx, source, controls)
    content = export_pdf(build_export_matrix(list(view.tree)), generated_on=view.today)
    filename = _export_filename("pdf", view.today)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
