"""Action rollup pipeline and snapshot loading.

enrich → filter (everything but status, then status) → sort/group →
statistics. Each stage consumes the previous stage's output and the whole
view is recomputed from scratch whenever the snapshot or a control
changes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any

import httpx
import structlog

from icrollup.context import RequestContext
from icrollup.services.datastore_client import DataStoreClientError
from icrollup.services.domain import PlanSnapshot, RollupRow
from icrollup.services.enrichment import enrich_snapshot
from icrollup.services.filters import FilterState, apply_filters
from icrollup.services.grouping import ComponentGroup, build_tree
from icrollup.services.snapshot import DataSource, fetch_plan_snapshot
from icrollup.services.sorting import SortState
from icrollup.services.statistics import compute_component_stats, compute_global_stats

logger = structlog.get_logger()


@dataclass(frozen=True)
class RollupView:
    """Everything the All Actions screen (or an export) renders."""

    plan_id: str
    filters: FilterState
    sort: SortState
    today: date
    tree: tuple[ComponentGroup, ...]
    rows: tuple[RollupRow, ...]
    global_stats: dict[str, Any] = field(default_factory=dict)
    component_stats: tuple[dict[str, Any], ...] = ()


def compute_rollup_view(
    snapshot: PlanSnapshot,
    filters: FilterState | None = None,
    sort: SortState | None = None,
    today: date | None = None,
) -> RollupView:
    """Run the full pipeline over a snapshot. Pure for a fixed ``today``."""
    filters = filters or FilterState()
    sort = sort or SortState()
    today = today or date.today()

    enriched = enrich_snapshot(snapshot, today)
    pre_status, final = apply_filters(enriched, filters)
    tree = build_tree(final, sort)

    view = RollupView(
        plan_id=snapshot.plan_id,
        filters=filters,
        sort=sort,
        today=today,
        tree=tuple(tree),
        rows=tuple(row for component in tree for row in component.rows),
        global_stats=compute_global_stats(pre_status),
        component_stats=tuple(compute_component_stats(enriched, pre_status, filters.component_id)),
    )
    logger.debug(
        "rollup_computed",
        plan_id=snapshot.plan_id,
        enriched=len(enriched),
        visible=len(view.rows),
        sort=sort.key,
    )
    return view


# ─── Loading ─────────────────────────────────────────────────────────────────

class LoadState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class SnapshotLoader:
    """Loads plan snapshots with one retry and an explicit state.

    ``IDLE → LOADING → READY | FAILED``. A failed load never raises: it is
    logged, the state becomes ``FAILED`` with a generic message, and the
    previously loaded snapshot (if any) is kept.
    """

    def __init__(self, source: DataSource, retries: int = 1) -> None:
        self.source = source
        self.retries = retries
        self.state = LoadState.IDLE
        self.snapshot: PlanSnapshot | None = None
        self.error: str | None = None

    async def load(self, ctx: RequestContext, plan_id: str) -> PlanSnapshot | None:
        self.state = LoadState.LOADING
        self.error = None
        attempts = self.retries + 1

        for attempt in range(1, attempts + 1):
            try:
                snapshot = await fetch_plan_snapshot(self.source, ctx, plan_id)
            except (DataStoreClientError, httpx.HTTPError) as exc:
                logger.warning(
                    "snapshot_load_attempt_failed",
                    plan_id=plan_id,
                    organization_id=ctx.organization_id,
                    attempt=attempt,
                    error=str(exc),
                )
                continue

            self.snapshot = snapshot
            self.state = LoadState.READY
            logger.info(
                "snapshot_loaded",
                plan_id=plan_id,
                organization_id=ctx.organization_id,
                actions=len(snapshot.actions),
                conditions=len(snapshot.conditions),
            )
            return snapshot

        self.state = LoadState.FAILED
        self.error = "Eylem verileri yüklenemedi"
        logger.error("snapshot_load_failed", plan_id=plan_id, organization_id=ctx.organization_id, attempts=attempts)
        return None
