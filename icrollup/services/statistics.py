"""Aggregate counters for the rollup view."""

from __future__ import annotations

import functools
from typing import Any, Iterable

from icrollup.services.domain import ActionStatus, RollupRow, is_delayed
from icrollup.services.grouping import OTHER_KEY, OTHER_LABEL, compare_component_codes


def _pct(count: int, total: int) -> float:
    if total == 0:
        return 0.0
    return round(count / total * 100, 1)


def compute_global_stats(rows: Iterable[RollupRow]) -> dict[str, Any]:
    """Counters over the pre-status-filter working set.

    ``total`` counts every real action, cancelled ones included, and the
    percentages use it as denominator; cancelled actions are reported but
    belong to none of the named buckets, so the percentages need not add
    up to 100. Synthetic NO_ACTION rows are only counted in ``no_action``.
    """
    rows = list(rows)
    real = [r for r in rows if not r.is_synthetic]
    no_action = len(rows) - len(real)
    total = len(real)

    counts = {
        "completed": sum(1 for r in real if r.status is ActionStatus.COMPLETED),
        "in_progress": sum(1 for r in real if r.status is ActionStatus.IN_PROGRESS),
        "not_started": sum(1 for r in real if r.status is ActionStatus.NOT_STARTED),
        "delayed": sum(1 for r in real if is_delayed(r)),
        "ongoing": sum(1 for r in real if r.status is ActionStatus.ONGOING),
        "continuous": sum(1 for r in real if r.is_continuous is True),
    }

    stats: dict[str, Any] = {"total": total}
    for name, count in counts.items():
        stats[name] = count
        stats[f"{name}_pct"] = _pct(count, total)
    stats["cancelled"] = sum(1 for r in real if r.status is ActionStatus.CANCELLED)
    stats["no_action"] = no_action
    return stats


def compute_component_stats(
    all_rows: list[RollupRow],
    working_rows: list[RollupRow],
    selected_component_id: str | None = None,
) -> list[dict[str, Any]]:
    """Per-component counters.

    One entry for each component present in ``all_rows`` (the unfiltered
    snapshot), counted over ``working_rows``, and ordered like the tree.
    """
    components: dict[str, dict[str, Any]] = {}
    for row in all_rows:
        cls = row.classification
        key = cls.component_code or OTHER_KEY
        if key not in components:
            components[key] = {
                "component_id": cls.component_id,
                "code": cls.component_code,
                "name": cls.component_name or OTHER_LABEL,
            }

    results = []
    for key in sorted(components, key=functools.cmp_to_key(compare_component_codes)):
        rows = [r for r in working_rows if (r.classification.component_code or OTHER_KEY) == key]
        real = [r for r in rows if not r.is_synthetic]
        entry = dict(components[key])
        entry.update({
            "standard_count": len({r.classification.standard_code for r in rows if r.classification.standard_code}),
            "condition_count": len({r.classification.condition_id for r in rows if r.classification.condition_id}),
            "reasonable_assurance_count": sum(
                1 for r in rows if r.is_synthetic and r.classification.provides_reasonable_assurance
            ),
            "action_count": len(real),
            "continuous": sum(1 for r in real if r.is_continuous is True),
            "not_started": sum(1 for r in real if r.status is ActionStatus.NOT_STARTED),
            "in_progress": sum(1 for r in real if r.status is ActionStatus.IN_PROGRESS),
            "delayed": sum(1 for r in real if is_delayed(r)),
            "selected": selected_component_id is not None and entry["component_id"] == selected_component_id,
        })
        results.append(entry)

    return results
