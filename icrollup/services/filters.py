"""Filter pipeline over enriched rollup rows."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Iterable

from icrollup.services.collation import contains_folded
from icrollup.services.domain import ActionStatus, RollupRow, is_delayed

DELAYED = "DELAYED"
CONTINUOUS = "CONTINUOUS"

# Real statuses, the synthetic one and the two pseudo-statuses
STATUS_FILTER_VALUES = tuple(s.value for s in ActionStatus) + (DELAYED, CONTINUOUS)

Predicate = Callable[[RollupRow], bool]


@dataclass(frozen=True)
class FilterState:
    """Active filter controls; ``None``/empty means pass-through."""

    component_id: str | None = None
    standard_id: str | None = None
    responsible_department_id: str | None = None
    collaborating_department_id: str | None = None
    search: str | None = None
    status: str | None = None

    def without_status(self) -> FilterState:
        return replace(self, status=None)

    def without_component(self) -> FilterState:
        return replace(self, component_id=None)

    def toggle_component(self, component_id: str) -> FilterState:
        """Clicking a component card selects it, clicking again clears it."""
        if self.component_id == component_id:
            return replace(self, component_id=None)
        return replace(self, component_id=component_id)


def _matches_search(row: RollupRow, term: str) -> bool:
    return any(contains_folded(value, term) for value in (row.code, row.title, row.description))


def matches_status(row: RollupRow, status: str) -> bool:
    """Status predicate including the DELAYED and CONTINUOUS pseudo-statuses."""
    if status == DELAYED:
        return is_delayed(row)
    if status == CONTINUOUS:
        return row.is_continuous is True
    return row.status.value == status


def build_predicates(state: FilterState) -> list[Predicate]:
    """Predicates for every active non-status filter, in pipeline order."""
    predicates: list[Predicate] = []

    if state.component_id:
        component_id = state.component_id
        predicates.append(lambda r: r.classification.component_id == component_id)
    if state.standard_id:
        standard_id = state.standard_id
        predicates.append(lambda r: r.classification.standard_id == standard_id)
    if state.responsible_department_id:
        responsible_id = state.responsible_department_id
        predicates.append(lambda r: not r.is_synthetic and r.responsible.covers(responsible_id))
    if state.collaborating_department_id:
        collaborating_id = state.collaborating_department_id
        predicates.append(lambda r: not r.is_synthetic and r.collaborating.covers(collaborating_id))
    if state.search and state.search.strip():
        term = state.search.strip()
        predicates.append(lambda r: _matches_search(r, term))

    return predicates


def apply_filters(rows: Iterable[RollupRow], state: FilterState) -> tuple[list[RollupRow], list[RollupRow]]:
    """Run the pipeline and return ``(pre_status, final)``.

    ``pre_status`` has every filter except the status one applied; the
    statistics are computed from it so that toggling the status filter
    leaves their denominators untouched. ``final`` additionally applies the
    status filter.
    """
    predicates = build_predicates(state)
    pre_status = [row for row in rows if all(p(row) for p in predicates)]

    if not state.status:
        return pre_status, list(pre_status)
    final = [row for row in pre_status if matches_status(row, state.status)]
    return pre_status, final
