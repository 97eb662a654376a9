"""Enrichment pass — derived read-time fields and synthetic NO_ACTION rows."""

from __future__ import annotations

from datetime import date

from icrollup.services.domain import (
    DELAY_EXEMPT_STATUSES,
    SPECIAL_UNIT_LABELS,
    ActionRecord,
    Assignment,
    Classification,
    Component,
    Condition,
    ExplicitUnits,
    PlanSnapshot,
    RealAction,
    RollupRow,
    Standard,
    UnaddressedCondition,
)


def calculate_delay_days(record: ActionRecord, today: date) -> int:
    """Whole days an action is past its target date.

    Zero when there is no target date, the target is today or later, or
    the status is exempt from delay (completed, cancelled, ongoing).
    """
    if record.target_date is None or record.status in DELAY_EXEMPT_STATUSES:
        return 0
    if record.target_date >= today:
        return 0
    return (today - record.target_date).days


def resolve_department_names(assignment: Assignment, department_names: dict[str, str]) -> tuple[str, ...]:
    """Names for the explicit department ids; empty for ``AllUnits``.

    Ids that no longer resolve are skipped.
    """
    if not isinstance(assignment, ExplicitUnits):
        return ()
    return tuple(department_names[d] for d in assignment.department_ids if d in department_names)


def resolve_special_labels(assignment: Assignment) -> tuple[str, ...]:
    if not isinstance(assignment, ExplicitUnits):
        return ()
    return tuple(SPECIAL_UNIT_LABELS[u] for u in assignment.special_units)


def classify(
    condition_id: str | None,
    conditions: dict[str, Condition],
    standards: dict[str, Standard],
    components: dict[str, Component],
    current_situations: dict[str, str],
) -> Classification:
    """Follow condition → standard → component; broken links stay ``None``."""
    condition = conditions.get(condition_id) if condition_id else None
    standard = standards.get(condition.standard_id) if condition and condition.standard_id else None
    component = components.get(standard.component_id) if standard and standard.component_id else None

    return Classification(
        condition_id=condition.id if condition else condition_id,
        condition_code=condition.code if condition else None,
        condition_description=condition.description if condition else None,
        provides_reasonable_assurance=condition.provides_reasonable_assurance if condition else False,
        current_situation=current_situations.get(condition_id) if condition_id else None,
        standard_id=standard.id if standard else None,
        standard_code=standard.code if standard else None,
        standard_name=standard.name if standard else None,
        component_id=component.id if component else None,
        component_code=component.code if component else None,
        component_name=component.name if component else None,
    )


def enrich_snapshot(snapshot: PlanSnapshot, today: date | None = None) -> list[RollupRow]:
    """Turn a plan snapshot into the flat list of rollup rows.

    Every persisted action becomes a ``RealAction``; every condition with a
    "current situation" narrative but no linked action becomes exactly one
    ``UnaddressedCondition``. Lookup tables are indexed once, so the pass is
    linear in the snapshot size. The output order carries no meaning.
    """
    if today is None:
        today = date.today()

    conditions = {c.id: c for c in snapshot.conditions}
    standards = {s.id: s for s in snapshot.standards}
    components = {c.id: c for c in snapshot.components}
    department_names = {d.id: d.name for d in snapshot.departments}
    current_situations = dict(snapshot.current_situations)

    rows: list[RollupRow] = []
    addressed: set[str] = set()

    for record in snapshot.actions:
        if record.condition_id:
            addressed.add(record.condition_id)
        rows.append(RealAction(
            record=record,
            classification=classify(record.condition_id, conditions, standards, components, current_situations),
            delay_days=calculate_delay_days(record, today),
            responsible_names=resolve_department_names(record.responsible, department_names),
            collaborating_names=resolve_department_names(record.collaborating, department_names),
            responsible_special_labels=resolve_special_labels(record.responsible),
            collaborating_special_labels=resolve_special_labels(record.collaborating),
        ))

    for condition_id in current_situations:
        if condition_id in addressed:
            continue
        rows.append(UnaddressedCondition(
            classification=classify(condition_id, conditions, standards, components, current_situations),
        ))

    return rows
