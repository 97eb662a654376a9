"""Domain records for the internal-control action rollup.

The rollup works on immutable snapshots: every record here is a frozen
dataclass, and each pipeline stage returns new values instead of mutating
its input.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Mapping, Union


class ActionStatus(str, Enum):
    """Lifecycle status of an action row."""

    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    ONGOING = "ONGOING"
    # Only ever carried by synthetic UnaddressedCondition rows
    NO_ACTION = "NO_ACTION"


PERSISTED_STATUSES = frozenset(s for s in ActionStatus if s is not ActionStatus.NO_ACTION)

# Statuses that can never accumulate delay
DELAY_EXEMPT_STATUSES = frozenset({
    ActionStatus.COMPLETED,
    ActionStatus.CANCELLED,
    ActionStatus.ONGOING,
})

STATUS_LABELS = {
    ActionStatus.NOT_STARTED: "Başlanmadı",
    ActionStatus.IN_PROGRESS: "Devam Ediyor",
    ActionStatus.COMPLETED: "Tamamlandı",
    ActionStatus.CANCELLED: "İptal Edildi",
    ActionStatus.ONGOING: "Sürekli",
    ActionStatus.NO_ACTION: "Mevcut Durum Yeterli",
}

NO_ACTION_TITLE = "Mevcut durum yeterli görüldüğünden eylem öngörülmemiştir"
ALL_UNITS_LABEL = "Tüm Birimler"


class SpecialUnit(str, Enum):
    """Non-departmental bodies that can bear responsibility for an action."""

    TOP_MANAGEMENT = "TOP_MANAGEMENT"
    MONITORING_BOARD = "MONITORING_BOARD"
    INTERNAL_AUDIT = "INTERNAL_AUDIT"
    ETHICS_COMMITTEE = "ETHICS_COMMITTEE"


SPECIAL_UNIT_LABELS = {
    SpecialUnit.TOP_MANAGEMENT: "Üst Yönetim",
    SpecialUnit.MONITORING_BOARD: "İç Kontrol İzleme ve Yönlendirme Kurulu",
    SpecialUnit.INTERNAL_AUDIT: "İç Denetim Birimi",
    SpecialUnit.ETHICS_COMMITTEE: "Etik Komisyonu",
}


# ─── Unit assignment ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class AllUnits:
    """Every unit of the organisation is responsible (or collaborates)."""

    def covers(self, department_id: str) -> bool:
        return True


@dataclass(frozen=True)
class ExplicitUnits:
    """An explicit list of departments and special units."""

    department_ids: tuple[str, ...] = ()
    special_units: tuple[SpecialUnit, ...] = ()

    def covers(self, department_id: str) -> bool:
        return department_id in self.department_ids


Assignment = Union[AllUnits, ExplicitUnits]


def make_assignment(
    all_units: bool,
    department_ids: list[str] | tuple[str, ...] | None = None,
    special_units: list[str] | tuple[str, ...] | None = None,
) -> Assignment:
    """Build an assignment from the raw flag + id-list columns.

    The flag wins: explicit ids stored next to a set flag are ignored.
    Unknown special unit tags are dropped.
    """
    if all_units:
        return AllUnits()
    units = []
    for tag in special_units or ():
        try:
            unit = SpecialUnit(tag)
        except ValueError:
            continue
        if unit not in units:
            units.append(unit)
    return ExplicitUnits(
        department_ids=tuple(dict.fromkeys(department_ids or ())),
        special_units=tuple(units),
    )


# ─── Taxonomy and organisation ───────────────────────────────────────────────

@dataclass(frozen=True)
class Component:
    id: str
    code: str
    name: str
    order_index: int = 0


@dataclass(frozen=True)
class Standard:
    id: str
    code: str
    name: str
    component_id: str | None
    order_index: int = 0


@dataclass(frozen=True)
class Condition:
    id: str
    code: str
    description: str
    standard_id: str | None
    provides_reasonable_assurance: bool = False


@dataclass(frozen=True)
class Department:
    id: str
    name: str


@dataclass(frozen=True)
class ActionPlan:
    id: str
    organization_id: str
    name: str
    is_active: bool = False


@dataclass(frozen=True)
class ActionRecord:
    """A persisted remediation action as fetched from the data store."""

    id: str
    code: str
    title: str
    condition_id: str | None
    status: ActionStatus = ActionStatus.NOT_STARTED
    description: str = ""
    progress: int = 0
    start_date: date | None = None
    target_date: date | None = None
    completion_date: date | None = None
    is_continuous: bool = False
    responsible: Assignment = field(default_factory=ExplicitUnits)
    collaborating: Assignment = field(default_factory=ExplicitUnits)
    output_result: str = ""
    notes: str = ""


@dataclass(frozen=True)
class PlanSnapshot:
    """Everything fetched for one action-plan selection."""

    plan_id: str
    actions: tuple[ActionRecord, ...] = ()
    conditions: tuple[Condition, ...] = ()
    standards: tuple[Standard, ...] = ()
    components: tuple[Component, ...] = ()
    departments: tuple[Department, ...] = ()
    # condition id -> "current situation" narrative for this plan
    current_situations: Mapping[str, str] = field(default_factory=dict)


# ─── Enriched rows ───────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Classification:
    """Resolved condition → standard → component chain of a row."""

    condition_id: str | None = None
    condition_code: str | None = None
    condition_description: str | None = None
    provides_reasonable_assurance: bool = False
    current_situation: str | None = None
    standard_id: str | None = None
    standard_code: str | None = None
    standard_name: str | None = None
    component_id: str | None = None
    component_code: str | None = None
    component_name: str | None = None


@dataclass(frozen=True)
class RealAction:
    """A persisted action with its derived read-time fields."""

    record: ActionRecord
    classification: Classification
    delay_days: int = 0
    responsible_names: tuple[str, ...] = ()
    collaborating_names: tuple[str, ...] = ()
    responsible_special_labels: tuple[str, ...] = ()
    collaborating_special_labels: tuple[str, ...] = ()

    is_synthetic = False

    @property
    def id(self) -> str:
        return self.record.id

    @property
    def code(self) -> str:
        return self.record.code

    @property
    def title(self) -> str:
        return self.record.title

    @property
    def description(self) -> str:
        return self.record.description

    @property
    def status(self) -> ActionStatus:
        return self.record.status

    @property
    def progress(self) -> int:
        return self.record.progress

    @property
    def target_date(self) -> date | None:
        return self.record.target_date

    @property
    def is_continuous(self) -> bool:
        return self.record.is_continuous

    @property
    def responsible(self) -> Assignment:
        return self.record.responsible

    @property
    def collaborating(self) -> Assignment:
        return self.record.collaborating


@dataclass(frozen=True)
class UnaddressedCondition:
    """Synthetic row for a condition assessed but left without actions."""

    classification: Classification

    is_synthetic = True
    status = ActionStatus.NO_ACTION
    code = ""
    title = NO_ACTION_TITLE
    progress = 0
    delay_days = 0
    target_date = None
    is_continuous = False

    @property
    def id(self) -> str:
        return f"no-action:{self.classification.condition_id}"

    @property
    def description(self) -> str:
        return self.classification.current_situation or ""


RollupRow = Union[RealAction, UnaddressedCondition]


def is_delayed(row: RollupRow) -> bool:
    """Whether a row counts as delayed for filters and statistics."""
    return row.delay_days > 0 and row.status not in DELAY_EXEMPT_STATUSES and not row.is_synthetic
