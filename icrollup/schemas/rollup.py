"""Schemas for the action rollup endpoints."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field


class ActionRow(BaseModel):
    """One leaf row of the rollup — a real action or a NO_ACTION placeholder."""

    id: str
    code: str
    title: str
    description: str
    status: str
    status_label: str
    is_synthetic: bool = False
    progress: int = Field(..., ge=0, le=100)
    start_date: date | None = None
    target_date: date | None = None
    completion_date: date | None = None
    is_continuous: bool = False
    delay_days: int = Field(..., ge=0)
    is_delayed: bool = False
    all_units_responsible: bool = False
    responsible_departments: list[str] = []
    responsible_special_units: list[str] = []
    all_units_collaborating: bool = False
    collaborating_departments: list[str] = []
    collaborating_special_units: list[str] = []
    output_result: str = ""
    notes: str = ""


class ConditionNode(BaseModel):
    key: str
    code: str | None = None
    description: str
    current_situation: str | None = None
    provides_reasonable_assurance: bool = False
    actions: list[ActionRow]


class StandardNode(BaseModel):
    key: str
    code: str | None = None
    name: str
    conditions: list[ConditionNode]


class ComponentNode(BaseModel):
    key: str
    id: str | None = None
    code: str | None = None
    name: str
    standards: list[StandardNode]


class GlobalStats(BaseModel):
    """Counters over the working set before the status filter."""

    total: int
    completed: int
    completed_pct: float
    in_progress: int
    in_progress_pct: float
    not_started: int
    not_started_pct: float
    delayed: int
    delayed_pct: float
    ongoing: int
    ongoing_pct: float
    continuous: int
    continuous_pct: float
    cancelled: int
    no_action: int = Field(..., description="Conditions whose current situation is already satisfactory")


class ComponentStat(BaseModel):
    component_id: str | None = None
    code: str | None = None
    name: str
    standard_count: int
    condition_count: int
    reasonable_assurance_count: int
    action_count: int
    continuous: int
    not_started: int
    in_progress: int
    delayed: int
    selected: bool = False


class AppliedControls(BaseModel):
    """Echo of the filter and sort controls the view was computed with."""

    component_id: str | None = None
    standard_id: str | None = None
    responsible_department_id: str | None = None
    collaborating_department_id: str | None = None
    search: str | None = None
    status: str | None = None
    sort: str
    direction: str


class RollupResponse(BaseModel):
    """The grouped All Actions view for a plan."""

    plan_id: str
    generated_on: date
    controls: AppliedControls
    visible_count: int
    tree: list[ComponentNode]
    stats: GlobalStats
    component_stats: list[ComponentStat]
    summary: str


class StatsResponse(BaseModel):
    plan_id: str
    stats: GlobalStats
    component_stats: list[ComponentStat]
