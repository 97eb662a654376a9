"""Action model — one planned remediation step of an action plan."""

from __future__ import annotations

from datetime import date

from sqlalchemy import JSON, Boolean, Date, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from icrollup.models.base import Base


class Action(Base):
    __tablename__ = "ic_actions"

    organization_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    action_plan_id: Mapped[str] = mapped_column(ForeignKey("ic_action_plans.id"), nullable=False, index=True)
    condition_id: Mapped[str | None] = mapped_column(ForeignKey("ic_conditions.id"), nullable=True)

    code: Mapped[str] = mapped_column(String(50), nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="NOT_STARTED")
    progress: Mapped[int] = mapped_column(Integer, default=0)

    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    target_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    completion_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_continuous: Mapped[bool] = mapped_column(Boolean, default=False)

    # Assignments: all-units flag, department ids, special unit codes
    all_units_responsible: Mapped[bool] = mapped_column(Boolean, default=False)
    responsible_department_ids: Mapped[list[str]] = mapped_column(JSON, default=list)
    special_responsible_types: Mapped[list[str]] = mapped_column(JSON, default=list)
    all_units_collaborating: Mapped[bool] = mapped_column(Boolean, default=False)
    collaborating_department_ids: Mapped[list[str]] = mapped_column(JSON, default=list)
    special_collaborating_types: Mapped[list[str]] = mapped_column(JSON, default=list)

    output_result: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Action {self.code} {self.status}>"
