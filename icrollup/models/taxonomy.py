"""Internal-control taxonomy: components, standards, general conditions."""

from __future__ import annotations

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from icrollup.models.base import Base


class Component(Base):
    __tablename__ = "ic_components"

    code: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    order_index: Mapped[int] = mapped_column(Integer, default=0)

    def __repr__(self) -> str:
        return f"<Component {self.code}>"


class Standard(Base):
    __tablename__ = "ic_standards"

    component_id: Mapped[str] = mapped_column(ForeignKey("ic_components.id"), nullable=False, index=True)
    code: Mapped[str] = mapped_column(String(20), nullable=False)
    name: Mapped[str] = mapped_column(String(500), nullable=False)
    order_index: Mapped[int] = mapped_column(Integer, default=0)

    def __repr__(self) -> str:
        return f"<Standard {self.code}>"


class Condition(Base):
    """A general condition, the requirement actions are written against."""

    __tablename__ = "ic_conditions"

    standard_id: Mapped[str] = mapped_column(ForeignKey("ic_standards.id"), nullable=False, index=True)
    code: Mapped[str] = mapped_column(String(20), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    provides_reasonable_assurance: Mapped[bool] = mapped_column(Boolean, default=False)

    def __repr__(self) -> str:
        return f"<Condition {self.code}>"


class ConditionAssessment(Base):
    """Per-plan assessment of a condition, holding its current-situation narrative."""

    __tablename__ = "ic_condition_assessments"
    __table_args__ = (UniqueConstraint("action_plan_id", "condition_id"),)

    organization_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    action_plan_id: Mapped[str] = mapped_column(ForeignKey("ic_action_plans.id"), nullable=False, index=True)
    condition_id: Mapped[str] = mapped_column(ForeignKey("ic_conditions.id"), nullable=False)
    current_situation: Mapped[str | None] = mapped_column(Text, nullable=True)
