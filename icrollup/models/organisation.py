"""Tenant-scoped models — organisations, departments and action plans."""

from __future__ import annotations

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from icrollup.models.base import Base


class Organization(Base):
    """A tenant. Every tenant-scoped row carries its id."""

    __tablename__ = "organizations"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Organization {self.slug}>"


class Department(Base):
    """An organisational unit that can own or support actions."""

    __tablename__ = "departments"

    organization_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<Department {self.name}>"


class ActionPlan(Base):
    """A named action plan; at most one per organisation is active."""

    __tablename__ = "ic_action_plans"

    organization_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=False)

    def __repr__(self) -> str:
        return f"<ActionPlan {self.name} active={self.is_active}>"
