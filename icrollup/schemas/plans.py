"""Schemas for action plan endpoints."""

from __future__ import annotations

from pydantic import BaseModel


class PlanResponse(BaseModel):
    id: str
    name: str
    is_active: bool


class PlanListResponse(BaseModel):
    organization_id: str
    active_plan_id: str | None = None
    plans: list[PlanResponse]
