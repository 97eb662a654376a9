"""Database models for the action rollup service."""

from icrollup.models.base import Base
from icrollup.models.organisation import ActionPlan, Department, Organization
from icrollup.models.taxonomy import Component, Condition, ConditionAssessment, Standard
from icrollup.models.action import Action

__all__ = [
    "Base",
    "Organization",
    "Department",
    "ActionPlan",
    "Component",
    "Standard",
    "Condition",
    "ConditionAssessment",
    "Action",
]
