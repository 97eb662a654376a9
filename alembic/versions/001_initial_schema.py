"""Initial schema — action plan and internal-control taxonomy tables.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # Organizations
    op.create_table(
        "organizations",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(255), unique=True, nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_organizations_slug", "organizations", ["slug"])

    # Departments
    op.create_table(
        "departments",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("organization_id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_departments_organization_id", "departments", ["organization_id"])

    # Action plans
    op.create_table(
        "ic_action_plans",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("organization_id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("is_active", sa.Boolean, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index("ix_ic_action_plans_organization_id", "ic_action_plans", ["organization_id"])

    # Taxonomy
    op.create_table(
        "ic_components",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("code", sa.String(20), unique=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("order_index", sa.Integer, server_default="0"),
        *_timestamps(),
    )
    op.create_table(
        "ic_standards",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("component_id", sa.String(36), sa.ForeignKey("ic_components.id"), nullable=False),
        sa.Column("code", sa.String(20), nullable=False),
        sa.Column("name", sa.String(500), nullable=False),
        sa.Column("order_index", sa.Integer, server_default="0"),
        *_timestamps(),
    )
    op.create_index("ix_ic_standards_component_id", "ic_standards", ["component_id"])
    op.create_table(
        "ic_conditions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("standard_id", sa.String(36), sa.ForeignKey("ic_standards.id"), nullable=False),
        sa.Column("code", sa.String(20), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("provides_reasonable_assurance", sa.Boolean, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index("ix_ic_conditions_standard_id", "ic_conditions", ["standard_id"])

    # Condition assessments
    op.create_table(
        "ic_condition_assessments",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("organization_id", sa.String(36), nullable=False),
        sa.Column("action_plan_id", sa.String(36), sa.ForeignKey("ic_action_plans.id"), nullable=False),
        sa.Column("condition_id", sa.String(36), sa.ForeignKey("ic_conditions.id"), nullable=False),
        sa.Column("current_situation", sa.Text, nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("action_plan_id", "condition_id"),
    )
    op.create_index("ix_ic_condition_assessments_organization_id", "ic_condition_assessments", ["organization_id"])
    op.create_index("ix_ic_condition_assessments_action_plan_id", "ic_condition_assessments", ["action_plan_id"])

    # Actions
    op.create_table(
        "ic_actions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("organization_id", sa.String(36), nullable=False),
        sa.Column("action_plan_id", sa.String(36), sa.ForeignKey("ic_action_plans.id"), nullable=False),
        sa.Column("condition_id", sa.String(36), sa.ForeignKey("ic_conditions.id"), nullable=True),
        sa.Column("code", sa.String(50), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="NOT_STARTED"),
        sa.Column("progress", sa.Integer, server_default="0"),
        sa.Column("start_date", sa.Date, nullable=True),
        sa.Column("target_date", sa.Date, nullable=True),
        sa.Column("completion_date", sa.Date, nullable=True),
        sa.Column("is_continuous", sa.Boolean, server_default=sa.false()),
        sa.Column("all_units_responsible", sa.Boolean, server_default=sa.false()),
        sa.Column("responsible_department_ids", sa.JSON, nullable=True),
        sa.Column("special_responsible_types", sa.JSON, nullable=True),
        sa.Column("all_units_collaborating", sa.Boolean, server_default=sa.false()),
        sa.Column("collaborating_department_ids", sa.JSON, nullable=True),
        sa.Column("special_collaborating_types", sa.JSON, nullable=True),
        sa.Column("output_result", sa.Text, nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_ic_actions_organization_id", "ic_actions", ["organization_id"])
    op.create_index("ix_ic_actions_action_plan_id", "ic_actions", ["action_plan_id"])


def downgrade() -> None:
    op.drop_table("ic_actions")
    op.drop_table("ic_condition_assessments")
    op.drop_table("ic_conditions")
    op.drop_table("ic_standards")
    op.drop_table("ic_components")
    op.drop_table("ic_action_plans")
    op.drop_table("departments")
    op.drop_table("organizations")
