"""Projects, studies and enumeration registry

Revision ID: 0001
Revises:
Create Date: 2025-08-07 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "projects",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("owner_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "project_type",
            sa.String(length=50),
            server_default="systematic_review",
            nullable=False,
        ),
        sa.Column("status", sa.String(length=50), server_default="draft", nullable=False),
        sa.Column("research_domain", sa.Text(), nullable=True),
        sa.Column("progress_percentage", sa.Integer(), server_default="0", nullable=False),
        sa.Column(
            "current_stage", sa.String(length=100), server_default="Planning", nullable=False
        ),
        sa.Column("team_size", sa.Integer(), server_default="1", nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("last_activity_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            "progress_percentage >= 0 AND progress_percentage <= 100",
            name="ck_projects_progress_range",
        ),
        sa.CheckConstraint("team_size >= 1", name="ck_projects_team_size"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_projects_owner_id", "projects", ["owner_id"])
    op.create_index(
        "ix_projects_owner_last_activity", "projects", ["owner_id", "last_activity_at"]
    )

    op.create_table(
        "studies",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("project_id", sa.Uuid(), nullable=False),
        sa.Column("owner_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("authors", sa.Text(), nullable=True),
        sa.Column("publication_year", sa.Integer(), nullable=True),
        sa.Column("journal", sa.Text(), nullable=True),
        sa.Column("doi", sa.String(length=255), nullable=True),
        sa.Column("pmid", sa.String(length=32), nullable=True),
        sa.Column("isbn", sa.String(length=32), nullable=True),
        sa.Column("url", sa.Text(), nullable=True),
        sa.Column("study_type", sa.String(length=50), server_default="article", nullable=False),
        sa.Column("status", sa.String(length=50), server_default="pending", nullable=False),
        sa.Column("abstract", sa.Text(), nullable=True),
        sa.Column(
            "keywords",
            postgresql.JSONB(),
            server_default=sa.text("'[]'::jsonb"),
            nullable=False,
        ),
        sa.Column("full_text", sa.Text(), nullable=True),
        sa.Column("citation", sa.Text(), nullable=True),
        sa.Column("screening_notes", sa.Text(), nullable=True),
        sa.Column("quality_score", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            "quality_score IS NULL OR (quality_score >= 0 AND quality_score <= 10)",
            name="ck_studies_quality_score_range",
        ),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_studies_project_id", "studies", ["project_id"])
    op.create_index("ix_studies_owner_id", "studies", ["owner_id"])
    op.create_index("ix_studies_project_status", "studies", ["project_id", "status"])
    op.create_index("ix_studies_project_created", "studies", ["project_id", "created_at"])

    op.create_table(
        "enum_values",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("field", sa.String(length=50), nullable=False),
        sa.Column("value", sa.String(length=50), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("field", "value", name="uq_enum_values_field_value"),
        sa.UniqueConstraint("version"),
    )
    op.create_index("ix_enum_values_field", "enum_values", ["field"])


def downgrade() -> None:
    op.drop_index("ix_enum_values_field", table_name="enum_values")
    op.drop_table("enum_values")
    op.drop_index("ix_studies_project_created", table_name="studies")
    op.drop_index("ix_studies_project_status", table_name="studies")
    op.drop_index("ix_studies_owner_id", table_name="studies")
    op.drop_index("ix_studies_project_id", table_name="studies")
    op.drop_table("studies")
    op.drop_index("ix_projects_owner_last_activity", table_name="projects")
    op.drop_index("ix_projects_owner_id", table_name="projects")
    op.drop_table("projects")
