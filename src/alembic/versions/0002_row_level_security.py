"""Row-level security on projects and studies

Revision ID: 0002
Revises: 0001
Create Date: 2025-08-07 00:10:00.000000

Rows are visible only when owner_id matches the app.current_user_id setting
placed on the connection by get_session(owner_id=...). FORCE applies the
policies to the table owner as well. A study must also point at a project
the same owner can see.
"""

from collections.abc import Sequence

from alembic import op

revision: str = "0002"
down_revision: str | None = "0001"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

_CURRENT_OWNER = "NULLIF(current_setting('app.current_user_id', true), '')::uuid"


def upgrade() -> None:
    for table in ("projects", "studies"):
        op.execute(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY")
        op.execute(f"ALTER TABLE {table} FORCE ROW LEVEL SECURITY")

    op.execute(
        f"""
        CREATE POLICY projects_owner_access ON projects
            USING (owner_id = {_CURRENT_OWNER})
            WITH CHECK (owner_id = {_CURRENT_OWNER})
        """
    )
    op.execute(
        f"""
        CREATE POLICY studies_owner_access ON studies
            USING (owner_id = {_CURRENT_OWNER})
            WITH CHECK (
                owner_id = {_CURRENT_OWNER}
                AND EXISTS (
                    SELECT 1 FROM projects p
                    WHERE p.id = studies.project_id AND p.owner_id = studies.owner_id
                )
            )
        """
    )


def downgrade() -> None:
    op.execute("DROP POLICY IF EXISTS studies_owner_access ON studies")
    op.execute("DROP POLICY IF EXISTS projects_owner_access ON projects")
    for table in ("projects", "studies"):
        op.execute(f"ALTER TABLE {table} NO FORCE ROW LEVEL SECURITY")
        op.execute(f"ALTER TABLE {table} DISABLE ROW LEVEL SECURITY")
