"""initial schema - teams, users, configurations, oauth states, outbox

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "teams",
        sa.Column("id", sa.String(40), primary_key=True),
        sa.Column("name", sa.String(255)),
        sa.Column("email_domain", sa.String(255)),
        sa.Column("domain", sa.String(255)),
        sa.Column("plan", sa.String(50)),
        sa.Column("external_id", sa.String(64), nullable=False, unique=True),
        sa.Column("created_at", sa.DateTime()),
    )
    op.create_table(
        "users",
        sa.Column("id", sa.String(40), primary_key=True),
        sa.Column("team_id", sa.String(40), sa.ForeignKey("teams.id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("type", sa.String(20)),
        sa.Column("status", sa.String(20)),
        sa.Column("real_name", sa.String(255)),
        sa.Column("email", sa.String(255)),
        sa.Column("is_bot", sa.Boolean()),
        sa.Column("is_admin", sa.Boolean()),
        sa.Column("is_owner", sa.Boolean()),
        sa.Column("is_primary_owner", sa.Boolean()),
        sa.Column("is_restricted", sa.Boolean()),
        sa.Column("is_ultra_restricted", sa.Boolean()),
        sa.Column("external_id", sa.String(64), nullable=False, unique=True),
        sa.Column("token", sa.Text()),
        sa.Column("created_at", sa.DateTime()),
    )
    op.create_index("ix_users_team_id", "users", ["team_id"])
    op.create_table(
        "configurations",
        sa.Column("team_id", sa.String(40), sa.ForeignKey("teams.id"), primary_key=True),
        sa.Column("channels", sa.JSON()),
        sa.Column("groups", sa.JSON()),
        sa.Column("verbose_channels", sa.JSON()),
        sa.Column("verbose_groups", sa.JSON()),
        sa.Column("im", sa.Boolean()),
        sa.Column("verbose_im", sa.Boolean()),
        sa.Column("regexp", sa.Text()),
        sa.Column("all", sa.Boolean()),
        sa.Column("updated_at", sa.DateTime()),
    )
    op.create_table(
        "oauth_states",
        sa.Column("state", sa.String(64), primary_key=True),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
    )
    op.create_table(
        "configuration_updates",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("team_id", sa.String(40), sa.ForeignKey("teams.id"), nullable=False),
        sa.Column("payload", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime()),
    )
    op.create_index("ix_configuration_updates_team_id", "configuration_updates", ["team_id"])


def downgrade() -> None:
    """Drop all tables. DESTRUCTIVE — only for dev/test environments."""
    op.drop_index("ix_configuration_updates_team_id", table_name="configuration_updates")
    op.drop_table("configuration_updates")
    op.drop_table("oauth_states")
    op.drop_table("configurations")
    op.drop_index("ix_users_team_id", table_name="users")
    op.drop_table("users")
    op.drop_table("teams")
