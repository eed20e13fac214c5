"""cultural_sites_history_favorites

Revision ID: 001
Revises:
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # CulturalSite
    op.create_table(
        "cultural_sites",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=False, server_default=""),
        sa.Column("historical_context", sa.String(), nullable=False, server_default=""),
        sa.Column("cultural_significance", sa.String(), nullable=False, server_default=""),
        sa.Column("location_city", sa.String(), nullable=False, server_default=""),
        sa.Column("location_country", sa.String(), nullable=False, server_default=""),
        sa.Column("site_type", sa.String(), nullable=False, server_default=""),
        sa.Column("construction_date", sa.String(), nullable=False, server_default=""),
        sa.Column("architect_artist", sa.String(), nullable=False, server_default=""),
        sa.Column("fun_facts", JSONB(), nullable=False, server_default="[]"),
        sa.Column("visitor_tips", sa.String(), nullable=False, server_default=""),
        sa.Column("image_keywords", JSONB(), nullable=False, server_default="[]"),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_cultural_sites_name", "cultural_sites", ["name"], unique=True)

    # RecognitionRecord (FK to cultural_sites)
    op.create_table(
        "recognition_history",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("cultural_site_id", sa.Integer(), nullable=False),
        sa.Column("image_url", sa.String(), nullable=True),
        sa.Column("recognition_confidence", sa.Float(), nullable=False),
        sa.Column("audio_duration", sa.Integer(), nullable=True),
        sa.Column("generated_script", sa.String(), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["cultural_site_id"], ["cultural_sites.id"]),
    )
    op.create_index(
        "ix_recognition_history_user_created",
        "recognition_history",
        ["user_id", "created_at"],
        unique=False,
    )

    # UserFavorite (FK to cultural_sites)
    op.create_table(
        "user_favorites",
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("cultural_site_id", sa.Integer(), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.ForeignKeyConstraint(["cultural_site_id"], ["cultural_sites.id"]),
        sa.PrimaryKeyConstraint("user_id", "cultural_site_id"),
    )


def downgrade() -> None:
    op.drop_table("user_favorites")
    op.drop_index("ix_recognition_history_user_created", table_name="recognition_history")
    op.drop_table("recognition_history")
    op.drop_index("ix_cultural_sites_name", table_name="cultural_sites")
    op.drop_table("cultural_sites")
