"""Initial catalog schema: artists, venues, shows and their associations.

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

_SHOW_STATUS = ("pending", "approved", "rejected", "private")
_SHOW_SOURCE = ("user", "discovery")
_SET_TYPE = ("headliner", "opener", "performer")


def upgrade() -> None:
    op.create_table(
        "artist",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("name_key", sa.String(), nullable=False),
        sa.Column("city", sa.String(), nullable=True),
        sa.Column("state", sa.String(), nullable=True),
        sa.Column("social", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_artist"),
    )
    op.create_index("ix_artist_name_key", "artist", ["name_key"])

    op.create_table(
        "venue",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("name_key", sa.String(), nullable=False),
        sa.Column("city", sa.String(), nullable=False),
        sa.Column("city_key", sa.String(), nullable=False),
        sa.Column("state", sa.String(), nullable=False),
        sa.Column("address", sa.String(), nullable=True),
        sa.Column("zipcode", sa.String(), nullable=True),
        sa.Column("verified", sa.Boolean(), nullable=False),
        sa.Column("social", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_venue"),
    )
    op.create_index("ix_venue_name_key_city_key", "venue", ["name_key", "city_key"])

    op.create_table(
        "show",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(), nullable=True),
        sa.Column("event_date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.String(length=32), nullable=True),
        sa.Column("city", sa.String(), nullable=True),
        sa.Column("state", sa.String(), nullable=True),
        sa.Column("price", sa.Float(), nullable=True),
        sa.Column("age_requirement", sa.String(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "status",
            sa.Enum(*_SHOW_STATUS, name="showstatus", native_enum=False),
            nullable=False,
        ),
        sa.Column(
            "source",
            sa.Enum(*_SHOW_SOURCE, name="showsource", native_enum=False),
            nullable=False,
        ),
        sa.Column("source_origin", sa.String(), nullable=True),
        sa.Column("source_event_id", sa.String(), nullable=True),
        sa.Column("scraped_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("ticket_url", sa.String(), nullable=True),
        sa.Column("image_url", sa.String(), nullable=True),
        sa.Column("is_sold_out", sa.Boolean(), nullable=False),
        sa.Column("is_cancelled", sa.Boolean(), nullable=False),
        sa.Column("duplicate_of_show_id", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(
            ["duplicate_of_show_id"],
            ["show.id"],
            name="fk_show_duplicate_of_show_id_show",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_show"),
    )
    op.create_index("ix_show_event_date", "show", ["event_date"])
    op.create_index(
        "ix_show_source_origin_source_event_id",
        "show",
        ["source_origin", "source_event_id"],
    )

    op.create_table(
        "show_artist",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("show_id", sa.Integer(), nullable=False),
        sa.Column("artist_id", sa.Integer(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column(
            "set_type",
            sa.Enum(*_SET_TYPE, name="settype", native_enum=False),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(
            ["show_id"],
            ["show.id"],
            name="fk_show_artist_show_id_show",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["artist_id"],
            ["artist.id"],
            name="fk_show_artist_artist_id_artist",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_show_artist"),
    )
    op.create_index("ix_show_artist_artist_id", "show_artist", ["artist_id"])

    op.create_table(
        "show_venue",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("show_id", sa.Integer(), nullable=False),
        sa.Column("venue_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["show_id"],
            ["show.id"],
            name="fk_show_venue_show_id_show",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["venue_id"],
            ["venue.id"],
            name="fk_show_venue_venue_id_venue",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_show_venue"),
        sa.UniqueConstraint("show_id", "venue_id", name="uq_show_venue_show_id"),
    )
    op.create_index("ix_show_venue_venue_id", "show_venue", ["venue_id"])


def downgrade() -> None:
    op.drop_index("ix_show_venue_venue_id", table_name="show_venue")
    op.drop_table("show_venue")
    op.drop_index("ix_show_artist_artist_id", table_name="show_artist")
    op.drop_table("show_artist")
    op.drop_index("ix_show_source_origin_source_event_id", table_name="show")
    op.drop_index("ix_show_event_date", table_name="show")
    op.drop_table("show")
    op.drop_index("ix_venue_name_key_city_key", table_name="venue")
    op.drop_table("venue")
    op.drop_index("ix_artist_name_key", table_name="artist")
    op.drop_table("artist")
