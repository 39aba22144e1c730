"""Initial schema: venues, sports, operating hours, pricing rules, slots, bookings

Revision ID: 001_initial
Revises:
Create Date: 2026-03-01 00:00:00.000000

"""

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create venue table
    op.create_table(
        "venue",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("location", sa.String(), nullable=False),
        sa.Column("address", sa.String(), nullable=False, server_default=""),
        sa.Column("image", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    # Create sport table
    op.create_table(
        "sport",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_sport_name", "sport", ["name"])

    # Create venuesport link table
    op.create_table(
        "venuesport",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("venue_id", sa.Integer(), nullable=False),
        sa.Column("sport_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["venue_id"], ["venue.id"]),
        sa.ForeignKeyConstraint(["sport_id"], ["sport.id"]),
        sa.UniqueConstraint("venue_id", "sport_id", name="uq_venue_sport"),
    )
    op.create_index("ix_venuesport_venue_id", "venuesport", ["venue_id"])
    op.create_index("ix_venuesport_sport_id", "venuesport", ["sport_id"])

    # Create operatinghours table (end_time < start_time closes next day)
    op.create_table(
        "operatinghours",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("venue_id", sa.Integer(), nullable=False),
        sa.Column("day_of_week", sa.String(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("is_morning", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["venue_id"], ["venue.id"]),
    )
    op.create_index("ix_operatinghours_venue_id", "operatinghours", ["venue_id"])
    op.create_index("ix_operatinghours_day_of_week", "operatinghours", ["day_of_week"])

    # Create pricingrule table
    op.create_table(
        "pricingrule",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("venue_id", sa.Integer(), nullable=False),
        sa.Column("day_group", sa.String(), nullable=False),
        sa.Column("time_range", sa.String(), nullable=True),
        sa.Column("is_morning", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("price", sa.Integer(), nullable=False),
        sa.Column("per_duration", sa.String(), nullable=False, server_default="30min"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["venue_id"], ["venue.id"]),
    )
    op.create_index("ix_pricingrule_venue_id", "pricingrule", ["venue_id"])

    # Create slot table
    op.create_table(
        "slot",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("venue_id", sa.Integer(), nullable=False),
        sa.Column("sport_id", sa.Integer(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("next_day", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("price", sa.Integer(), nullable=False),
        sa.Column("available", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["venue_id"], ["venue.id"]),
        sa.ForeignKeyConstraint(["sport_id"], ["sport.id"]),
        sa.UniqueConstraint(
            "venue_id", "sport_id", "date", "start_time", "next_day", name="uq_slot_venue_sport_day_time"
        ),
    )
    op.create_index("ix_slot_venue_id", "slot", ["venue_id"])
    op.create_index("ix_slot_sport_id", "slot", ["sport_id"])

    # Create booking table
    op.create_table(
        "booking",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("venue_id", sa.Integer(), nullable=False),
        sa.Column("sport_id", sa.Integer(), nullable=False),
        sa.Column("slot_id", sa.Integer(), nullable=True),
        sa.Column("slot_time", sa.String(), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="confirmed"),
        sa.Column("full_name", sa.String(), nullable=False),
        sa.Column("phone", sa.String(), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["venue_id"], ["venue.id"]),
        sa.ForeignKeyConstraint(["sport_id"], ["sport.id"]),
        sa.ForeignKeyConstraint(["slot_id"], ["slot.id"]),
    )
    op.create_index("ix_booking_user_id", "booking", ["user_id"])
    op.create_index("ix_booking_venue_id", "booking", ["venue_id"])
    op.create_index("ix_booking_sport_id", "booking", ["sport_id"])
    op.create_index("ix_booking_slot_id", "booking", ["slot_id"])
    op.create_index("ix_booking_slot_time", "booking", ["slot_time"])

    # One confirmed booking per venue/sport/start
    op.create_index(
        "uq_booking_confirmed_slot_time",
        "booking",
        ["venue_id", "sport_id", "slot_time"],
        unique=True,
        sqlite_where=sa.text("status = 'confirmed'"),
        postgresql_where=sa.text("status = 'confirmed'"),
    )


def downgrade() -> None:
    op.drop_index("uq_booking_confirmed_slot_time", table_name="booking")
    op.drop_table("booking")
    op.drop_table("slot")
    op.drop_table("pricingrule")
    op.drop_table("operatinghours")
    op.drop_table("venuesport")
    op.drop_table("sport")
    op.drop_table("venue")
