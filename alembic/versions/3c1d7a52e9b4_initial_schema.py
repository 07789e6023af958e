"""initial schema: users, events, prices, bookings"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "3c1d7a52e9b4"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

user_role = postgresql.ENUM("user", "admin", name="user_role", create_type=False)
event_status = postgresql.ENUM("active", "inactive", name="event_status", create_type=False)
booking_status = postgresql.ENUM("confirmed", "cancelled", name="booking_status", create_type=False)


def upgrade() -> None:
    bind = op.get_bind()
    user_role.create(bind, checkfirst=True)
    event_status.create(bind, checkfirst=True)
    booking_status.create(bind, checkfirst=True)

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), sa.Identity(always=True), primary_key=True),
        sa.Column("username", sa.Text(), nullable=False, unique=True),
        sa.Column("email", sa.Text(), nullable=False, unique=True),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("full_name", sa.Text(), nullable=False),
        sa.Column("phone", sa.Text(), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("photo_path", sa.Text(), nullable=True),
        sa.Column("role", user_role, nullable=False, server_default="user"),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False,
                  server_default=sa.text("timezone('utc', now())")),
    )

    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), sa.Identity(always=True), primary_key=True),
        sa.Column("event_name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("event_date", sa.Date(), nullable=False),
        sa.Column("event_time", sa.Time(), nullable=False),
        sa.Column("total_capacity", sa.Integer(), nullable=False),
        sa.Column("max_tickets_per_sale", sa.Integer(), nullable=False, server_default="10"),
        sa.Column("requires_adult", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("status", event_status, nullable=False, server_default="active"),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("total_capacity >= 0", name="chk_event_capacity_nonneg"),
        sa.CheckConstraint("max_tickets_per_sale >= 1", name="chk_event_max_tickets_pos"),
    )
    op.create_index("ix_events_event_date", "events", ["event_date"])

    op.create_table(
        "prices",
        sa.Column("id", sa.Integer(), sa.Identity(always=True), primary_key=True),
        sa.Column("event_id", sa.Integer(), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
        sa.Column("seat_type", sa.Text(), nullable=False),
        sa.Column("adult_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("child_price", sa.Numeric(10, 2), nullable=False),
        sa.UniqueConstraint("event_id", "seat_type", name="uq_prices_event_seat_type"),
        sa.CheckConstraint("adult_price >= 0", name="chk_adult_price"),
        sa.CheckConstraint("child_price >= 0", name="chk_child_price"),
    )
    op.create_index("ix_prices_event_id", "prices", ["event_id"])

    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), sa.Identity(always=True), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("event_id", sa.Integer(), sa.ForeignKey("events.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("booking_reference", sa.Text(), nullable=False),
        sa.Column("num_adults", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("num_children", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_tickets", sa.Integer(), nullable=False),
        sa.Column("seat_type", sa.Text(), nullable=False),
        sa.Column("total_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("booking_status", booking_status, nullable=False, server_default="confirmed"),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("booking_reference", name="uq_bookings_reference"),
        sa.CheckConstraint("num_adults >= 0 AND num_children >= 0", name="chk_booking_counts_nonneg"),
        sa.CheckConstraint("num_adults + num_children >= 1", name="chk_booking_not_empty"),
        sa.CheckConstraint("total_tickets = num_adults + num_children", name="chk_booking_total_tickets"),
        sa.CheckConstraint("total_price >= 0", name="chk_booking_total_price_nonneg"),
    )
    op.create_index("ix_bookings_user_id", "bookings", ["user_id"])
    op.create_index("ix_bookings_event_status", "bookings", ["event_id", "booking_status"])


def downgrade() -> None:
    op.drop_index("ix_bookings_event_status", table_name="bookings")
    op.drop_index("ix_bookings_user_id", table_name="bookings")
    op.drop_table("bookings")
    op.drop_index("ix_prices_event_id", table_name="prices")
    op.drop_table("prices")
    op.drop_index("ix_events_event_date", table_name="events")
    op.drop_table("events")

    bind = op.get_bind()
    booking_status.drop(bind, checkfirst=True)
    event_status.drop(bind, checkfirst=True)
    user_role.drop(bind, checkfirst=True)
