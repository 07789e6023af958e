from app.core.database import Base
from enum import Enum
from decimal import Decimal
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Identity, Text, ForeignKey, Numeric, Integer, TIMESTAMP, func, Enum as SQLEnum, \
    CheckConstraint, Index, UniqueConstraint


class BookingStatus(str, Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class Booking(Base):
    __tablename__ = "bookings"

    id: Mapped[int] = mapped_column(Identity(always=True), primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    event_id: Mapped[int] = mapped_column(ForeignKey("events.id", ondelete="RESTRICT"), nullable=False)
    booking_reference: Mapped[str] = mapped_column(Text, nullable=False)
    num_adults: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    num_children: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_tickets: Mapped[int] = mapped_column(Integer, nullable=False)
    seat_type: Mapped[str] = mapped_column(Text, nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    booking_status: Mapped[BookingStatus] = mapped_column(
        SQLEnum(BookingStatus, name="booking_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=BookingStatus.CONFIRMED,
        server_default=BookingStatus.CONFIRMED.value
    )
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)

    user: Mapped["User"] = relationship(back_populates="bookings")

    __table_args__ = (
        CheckConstraint("num_adults >= 0 AND num_children >= 0", name="chk_booking_counts_nonneg"),
        CheckConstraint("num_adults + num_children >= 1", name="chk_booking_not_empty"),
        CheckConstraint("total_tickets = num_adults + num_children", name="chk_booking_total_tickets"),
        CheckConstraint("total_price >= 0", name="chk_booking_total_price_nonneg"),
        UniqueConstraint("booking_reference", name="uq_bookings_reference"),
        Index("ix_bookings_event_status", "event_id", "booking_status"),
    )
