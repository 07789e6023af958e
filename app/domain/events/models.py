from sqlalchemy.orm import mapped_column, Mapped, relationship
from sqlalchemy import Identity, Text, Integer, CheckConstraint, Boolean, TIMESTAMP, Date, Time, func, Enum
from app.core.database import Base
from datetime import datetime, date, time
import enum


class EventStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class Event(Base):
    __tablename__ = "events"

    id: Mapped[int] = mapped_column(Identity(always=True), primary_key=True)
    event_name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    event_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    event_time: Mapped[time] = mapped_column(Time, nullable=False)
    total_capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    max_tickets_per_sale: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    requires_adult: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    status: Mapped[EventStatus] = mapped_column(
        Enum(EventStatus, name="event_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=EventStatus.ACTIVE
    )
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)

    prices: Mapped[list["Price"]] = relationship(back_populates="event", lazy="raise")

    __table_args__ = (
        CheckConstraint("total_capacity >= 0", name="chk_event_capacity_nonneg"),
        CheckConstraint("max_tickets_per_sale >= 1", name="chk_event_max_tickets_pos"),
    )
