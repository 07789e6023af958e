from app.core.database import Base
from sqlalchemy import Identity, ForeignKey, CheckConstraint, UniqueConstraint, Text, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship
from decimal import Decimal


class Price(Base):
    __tablename__ = 'prices'

    id: Mapped[int] = mapped_column(Identity(always=True), primary_key=True)
    event_id: Mapped[int] = mapped_column(ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    seat_type: Mapped[str] = mapped_column(Text, nullable=False)
    adult_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    child_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    event = relationship("Event", back_populates="prices")

    __table_args__ = (
        UniqueConstraint("event_id", "seat_type", name="uq_prices_event_seat_type"),
        CheckConstraint("adult_price >= 0", name="chk_adult_price"),
        CheckConstraint("child_price >= 0", name="chk_child_price"),
    )
