from decimal import Decimal, ROUND_HALF_UP
from sqlalchemy.ext.asyncio import AsyncSession
from app.domain.pricing.crud import get_price
from app.domain.pricing.models import Price
from app.domain.exceptions import SeatTypeUnavailable

CENT = Decimal("0.01")


def compute_total(price: Price, num_adults: int, num_children: int) -> Decimal:
    total = num_adults * Decimal(price.adult_price) + num_children * Decimal(price.child_price)
    return total.quantize(CENT, rounding=ROUND_HALF_UP)


async def require_price(db: AsyncSession, event_id: int, seat_type: str) -> Price:
    price = await get_price(db, event_id, seat_type)
    if price is None:
        raise SeatTypeUnavailable(
            f"Seat type '{seat_type}' is not available for this event",
            ctx={"event_id": event_id, "seat_type": seat_type}
        )
    return price


async def resolve_price(
        db: AsyncSession,
        event_id: int,
        seat_type: str,
        num_adults: int,
        num_children: int
) -> Decimal:
    price = await require_price(db, event_id, seat_type)
    return compute_total(price, num_adults, num_children)
