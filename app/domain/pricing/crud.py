from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from .models import Price


async def get_price(db: AsyncSession, event_id: int, seat_type: str) -> Price | None:
    return await db.scalar(select(Price).where(Price.event_id == event_id, Price.seat_type == seat_type))
