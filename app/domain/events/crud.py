from datetime import date
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from app.domain.booking.models import Booking, BookingStatus
from app.domain.pricing.models import Price
from .models import Event, EventStatus


def booked_tickets_subquery():
    return (
        select(Booking.event_id.label("event_id"), func.sum(Booking.total_tickets).label("booked"))
        .where(Booking.booking_status == BookingStatus.CONFIRMED)
        .group_by(Booking.event_id)
        .subquery()
    )


def _events_with_availability_stmt():
    booked = booked_tickets_subquery()
    return (
        select(Event, (Event.total_capacity - func.coalesce(booked.c.booked, 0)).label("available_tickets"))
        .outerjoin(booked, booked.c.event_id == Event.id)
    )


async def get_booked_tickets(db: AsyncSession, event_id: int) -> int:
    booked = await db.scalar(
        select(func.coalesce(func.sum(Booking.total_tickets), 0))
        .where(Booking.event_id == event_id, Booking.booking_status == BookingStatus.CONFIRMED)
    )
    return int(booked or 0)


async def get_event_with_availability(db: AsyncSession, event_id: int) -> tuple[Event, int] | None:
    stmt = _events_with_availability_stmt().where(Event.id == event_id)
    row = (await db.execute(stmt)).tuples().first()
    if row is None:
        return None
    event, available = row
    return event, int(available)


async def list_upcoming_events(db: AsyncSession, today: date) -> list[tuple[Event, int]]:
    stmt = (
        _events_with_availability_stmt()
        .where(Event.status == EventStatus.ACTIVE, Event.event_date >= today)
        .order_by(Event.event_date, Event.event_time, Event.id)
    )
    rows = (await db.execute(stmt)).tuples().all()
    return [(event, int(available)) for event, available in rows]


async def get_prices_for_events(db: AsyncSession, event_ids: list[int]) -> dict[int, list[Price]]:
    if not event_ids:
        return {}
    rows = await db.scalars(
        select(Price).where(Price.event_id.in_(event_ids)).order_by(Price.event_id, Price.seat_type)
    )
    out: dict[int, list[Price]] = {event_id: [] for event_id in event_ids}
    for price in rows.all():
        out[price.event_id].append(price)
    return out
