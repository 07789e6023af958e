from datetime import date
from sqlalchemy.ext.asyncio import AsyncSession
from app.domain.events import crud
from app.domain.events.models import Event
from app.domain.events.schemas import EventReadDTO, SeatPriceDTO, EventListDTO, EventDetailDTO
from app.domain.pricing.models import Price
from app.domain.exceptions import NotFound


def _to_read_dto(event: Event, available: int, prices: list[Price]) -> EventReadDTO:
    return EventReadDTO(
        id=event.id,
        event_name=event.event_name,
        description=event.description,
        event_date=event.event_date,
        event_time=event.event_time,
        total_capacity=event.total_capacity,
        max_tickets_per_sale=event.max_tickets_per_sale,
        requires_adult=event.requires_adult,
        status=event.status,
        available_tickets=max(available, 0),
        prices={p.seat_type: SeatPriceDTO.model_validate(p) for p in prices},
    )


async def list_upcoming_events(db: AsyncSession, today: date | None = None) -> EventListDTO:
    rows = await crud.list_upcoming_events(db, today or date.today())
    prices = await crud.get_prices_for_events(db, [event.id for event, _ in rows])
    return EventListDTO(events=[_to_read_dto(event, available, prices.get(event.id, [])) for event, available in rows])


async def get_event_detail(db: AsyncSession, event_id: int) -> EventDetailDTO:
    row = await crud.get_event_with_availability(db, event_id)
    if row is None:
        raise NotFound("Event not found", ctx={"event_id": event_id})
    event, available = row
    prices = await crud.get_prices_for_events(db, [event.id])
    return EventDetailDTO(event=_to_read_dto(event, available, prices.get(event.id, [])))
