from pydantic import BaseModel, Field, ConfigDict
from datetime import date, time
from typing import Literal
from app.domain.events.models import EventStatus
from app.core.utils.serialization import Money


class EventDetailRequestDTO(BaseModel):
    model_config = ConfigDict(extra='ignore')

    event_id: int = Field(gt=0)


class SeatPriceDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    adult_price: Money
    child_price: Money


class EventReadDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    event_name: str
    description: str | None
    event_date: date
    event_time: time
    total_capacity: int
    max_tickets_per_sale: int
    requires_adult: bool
    status: EventStatus
    available_tickets: int
    prices: dict[str, SeatPriceDTO] = Field(default_factory=dict)


class EventListDTO(BaseModel):
    success: Literal[True] = True
    events: list[EventReadDTO]


class EventDetailDTO(BaseModel):
    success: Literal[True] = True
    event: EventReadDTO
