from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from datetime import date, time
from typing import Literal
from app.core.utils.text_utils import strip_text
from app.core.utils.serialization import Money


class BookingRequestDTO(BaseModel):
    model_config = ConfigDict(extra='ignore')

    event_id: int = Field(gt=0)
    num_adults: int = Field(ge=0, le=1000)
    num_children: int = Field(ge=0, le=1000)
    seat_type: str = Field(min_length=1, max_length=50)

    _strip_seat_type = field_validator("seat_type", mode="before")(strip_text)

    @model_validator(mode="after")
    def _at_least_one_ticket(self):
        if self.num_adults + self.num_children < 1:
            raise ValueError("At least one ticket is required")
        return self


class BookingReadDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    booking_reference: str
    event_name: str
    event_date: date
    event_time: time
    num_adults: int
    num_children: int
    total_tickets: int
    seat_type: str
    total_price: Money


class BookingResponseDTO(BaseModel):
    success: Literal[True] = True
    message: str = "Booking successful"
    booking: BookingReadDTO
