from fastapi import APIRouter, Depends, status
from typing import Annotated
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.database import get_db
from app.core.dependencies.auth import current_user
from app.domain.users.models import User
from app.services import booking_service
from app.domain.booking.schemas import BookingRequestDTO, BookingResponseDTO


router = APIRouter(tags=["booking"])
db_dependency = Annotated[AsyncSession, Depends(get_db)]


@router.post(
    "/booking",
    status_code=status.HTTP_200_OK,
    response_model=BookingResponseDTO,
)
async def create_booking(
        schema: BookingRequestDTO,
        db: db_dependency,
        user: Annotated[User, Depends(current_user)],
):
    booking = await booking_service.attempt_booking(
        db=db,
        user=user,
        event_id=schema.event_id,
        num_adults=schema.num_adults,
        num_children=schema.num_children,
        seat_type=schema.seat_type,
    )
    return BookingResponseDTO(booking=booking)
