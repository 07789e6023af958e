from fastapi import APIRouter, status, Depends
from typing import Annotated
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.database import get_db
from app.domain.events.schemas import EventDetailRequestDTO, EventListDTO, EventDetailDTO
from app.services import event_service


router = APIRouter(tags=["events"])
db_dependency = Annotated[AsyncSession, Depends(get_db)]


@router.get("/events", status_code=status.HTTP_200_OK, response_model=EventListDTO)
async def list_events(db: db_dependency):
    return await event_service.list_upcoming_events(db)


@router.post("/events", status_code=status.HTTP_200_OK, response_model=EventDetailDTO)
async def get_event(schema: EventDetailRequestDTO, db: db_dependency):
    return await event_service.get_event_detail(db, schema.event_id)
