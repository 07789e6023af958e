import logging
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.auditing import AuditSpan
from app.core.config import BOOKING_REFERENCE_ATTEMPTS
from app.core.unit_of_work import UnitOfWork, is_retryable
from app.domain.booking.models import Booking, BookingStatus
from app.domain.booking.reference import generate_booking_reference
from app.domain.booking.schemas import BookingReadDTO
from app.domain.events.crud import get_booked_tickets
from app.domain.events.models import Event, EventStatus
from app.domain.users.crud import has_profile_photo
from app.domain.users.models import User
from app.services.pricing_service import require_price, compute_total
from app.domain.exceptions import InvalidInput, NotFound, AdultRequired, TicketLimitExceeded, \
    InsufficientCapacity, PhotoRequired, BookingPersistFailure, BookingBusy

logger = logging.getLogger("app.booking")

REFERENCE_CONSTRAINT = "uq_bookings_reference"


def _validate_counts(num_adults: int, num_children: int) -> int:
    if num_adults < 0 or num_children < 0:
        raise InvalidInput(
            "Ticket counts cannot be negative",
            ctx={"num_adults": num_adults, "num_children": num_children}
        )
    total = num_adults + num_children
    if total < 1:
        raise InvalidInput("At least one ticket is required", ctx={"num_adults": num_adults, "num_children": num_children})
    return total


async def _lock_active_event(uow: UnitOfWork, event_id: int) -> Event:
    event = await uow.lock_event(event_id)
    if not event or event.status != EventStatus.ACTIVE:
        raise NotFound("Event not found", ctx={"event_id": event_id})
    return event


def _check_event_rules(event: Event, num_adults: int, num_children: int) -> None:
    if event.requires_adult and num_adults < 1:
        raise AdultRequired("At least one adult ticket is required for this event", ctx={"event_id": event.id})

    total = num_adults + num_children
    if total > event.max_tickets_per_sale:
        raise TicketLimitExceeded(
            f"Maximum {event.max_tickets_per_sale} tickets allowed per booking",
            ctx={"event_id": event.id, "requested": total, "limit": event.max_tickets_per_sale}
        )


async def _require_photo_if_needed(db: AsyncSession, event: Event, user_id: int, num_children: int) -> None:
    if not (event.requires_adult and num_children > 0):
        return
    if not await has_profile_photo(user_id, db):
        raise PhotoRequired(
            "Adult photo is required for bookings with children. Please update your profile.",
            ctx={"event_id": event.id, "user_id": user_id}
        )


def _ensure_capacity(event: Event, booked: int, requested: int) -> int:
    available = max(event.total_capacity - booked, 0)
    if requested > available:
        raise InsufficientCapacity(
            f"Only {available} tickets available",
            ctx={"event_id": event.id, "requested": requested, "available": available}
        )
    return available


def _is_reference_collision(exc: IntegrityError) -> bool:
    return REFERENCE_CONSTRAINT in str(exc.orig)


async def _insert_booking(db: AsyncSession, *, attempts: int = BOOKING_REFERENCE_ATTEMPTS, **fields) -> Booking:
    """
    Insert a confirmed booking inside a savepoint. A clash on the booking
    reference rolls back only the savepoint and retries with a fresh
    reference, other integrity errors propagate.
    """
    for attempt in range(1, attempts + 1):
        booking = Booking(
            booking_reference=generate_booking_reference(),
            booking_status=BookingStatus.CONFIRMED,
            **fields
        )
        try:
            async with db.begin_nested():
                db.add(booking)
                await db.flush()
            return booking
        except IntegrityError as e:
            if not _is_reference_collision(e):
                raise
            logger.warning(
                "Booking reference collision ref=%s attempt=%d/%d",
                booking.booking_reference, attempt, attempts
            )

    raise BookingPersistFailure("Booking failed", ctx={"reason": "reference_collision", "attempts": attempts})


async def attempt_booking(
        db: AsyncSession,
        user: User,
        event_id: int,
        num_adults: int,
        num_children: int,
        seat_type: str
) -> BookingReadDTO:
    """
    Reserve tickets for an event and record a confirmed booking.
    - Locks the event row FOR UPDATE so capacity checks of one event are serialized
    - Validates business rules and availability under the same lock
    - Commits the booking or rolls the whole unit back
    """
    total = _validate_counts(num_adults, num_children)
    user_id = user.id

    async with AuditSpan(
        scope="BOOKING",
        action="CREATE_BOOKING",
        object_type="booking",
        event_id=event_id,
        meta={"num_adults": num_adults, "num_children": num_children, "seat_type": seat_type}
    ) as span:
        uow = UnitOfWork(db)
        try:
            async with uow:
                # Part 1 - lock event row and check per-event rules
                event = await _lock_active_event(uow, event_id)
                _check_event_rules(event, num_adults, num_children)
                price = await require_price(db, event_id, seat_type)
                await _require_photo_if_needed(db, event, user_id, num_children)

                # Part 2 - availability under the lock
                booked = await get_booked_tickets(db, event_id)
                available = _ensure_capacity(event, booked, total)

                # Part 3 - persist
                total_price = compute_total(price, num_adults, num_children)
                booking = await _insert_booking(
                    db,
                    user_id=user_id,
                    event_id=event_id,
                    num_adults=num_adults,
                    num_children=num_children,
                    total_tickets=total,
                    seat_type=seat_type,
                    total_price=total_price,
                )
                await uow.commit()
        except SQLAlchemyError as e:
            if is_retryable(e):
                logger.warning("Booking lock wait exceeded event_id=%s user_id=%s", event_id, user_id)
                raise BookingBusy(
                    "Booking service is busy, please try again",
                    ctx={"event_id": event_id}
                ) from e
            logger.exception("Booking persist failed event_id=%s user_id=%s", event_id, user_id)
            raise BookingPersistFailure("Booking failed", ctx={"event_id": event_id}) from e

        span.booking_id = booking.id
        span.object_id = booking.id
        span.meta.update({"available_before": available, "booking_reference": booking.booking_reference})
        logger.info(
            "Booking confirmed ref=%s event_id=%s user_id=%s tickets=%d",
            booking.booking_reference, event_id, user_id, total
        )

        return BookingReadDTO(
            id=booking.id,
            booking_reference=booking.booking_reference,
            event_name=event.event_name,
            event_date=event.event_date,
            event_time=event.event_time,
            num_adults=num_adults,
            num_children=num_children,
            total_tickets=total,
            seat_type=seat_type,
            total_price=total_price,
        )
