from .users.models import User, UserRole
from .events.models import Event, EventStatus
from .pricing.models import Price
from .booking.models import Booking, BookingStatus

__all__ = (
    "User", "UserRole", "Event", "EventStatus", "Price", "Booking", "BookingStatus"
)
