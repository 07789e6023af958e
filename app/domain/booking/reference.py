import random
import secrets
from datetime import date
from app.core.config import BOOKING_REFERENCE_PREFIX

_rng = secrets.SystemRandom()


def generate_booking_reference(
        today: date | None = None,
        rng: random.Random | None = None,
        prefix: str = BOOKING_REFERENCE_PREFIX
) -> str:
    """
    Human readable reference: prefix + YYYYMMDD + 4 random digits (1000-9999).
    Only 9000 values per day, so the unique constraint on bookings is the
    real guarantee and collisions are retried by the caller.
    """
    today = today or date.today()
    suffix = (rng or _rng).randint(1000, 9999)
    return f"{prefix}{today.strftime('%Y%m%d')}{suffix}"
