import logging
from sqlalchemy import select, text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.config import LOCK_TIMEOUT_MS
from app.domain.events.models import Event

logger = logging.getLogger("app.uow")

# lock_not_available, serialization_failure, deadlock_detected
RETRYABLE_SQLSTATES = frozenset({"55P03", "40001", "40P01"})


def sqlstate_of(exc: DBAPIError) -> str | None:
    orig = getattr(exc, "orig", None)
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, DBAPIError) and sqlstate_of(exc) in RETRYABLE_SQLSTATES


class UnitOfWork:
    """
    Transactional boundary around a request session.

    ``begin`` opens (or joins) the session transaction and bounds lock waits,
    ``lock_event`` takes the row lock that serializes capacity checks of one
    event, ``commit``/``rollback`` end the unit. Used as an async context
    manager the unit is rolled back when the body raises and left open
    otherwise, so the caller decides where to commit.
    """

    def __init__(self, session: AsyncSession, *, lock_timeout_ms: int = LOCK_TIMEOUT_MS):
        self.session = session
        self.lock_timeout_ms = lock_timeout_ms
        self._active = False

    async def __aenter__(self) -> "UnitOfWork":
        await self.begin()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if exc_type is not None and self._active:
            await self.rollback()
        return False

    async def begin(self) -> None:
        if not self.session.in_transaction():
            await self.session.begin()
        # SET does not accept bind parameters; the value is an int from config
        await self.session.execute(text(f"SET LOCAL lock_timeout = {int(self.lock_timeout_ms)}"))
        self._active = True

    async def lock_event(self, event_id: int) -> Event | None:
        return await self.session.scalar(
            select(Event)
            .where(Event.id == event_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )

    async def commit(self) -> None:
        await self.session.commit()
        self._active = False

    async def rollback(self) -> None:
        try:
            await self.session.rollback()
        finally:
            self._active = False
