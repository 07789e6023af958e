from app.core.utils.serialization import normalize_ctx


class AppError(Exception):
    def __init__(self, message: str = "", *, ctx: dict | None = None) -> None:
        super().__init__(message or self.__class__.__name__)
        self.ctx = normalize_ctx(ctx or {})

    @property
    def kind(self) -> str:
        return self.__class__.__name__


class NotFound(AppError):
    pass
class Unauthorized(AppError):
    pass
class Forbidden(AppError):
    pass
class Conflict(AppError):
    pass
class InvalidInput(AppError):
    pass
class InvalidCredentials(AppError):
    pass


class BusinessRuleViolation(AppError):
    pass
class AdultRequired(BusinessRuleViolation):
    pass
class TicketLimitExceeded(BusinessRuleViolation):
    pass
class InsufficientCapacity(BusinessRuleViolation):
    pass
class PhotoRequired(BusinessRuleViolation):
    pass
class SeatTypeUnavailable(BusinessRuleViolation):
    pass


class PersistenceError(AppError):
    pass
class BookingPersistFailure(PersistenceError):
    pass
class BookingBusy(PersistenceError):
    pass
