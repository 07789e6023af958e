import logging
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.domain.exceptions import AppError, Unauthorized, Forbidden, PersistenceError
from app.core.ctx import get_request_id

logger = logging.getLogger("app.api")

# application failures are reported as 200 + success:false, only auth failures change the status
AUTH_STATUS: dict[type[AppError], int] = {
    Unauthorized: status.HTTP_401_UNAUTHORIZED,
    Forbidden: status.HTTP_403_FORBIDDEN,
}


def bearer_challenge(exc: Unauthorized) -> str:
    # RFC 6750: a request without credentials gets no error code
    if exc.ctx.get("reason") == "missing_token":
        return 'Bearer realm="api"'
    return f'Bearer realm="api", error="invalid_token", error_description="{exc}"'


def status_for(exc: AppError) -> int:
    return next((code for cls, code in AUTH_STATUS.items() if isinstance(exc, cls)), status.HTTP_200_OK)


def _humanize_field(loc: tuple) -> str | None:
    fields = [str(p) for p in loc if p not in ("body", "query", "path", "form") and not isinstance(p, int)]
    if not fields:
        return None
    return fields[-1].replace("_", " ").capitalize()


def validation_message(exc: RequestValidationError) -> str:
    """First validation problem as a sentence: 'Num adults is required', 'Email: ...'."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    field = _humanize_field(tuple(first.get("loc", ())))
    if first.get("type") == "missing":
        return f"{field} is required" if field else "Request body is required"
    msg = str(first.get("msg", "Invalid value")).removeprefix("Value error, ")
    if not field or msg.startswith(field):
        return msg
    return f"{field}: {msg}"


def failure(
        *,
        http_status: int,
        message: str,
        error: str | None = None,
        headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = {"success": False, "message": message}
    if error:
        body["error"] = error
    trace_id = get_request_id()
    if trace_id:
        body["trace_id"] = trace_id
    return JSONResponse(status_code=http_status, content=body, headers=headers)


def register_error_handler(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def _app_error_handler(request: Request, exc: AppError):
        if isinstance(exc, PersistenceError):
            logger.warning("Persistence failure kind=%s ctx=%s", exc.kind, exc.ctx)

        headers = {"WWW-Authenticate": bearer_challenge(exc)} if isinstance(exc, Unauthorized) else None
        return failure(http_status=status_for(exc), message=str(exc), error=exc.kind, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def _validation_error_handler(request: Request, exc: RequestValidationError):
        return failure(http_status=status.HTTP_200_OK, message=validation_message(exc), error="ValidationError")

    @app.exception_handler(StarletteHTTPException)
    async def _http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
            message = "Method not allowed"
        else:
            message = str(exc.detail)
        return failure(http_status=exc.status_code, message=message, headers=getattr(exc, "headers", None))
