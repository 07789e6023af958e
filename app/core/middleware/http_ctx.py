import time
import uuid
import logging
from contextvars import ContextVar, Token
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from app.core.ctx import REQUEST_ID_CTX, ROUTE_CTX, CLIENT_IP_CTX, REDIS_CTX

logger = logging.getLogger("app.http")


def _client_ip(request: Request) -> str | None:
    xff = request.headers.get("x-forwarded-for")
    return xff.split(",")[0].strip() if xff else (request.client.host if request.client else None)


class HttpContextMiddleware(BaseHTTPMiddleware):
    """
    Binds request id, route, client ip and the redis client to the request
    context, echoes the request id back and logs one line per request.
    """

    def __init__(self, app, request_id_header: str = "X-Request-ID"):
        super().__init__(app)
        self.request_id_header = request_id_header

    @staticmethod
    def _bind(request: Request, req_id: str) -> list[tuple[ContextVar, Token]]:
        values: list[tuple[ContextVar, object]] = [
            (REQUEST_ID_CTX, req_id),
            (ROUTE_CTX, f"{request.method} {request.url.path}"),
            (CLIENT_IP_CTX, _client_ip(request)),
        ]
        redis_client = getattr(request.app.state, "redis", None)
        if redis_client is not None:
            values.append((REDIS_CTX, redis_client))
        return [(var, var.set(value)) for var, value in values]

    async def dispatch(self, request: Request, call_next):
        req_id = request.headers.get(self.request_id_header) or uuid.uuid4().hex
        tokens = self._bind(request, req_id)
        t0 = time.perf_counter()
        try:
            response = await call_next(request)
        finally:
            for var, token in reversed(tokens):
                var.reset(token)

        response.headers.setdefault(self.request_id_header, req_id)
        logger.info(
            "%s %s -> %d %dms request_id=%s",
            request.method, request.url.path, response.status_code,
            int((time.perf_counter() - t0) * 1000), req_id
        )
        return response
