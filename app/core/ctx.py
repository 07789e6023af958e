from contextvars import ContextVar
from typing import Any

REQUEST_ID_CTX: ContextVar[str | None] = ContextVar("request_id", default=None)
ROUTE_CTX: ContextVar[str | None] = ContextVar("route", default=None)
CLIENT_IP_CTX: ContextVar[str | None] = ContextVar("client_ip", default=None)
REDIS_CTX: ContextVar[Any] = ContextVar("redis", default=None)
AUTH_USER_ID_CTX: ContextVar[int | None] = ContextVar("auth_user_id", default=None)
AUTH_ROLE_CTX: ContextVar[str | None] = ContextVar("auth_role", default=None)


def get_request_id() -> str | None:
    return REQUEST_ID_CTX.get()


def get_redis() -> Any:
    return REDIS_CTX.get()


def bind_actor(user_id: int, role: str) -> None:
    AUTH_USER_ID_CTX.set(user_id)
    AUTH_ROLE_CTX.set(role)


def request_context() -> dict[str, Any]:
    """Who did what, from where: the fields every audit record carries."""
    return {
        "request_id": REQUEST_ID_CTX.get(),
        "route": ROUTE_CTX.get(),
        "actor_user_id": AUTH_USER_ID_CTX.get(),
        "actor_role": AUTH_ROLE_CTX.get(),
        "actor_ip": CLIENT_IP_CTX.get(),
    }
