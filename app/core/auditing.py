import json
import time
import logging
from datetime import timezone, datetime
from typing import Any, Mapping
from sqlalchemy.exc import SQLAlchemyError
from redis.exceptions import RedisError
from app.core.config import AUDIT_STREAM, AUDIT_MAXLEN
from app.core.ctx import get_redis, request_context
from app.domain.exceptions import AppError


logger = logging.getLogger("app.audit")


class AuditStatus:
    SUCCESS = "SUCCESS"
    FAIL = "FAIL"


def _utc_stamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


async def audit_emit(
    *,
    scope: str,
    action: str,
    status: str,
    object_type: str | None = None,
    object_id: int | None = None,
    event_id: int | None = None,
    booking_id: int | None = None,
    reason: str | None = None,
    meta: Mapping[str, Any] | None = None
) -> str | None:
    """
    Record one audited action. The record is always logged; it is also
    appended to the capped audit stream when a redis client is bound to the
    request. Returns the stream entry id, or None when nothing was published.
    """
    record = {
        **request_context(),
        "scope": scope,
        "action": action,
        "status": status,
        "object_type": object_type,
        "object_id": object_id,
        "event_id": event_id,
        "booking_id": booking_id,
        "reason": reason,
        "meta": dict(meta or {}),
    }
    log = logger.info if status == AuditStatus.SUCCESS else logger.warning
    log(
        "%s.%s %s object=%s:%s event=%s booking=%s reason=%s",
        scope, action, status, object_type, object_id, event_id, booking_id, reason,
        extra={"request_id": record["request_id"], "actor_user_id": record["actor_user_id"]}
    )

    r = get_redis()
    if r is None:
        return None
    try:
        return await r.xadd(
            AUDIT_STREAM,
            {"json": json.dumps(record, default=str)},
            maxlen=AUDIT_MAXLEN,
            approximate=True
        )
    except RedisError:
        logger.warning("Audit publish failed scope=%s action=%s", scope, action, exc_info=True)
        return None


def _reason_from_exception(exception: BaseException | None) -> str | None:
    if exception is None:
        return None
    if isinstance(exception, AppError):
        return exception.kind
    if isinstance(exception, SQLAlchemyError):
        return "Database error"
    return exception.__class__.__name__


class AuditSpan:
    """
    Async context manager around a business action. Services fill in ids and
    meta while the block runs; on exit one record is emitted with the
    outcome, the failure kind and the duration.
    """

    def __init__(self, *, scope: str, action: str,
                 object_type: str | None = None, object_id: int | None = None,
                 event_id: int | None = None, booking_id: int | None = None,
                 meta: Mapping[str, Any] | None = None):
        self.scope = scope
        self.action = action
        self.object_type = object_type
        self.object_id = object_id
        self.event_id = event_id
        self.booking_id = booking_id
        self.meta = dict(meta or {})
        self._t0 = 0.0

    async def __aenter__(self):
        self._t0 = time.perf_counter()
        self.meta.setdefault("occurred_at", _utc_stamp())
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.meta["duration_ms"] = int((time.perf_counter() - self._t0) * 1000)
        await audit_emit(
            scope=self.scope,
            action=self.action,
            status=AuditStatus.FAIL if exc else AuditStatus.SUCCESS,
            object_type=self.object_type,
            object_id=self.object_id,
            event_id=self.event_id,
            booking_id=self.booking_id,
            reason=_reason_from_exception(exc),
            meta=self.meta
        )
        return False
