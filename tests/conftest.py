import os

os.environ.setdefault("secret_key", "test-secret-key")

import importlib
import pytest


# services that open an AuditSpan; the stub keeps tests off redis and the audit log
AUDITED_SERVICES = (
    "app.services.auth_service",
    "app.services.booking_service",
    "app.services.users_service",
)


class RecordingSpan:
    """Stands in for AuditSpan and remembers what the service put on it."""

    def __init__(self, *, scope: str, action: str, meta: dict | None = None, **fields):
        self.scope = scope
        self.action = action
        self.meta = dict(meta or {})
        self.object_type = fields.get("object_type")
        self.object_id = fields.get("object_id")
        self.event_id = fields.get("event_id")
        self.booking_id = fields.get("booking_id")
        self.outcome = None
        self.error = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.outcome = "FAIL" if exc_type else "SUCCESS"
        self.error = exc
        return False


@pytest.fixture(autouse=True)
def auditspan_stub(mocker):
    spans: list[RecordingSpan] = []

    def _record(**kwargs):
        span = RecordingSpan(**kwargs)
        spans.append(span)
        return span

    for module in AUDITED_SERVICES:
        importlib.import_module(module)
        mocker.patch(f"{module}.AuditSpan", side_effect=_record)

    return spans
