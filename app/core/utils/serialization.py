from datetime import date, time
from decimal import Decimal
from typing import Any, Annotated
from pydantic import PlainSerializer


def normalize(value: Any) -> Any:
    if isinstance(value, (str, int, float, bool, type(None))):
        return value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, (list, tuple, set, frozenset)):
        return [normalize(v) for v in value]
    return str(value)


def normalize_ctx(ctx: dict[str, Any]) -> dict[str, Any]:
    return {k: normalize(v) for k, v in ctx.items()}


# money stays Decimal in Python, JSON responses carry it as a number
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
