import pytest
from decimal import Decimal
from app.services import pricing_service
from app.domain.exceptions import SeatTypeUnavailable
from tests.helper import create_price, db_with_scalar


@pytest.mark.parametrize("adult, child, num_adults, num_children, expected", [
    ("10.00", "5.00", 2, 1, "25.00"),
    ("10.00", "5.00", 0, 3, "15.00"),
    ("12.50", "0.00", 1, 4, "12.50"),
    ("0.335", "0.00", 1, 0, "0.34"),
])
def test_compute_total(mocker, adult, child, num_adults, num_children, expected):
    price = create_price(mocker, adult=adult, child=child)

    total = pricing_service.compute_total(price, num_adults, num_children)

    assert total == Decimal(expected)
    assert total.as_tuple().exponent == -2


@pytest.mark.asyncio
async def test_require_price_returns_row(mocker):
    price = create_price(mocker)
    db = db_with_scalar(mocker, price)

    assert await pricing_service.require_price(db, 1, "with_table") is price
    db.scalar.assert_awaited_once()


@pytest.mark.asyncio
async def test_require_price_missing_raises_seat_type_unavailable(mocker):
    db = db_with_scalar(mocker, None)

    with pytest.raises(SeatTypeUnavailable) as e:
        await pricing_service.require_price(db, 3, "balcony")

    assert str(e.value) == "Seat type 'balcony' is not available for this event"
    assert e.value.ctx == {"event_id": 3, "seat_type": "balcony"}


@pytest.mark.asyncio
async def test_resolve_price(mocker):
    db = db_with_scalar(mocker, create_price(mocker, adult="20.00", child="7.50", seat_type="without_table"))

    total = await pricing_service.resolve_price(db, 1, "without_table", 1, 2)

    assert total == Decimal("35.00")
