from datetime import date, time
from decimal import Decimal


def db_with_scalars_first(mocker, value):
    res = mocker.Mock()
    res.scalars.return_value.first.return_value = value
    db = mocker.Mock()
    db.execute = mocker.AsyncMock(return_value=res)
    return db, res


def db_with_scalar(mocker, value):
    db = mocker.Mock()
    db.scalar = mocker.AsyncMock(return_value=value)
    return db


def booking_db(mocker):
    db = mocker.MagicMock()
    db.in_transaction.return_value = True
    db.execute = mocker.AsyncMock()
    db.scalar = mocker.AsyncMock()
    db.flush = mocker.AsyncMock()
    db.commit = mocker.AsyncMock()
    db.rollback = mocker.AsyncMock()
    return db


def create_event(mocker, **override):
    data = dict(
        id=1,
        event_name="Summer Picnic",
        event_date=date(2030, 7, 1),
        event_time=time(12, 0),
        total_capacity=100,
        max_tickets_per_sale=4,
        requires_adult=False,
        status="active",
    )
    data.update(override)
    event = mocker.Mock()
    for k, v in data.items():
        setattr(event, k, v)
    return event


def create_price(mocker, adult="10.00", child="5.00", seat_type="with_table"):
    price = mocker.Mock()
    price.adult_price = Decimal(adult)
    price.child_price = Decimal(child)
    price.seat_type = seat_type
    return price


def create_user(mocker, **override):
    from app.domain.users.models import UserRole
    data = dict(
        id=1,
        username="alice",
        email="alice@example.com",
        full_name="Alice Smith",
        phone="+447400123456",
        address=None,
        photo_path=None,
        role=UserRole.USER,
        password_hash="hash",
    )
    data.update(override)
    user = mocker.Mock()
    for k, v in data.items():
        setattr(user, k, v)
    return user
