from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_, exists, delete
from app.domain.booking.models import Booking, BookingStatus
from .models import User, UserRole


# patch field -> mapped column; the only columns an update may touch
USER_UPDATE_FIELDS: dict[str, str] = {
    "username": "username",
    "email": "email",
    "full_name": "full_name",
    "phone": "phone",
    "address": "address",
    "role": "role",
    "password_hash": "password_hash",
}

# fields where an explicit null clears the column
NULLABLE_UPDATE_FIELDS = frozenset({"address"})


async def get_user_by_id(user_id: int, db: AsyncSession) -> User | None:
    stmt = select(User).where(User.id == user_id)
    result = await db.execute(stmt)
    return result.scalars().first()


async def get_user_by_username_or_email(login: str, db: AsyncSession) -> User | None:
    stmt = select(User).where(or_(User.username == login, User.email == login.lower()))
    result = await db.execute(stmt)
    return result.scalars().first()


async def username_exists(username: str, db: AsyncSession, *, exclude_id: int | None = None) -> bool:
    cond = [User.username == username]
    if exclude_id is not None:
        cond.append(User.id != exclude_id)
    return bool(await db.scalar(select(exists().where(*cond))))


async def email_exists(email: str, db: AsyncSession, *, exclude_id: int | None = None) -> bool:
    cond = [User.email == email]
    if exclude_id is not None:
        cond.append(User.id != exclude_id)
    return bool(await db.scalar(select(exists().where(*cond))))


async def has_profile_photo(user_id: int, db: AsyncSession) -> bool:
    photo_path = await db.scalar(select(User.photo_path).where(User.id == user_id))
    return bool(photo_path)


async def lock_admins(db: AsyncSession) -> int:
    # FOR UPDATE cannot be combined with an aggregate, so count the locked ids
    stmt = select(User.id).where(User.role == UserRole.ADMIN).order_by(User.id).with_for_update()
    result = await db.execute(stmt)
    return len(result.scalars().all())


async def create_user(db: AsyncSession, data: dict) -> User:
    user = User(**data)
    db.add(user)
    await db.flush()
    return user


def apply_user_update(user: User, changes: dict) -> list[str]:
    applied = []
    for field, column in USER_UPDATE_FIELDS.items():
        if field not in changes:
            continue
        value = changes[field]
        if value is None and field not in NULLABLE_UPDATE_FIELDS:
            continue
        setattr(user, column, value)
        applied.append(field)
    return applied


async def count_user_bookings(user_id: int, db: AsyncSession) -> int:
    return int(await db.scalar(select(func.count(Booking.id)).where(Booking.user_id == user_id)) or 0)


async def delete_user(user_id: int, db: AsyncSession) -> int:
    result = await db.execute(delete(User).where(User.id == user_id))
    return result.rowcount or 0


async def list_users_with_stats(db: AsyncSession) -> list[tuple[User, int, Decimal]]:
    confirmed = (
        select(
            Booking.user_id.label("user_id"),
            func.count(Booking.id).label("total_bookings"),
            func.coalesce(func.sum(Booking.total_price), 0).label("total_spent"),
        )
        .where(Booking.booking_status == BookingStatus.CONFIRMED)
        .group_by(Booking.user_id)
        .subquery()
    )
    stmt = (
        select(
            User,
            func.coalesce(confirmed.c.total_bookings, 0),
            func.coalesce(confirmed.c.total_spent, 0),
        )
        .outerjoin(confirmed, confirmed.c.user_id == User.id)
        .order_by(User.created_at.desc(), User.id)
    )
    result = await db.execute(stmt)
    return [(user, int(total), Decimal(spent)) for user, total, spent in result.tuples().all()]
