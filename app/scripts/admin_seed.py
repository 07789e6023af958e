import asyncio
import logging
from anyio import to_thread
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.security import hash_password
from app.domain.users.models import User, UserRole
from app.core.config import ADMIN_USERNAME, ADMIN_EMAIL, ADMIN_PASSWORD
from app.core.database import session_scope

logger = logging.getLogger("app.scripts.admin_seed")


async def seed_admin_user(
        db: AsyncSession,
        username: str | None = ADMIN_USERNAME,
        email: str | None = ADMIN_EMAIL,
        password: str | None = ADMIN_PASSWORD
) -> User | None:
    """Create the admin account, or reset password and role of an existing one."""
    if not (username and email and password):
        logger.warning("Admin seed skipped, username, email or password not configured")
        return None

    password_hash = await to_thread.run_sync(hash_password, password)
    user = await db.scalar(select(User).where(User.username == username))

    if user is None:
        user = User(
            username=username,
            email=email.strip().lower(),
            full_name="Park Administrator",
            password_hash=password_hash,
            role=UserRole.ADMIN,
        )
        db.add(user)
        logger.info("Admin account created username=%s", username)
    else:
        user.password_hash = password_hash
        user.role = UserRole.ADMIN
        logger.info("Admin account reset username=%s", username)

    await db.flush()
    return user


async def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)s | %(name)s | %(message)s")
    async with session_scope() as db:
        await seed_admin_user(db)


if __name__ == "__main__":
    asyncio.run(main())
