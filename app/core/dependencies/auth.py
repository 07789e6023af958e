from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Annotated
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.database import get_db
from app.core.security import decode_access_token
from app.domain.users.models import User, UserRole
from app.domain.auth.schemas import TokenPayload
from app.domain.exceptions import Unauthorized, Forbidden
from app.core.ctx import bind_actor


bearer_scheme = HTTPBearer(auto_error=False)


async def get_token_payload(
        credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]
) -> TokenPayload:
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Unauthorized. Please login.", ctx={"reason": "missing_token"})
    return decode_access_token(credentials.credentials)


def get_current_user_with_roles(*allowed_roles: str):
    allowed = {UserRole(r).value for r in allowed_roles}

    async def _inner(payload: Annotated[TokenPayload, Depends(get_token_payload)],
                     db: Annotated[AsyncSession, Depends(get_db)]) -> User:
        if allowed and payload.role not in allowed:
            raise Forbidden("Forbidden. Admin access required.", ctx={"required": sorted(allowed), "role": payload.role})

        stmt = select(User).where(User.id == payload.user_id)
        result = await db.execute(stmt)
        user = result.scalars().first()
        if not user:
            raise Unauthorized("User not found", ctx={"user_id": payload.user_id})

        bind_actor(user.id, user.role.value)

        if allowed and user.role.value not in allowed:
            raise Forbidden("Forbidden. Admin access required.", ctx={"required": sorted(allowed), "role": user.role.value})
        return user
    return _inner


current_user = get_current_user_with_roles("user", "admin")
current_admin = get_current_user_with_roles("admin")
