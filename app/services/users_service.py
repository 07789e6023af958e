from anyio import to_thread
from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.auditing import AuditSpan
from app.core.security import hash_password
from app.core.uploads import save_profile_photo
from app.domain.users import crud
from app.domain.users.models import User, UserRole
from app.domain.users.schemas import AdminUsersDTO, AdminUserListItemDTO, AdminUserCreateDTO, AdminUserUpdateDTO, \
    AdminUserCreatedDTO, AdminUserUpdatedDTO, AdminUserDeletedDTO, UserReadDTO
from app.services.auth_service import create_user, ensure_unique_identity
from app.domain.exceptions import NotFound, Forbidden, InvalidInput


async def list_users_admin(db: AsyncSession) -> AdminUsersDTO:
    rows = await crud.list_users_with_stats(db)
    items = [
        AdminUserListItemDTO(
            **UserReadDTO.model_validate(user).model_dump(),
            created_at=user.created_at,
            total_bookings=total_bookings,
            total_spent=total_spent,
        )
        for user, total_bookings, total_spent in rows
    ]
    return AdminUsersDTO(users=items)


async def create_user_admin(db: AsyncSession, schema: AdminUserCreateDTO) -> AdminUserCreatedDTO:
    async with AuditSpan(scope="USERS", action="CREATE", object_type="user", meta={"role": schema.role.value}) as span:
        await ensure_unique_identity(db, schema.username, schema.email)
        user = await create_user(db, schema, role=schema.role)
        span.object_id = user.id
        return AdminUserCreatedDTO(user_id=user.id)


async def _require_user(db: AsyncSession, user_id: int) -> User:
    user = await crud.get_user_by_id(user_id, db)
    if not user:
        raise NotFound("User not found", ctx={"user_id": user_id})
    return user


async def _ensure_admin_remains(db: AsyncSession, target: User, actor: User) -> None:
    if target.role != UserRole.ADMIN:
        return
    if target.id == actor.id:
        raise Forbidden("Cannot remove your own admin role", ctx={"user_id": target.id})
    if await crud.lock_admins(db) <= 1:
        raise Forbidden("Cannot remove the last admin account", ctx={"user_id": target.id})


async def update_user_admin(
        db: AsyncSession,
        user_id: int,
        schema: AdminUserUpdateDTO,
        actor: User
) -> AdminUserUpdatedDTO:
    changes = schema.model_dump(exclude_unset=True, exclude={"password"})
    async with AuditSpan(
        scope="USERS",
        action="UPDATE",
        object_type="user",
        object_id=user_id,
        meta={"fields": sorted(schema.model_fields_set)}
    ) as span:
        user = await _require_user(db, user_id)

        await ensure_unique_identity(db, changes.get("username"), changes.get("email"), exclude_id=user_id)

        if changes.get("role") is not None and changes["role"] != user.role:
            await _ensure_admin_remains(db, user, actor)

        if schema.password is not None:
            changes["password_hash"] = await to_thread.run_sync(hash_password, schema.password.get_secret_value())

        applied = crud.apply_user_update(user, changes)
        if not applied:
            raise InvalidInput("No fields to update", ctx={"user_id": user_id})

        await db.flush()
        span.meta["applied"] = applied
        return AdminUserUpdatedDTO(updated_fields=applied)


async def delete_user_admin(db: AsyncSession, user_id: int, actor: User) -> AdminUserDeletedDTO:
    async with AuditSpan(scope="USERS", action="DELETE", object_type="user", object_id=user_id) as span:
        if user_id == actor.id:
            raise Forbidden("Cannot delete your own account", ctx={"user_id": user_id})

        user = await _require_user(db, user_id)
        await _ensure_admin_remains(db, user, actor)

        deleted_bookings = await crud.count_user_bookings(user_id, db)
        await crud.delete_user(user_id, db)
        await db.flush()

        span.meta["deleted_bookings"] = deleted_bookings
        return AdminUserDeletedDTO(deleted_bookings=deleted_bookings)


async def update_my_photo(db: AsyncSession, user: User, photo: UploadFile) -> User:
    async with AuditSpan(scope="USERS", action="UPDATE_PHOTO", object_type="user", object_id=user.id):
        photo_path = await save_profile_photo(photo)
        if not photo_path:
            raise InvalidInput("Photo must be a jpg, jpeg, png or gif image", ctx={"filename": photo.filename})
        user.photo_path = photo_path
        await db.flush()
        return user
