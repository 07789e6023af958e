from fastapi import UploadFile
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from anyio import to_thread
from app.core.auditing import AuditSpan
from app.core.config import ACCESS_TOKEN_EXPIRE_MINUTES
from app.core.security import hash_password, verify_password, create_access_token
from app.core.uploads import save_profile_photo
from app.domain.auth.schemas import LoginResponse, AuthUserDTO
from app.domain.users import crud
from app.domain.users.models import User, UserRole
from app.domain.users.schemas import UserCreateDTO
from app.domain.exceptions import Conflict, InvalidCredentials


def issue_login_response(user: User, message: str) -> LoginResponse:
    token = create_access_token(user.id, user.username, user.role.value)
    return LoginResponse(
        message=message,
        token=token,
        expires_in=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        user=AuthUserDTO(
            id=user.id,
            username=user.username,
            email=user.email,
            full_name=user.full_name,
            phone=user.phone,
            address=user.address,
            photo_path=user.photo_path,
            role=user.role.value,
        ),
    )


async def ensure_unique_identity(
        db: AsyncSession,
        username: str | None,
        email: str | None,
        *,
        exclude_id: int | None = None
) -> None:
    if username and await crud.username_exists(username, db, exclude_id=exclude_id):
        raise Conflict("Username already exists", ctx={"username": username})
    if email and await crud.email_exists(email, db, exclude_id=exclude_id):
        raise Conflict("Email already exists", ctx={"email": email})


async def create_user(
        db: AsyncSession,
        model: UserCreateDTO,
        *,
        role: UserRole = UserRole.USER
) -> User:
    payload = model.model_dump(exclude={"password", "role"})
    payload["password_hash"] = await to_thread.run_sync(hash_password, model.password.get_secret_value())
    payload["role"] = role
    try:
        return await crud.create_user(db, payload)
    except IntegrityError as e:
        raise Conflict("User already exists", ctx={"username": model.username, "email": model.email}) from e


async def register_user(db: AsyncSession, model: UserCreateDTO, photo: UploadFile | None = None) -> LoginResponse:
    async with AuditSpan(scope="AUTH", action="REGISTER", object_type="user") as span:
        await ensure_unique_identity(db, model.username, model.email)
        user = await create_user(db, model)

        # the user row is flushed before the photo touches the disk
        photo_path = await save_profile_photo(photo)
        if photo_path:
            user.photo_path = photo_path
            await db.flush()

        span.object_id = user.id
        span.meta["has_photo"] = bool(photo_path)
        return issue_login_response(user, "Registration successful")


async def authenticate_user(db: AsyncSession, login: str, password: str) -> User:
    user = await crud.get_user_by_username_or_email(login.strip(), db)
    ok = False
    if user:
        ok = await to_thread.run_sync(verify_password, password, user.password_hash)
    if not user or not ok:
        raise InvalidCredentials("Invalid username or password", ctx={"reason": "bad_credentials"})
    return user


async def login_user(db: AsyncSession, login: str, password: str) -> LoginResponse:
    async with AuditSpan(scope="AUTH", action="LOGIN", object_type="user") as span:
        user = await authenticate_user(db, login, password)
        span.object_id = user.id
        return issue_login_response(user, "Login successful")
