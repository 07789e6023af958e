from pydantic import BaseModel, EmailStr, Field, field_validator, ConfigDict, SecretStr
from datetime import datetime
from typing import Literal
from app.domain.users.models import UserRole
from app.core.utils.text_utils import strip_text
from app.core.utils.validators import normalize_phone_or_none, normalize_username
from app.core.utils.serialization import Money


class UserCreateDTO(BaseModel):
    model_config = ConfigDict(extra='ignore')

    username: str = Field(min_length=3, max_length=50)
    email: EmailStr
    password: SecretStr = Field(
        min_length=6,
        max_length=64,
        description='Password must be between 6 and 64 characters long'
    )
    full_name: str = Field(min_length=2, max_length=256)
    phone: str
    address: str | None = Field(default=None, max_length=500)

    _username = field_validator("username", mode="before")(normalize_username)
    _strip_name = field_validator("full_name", "address", mode="before")(strip_text)

    @field_validator("phone", mode="before")
    def _require_phone(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValueError("Phone is required")
        return normalize_phone_or_none(v)

    @field_validator("email", mode="before")
    def _normalize_email(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class AdminUserCreateDTO(UserCreateDTO):
    model_config = ConfigDict(extra='forbid')

    role: UserRole = UserRole.USER


class AdminUserUpdateDTO(BaseModel):
    """Every field is optional; only fields that were sent are applied."""
    model_config = ConfigDict(extra='forbid')

    username: str | None = Field(default=None, min_length=3, max_length=50)
    email: EmailStr | None = None
    full_name: str | None = Field(default=None, min_length=2, max_length=256)
    phone: str | None = None
    address: str | None = Field(default=None, max_length=500)
    role: UserRole | None = None
    password: SecretStr | None = Field(default=None, min_length=6, max_length=64)

    _username = field_validator("username", mode="before")(normalize_username)
    _strip_name = field_validator("full_name", mode="before")(strip_text)
    _phone = field_validator("phone", mode="before")(normalize_phone_or_none)

    @field_validator("email", mode="before")
    def _normalize_email(cls, v):
        if isinstance(v, str):
            return v.strip().lower() or None
        return v


class UserReadDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: EmailStr
    full_name: str
    phone: str | None
    address: str | None
    photo_path: str | None
    role: UserRole


class UserEnvelopeDTO(BaseModel):
    success: Literal[True] = True
    user: UserReadDTO


class AdminUserListItemDTO(UserReadDTO):
    created_at: datetime
    total_bookings: int
    total_spent: Money


class AdminUsersDTO(BaseModel):
    success: Literal[True] = True
    users: list[AdminUserListItemDTO]


class AdminUserCreatedDTO(BaseModel):
    success: Literal[True] = True
    message: str = "User created successfully"
    user_id: int


class AdminUserUpdatedDTO(BaseModel):
    success: Literal[True] = True
    message: str = "User updated successfully"
    updated_fields: list[str]


class AdminUserDeletedDTO(BaseModel):
    success: Literal[True] = True
    message: str = "User deleted successfully"
    deleted_bookings: int
