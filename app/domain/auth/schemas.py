from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator
from typing import Literal
from app.core.utils.text_utils import strip_text


class TokenPayload(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    sub: str | None = None
    user_id: int
    username: str
    role: Literal["user", "admin"]
    exp: int
    iat: int | None = None


class LoginRequest(BaseModel):
    username: str = Field(min_length=1, description="Username or email")
    password: SecretStr = Field(min_length=1)

    _strip_username = field_validator("username", mode="before")(strip_text)


class AuthUserDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    full_name: str
    phone: str | None = None
    address: str | None = None
    photo_path: str | None = None
    role: str


class LoginResponse(BaseModel):
    success: Literal[True] = True
    message: str
    token: str
    token_type: Literal["bearer"] = "bearer"
    expires_in: int = Field(description='Expiration time in seconds')
    user: AuthUserDTO
