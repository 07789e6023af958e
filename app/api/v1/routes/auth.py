from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.database import get_db
from app.domain.users.schemas import UserCreateDTO
from app.domain.auth.schemas import LoginRequest, LoginResponse
from app.services.auth_service import register_user, login_user
from typing import Annotated


router = APIRouter(tags=['auth'])
db_dependency = Annotated[AsyncSession, Depends(get_db)]


@router.post(
    '/register',
    status_code=status.HTTP_200_OK,
    response_model=LoginResponse
)
async def register(
        db: db_dependency,
        username: Annotated[str, Form()],
        email: Annotated[str, Form()],
        password: Annotated[str, Form()],
        full_name: Annotated[str, Form()],
        phone: Annotated[str, Form()],
        address: Annotated[str | None, Form()] = None,
        photo: Annotated[UploadFile | None, File()] = None,
):
    try:
        model = UserCreateDTO(
            username=username,
            email=email,
            password=password,
            full_name=full_name,
            phone=phone,
            address=address,
        )
    except ValidationError as e:
        raise RequestValidationError(e.errors()) from e
    return await register_user(db, model, photo)


@router.post("/login", status_code=status.HTTP_200_OK, response_model=LoginResponse)
async def login(schema: LoginRequest, db: db_dependency):
    return await login_user(db, schema.username, schema.password.get_secret_value())
