from typing import Annotated
from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.database import get_db
from app.core.dependencies.auth import current_user, current_admin
from app.domain.users.models import User
from app.domain.users.schemas import UserEnvelopeDTO, UserReadDTO, AdminUsersDTO, AdminUserCreateDTO, \
    AdminUserUpdateDTO, AdminUserCreatedDTO, AdminUserUpdatedDTO, AdminUserDeletedDTO
from app.services import users_service

router = APIRouter(tags=["users"])
db_dependency = Annotated[AsyncSession, Depends(get_db)]
me_dependency = Annotated[User, Depends(current_user)]
admin_dependency = Annotated[User, Depends(current_admin)]


@router.get("/users/me", status_code=status.HTTP_200_OK, response_model=UserEnvelopeDTO)
async def get_me(user: me_dependency):
    return UserEnvelopeDTO(user=UserReadDTO.model_validate(user))


@router.post("/users/me/photo", status_code=status.HTTP_200_OK, response_model=UserEnvelopeDTO)
async def upload_my_photo(db: db_dependency, user: me_dependency, photo: Annotated[UploadFile, File()]):
    user = await users_service.update_my_photo(db, user, photo)
    return UserEnvelopeDTO(user=UserReadDTO.model_validate(user))


@router.get(
    "/admin/users",
    status_code=status.HTTP_200_OK,
    response_model=AdminUsersDTO,
    dependencies=[Depends(current_admin)]
)
async def list_admin_users(db: db_dependency):
    return await users_service.list_users_admin(db)


@router.post(
    "/admin/users",
    status_code=status.HTTP_200_OK,
    response_model=AdminUserCreatedDTO,
    dependencies=[Depends(current_admin)]
)
async def create_admin_user(schema: AdminUserCreateDTO, db: db_dependency):
    return await users_service.create_user_admin(db, schema)


@router.put("/admin/users/{user_id}", status_code=status.HTTP_200_OK, response_model=AdminUserUpdatedDTO)
async def update_admin_user(user_id: int, schema: AdminUserUpdateDTO, db: db_dependency, admin: admin_dependency):
    return await users_service.update_user_admin(db, user_id, schema, admin)


@router.delete("/admin/users/{user_id}", status_code=status.HTTP_200_OK, response_model=AdminUserDeletedDTO)
async def delete_admin_user(user_id: int, db: db_dependency, admin: admin_dependency):
    return await users_service.delete_user_admin(db, user_id, admin)
