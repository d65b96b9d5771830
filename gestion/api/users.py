"""
Users API endpoints
"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gestion.core.auth import AuthenticatedUser, require_permissions
from gestion.core.database import get_db
from gestion.domain.base import MessageResponse
from gestion.domain.user import CreateUserRequest, UpdateUserRequest, UserDetail, UserResponse
from gestion.services.user_service import UserService


router = APIRouter()


@router.get("", response_model=List[UserResponse])
async def get_users(
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_users")),
):
    """Listar usuarios (más recientes primero)"""
    return UserService(db).find_all()


@router.get("/{user_id}", response_model=UserDetail)
async def get_user(
    user_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_users")),
):
    return UserService(db).find_one(user_id)


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(
    data: CreateUserRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("create_users")),
):
    return UserService(db).create(data)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    data: UpdateUserRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("update_users")),
):
    """Actualizar datos, rol, cargo, contraseña o estado del usuario"""
    return UserService(db).update(user_id, data)


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("delete_users")),
):
    return UserService(db).remove(user_id, user.id)
