"""
Roles API endpoints
- CRUD de roles
- Asignación de permisos (reemplazar, agregar, quitar)
"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gestion.core.auth import AuthenticatedUser, require_permissions
from gestion.core.database import get_db
from gestion.domain.base import MessageResponse
from gestion.domain.user import (
    CreateRoleRequest,
    RolePermissionsRequest,
    RoleResponse,
    UpdateRoleRequest,
)
from gestion.services.role_service import RoleService


router = APIRouter()


@router.get("", response_model=List[RoleResponse])
async def get_roles(
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_roles")),
):
    return RoleService(db).find_all()


@router.get("/{role_id}", response_model=RoleResponse)
async def get_role(
    role_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_roles")),
):
    return RoleService(db).find_one(role_id)


@router.post("", response_model=RoleResponse, status_code=201)
async def create_role(
    data: CreateRoleRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("create_roles")),
):
    return RoleService(db).create(data)


@router.put("/{role_id}", response_model=RoleResponse)
async def update_role(
    role_id: str,
    data: UpdateRoleRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("update_roles")),
):
    return RoleService(db).update(role_id, data)


@router.delete("/{role_id}", response_model=MessageResponse)
async def delete_role(
    role_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("delete_roles")),
):
    """Falla si el rol tiene usuarios asignados"""
    return RoleService(db).remove(role_id)


@router.put("/{role_id}/permissions", response_model=RoleResponse)
async def set_role_permissions(
    role_id: str,
    data: RolePermissionsRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("manage_permissions")),
):
    """Reemplaza todos los permisos del rol"""
    return RoleService(db).set_permissions(role_id, data.permission_ids)


@router.post("/{role_id}/permissions", response_model=RoleResponse)
async def add_role_permissions(
    role_id: str,
    data: RolePermissionsRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("manage_permissions")),
):
    return RoleService(db).add_permissions(role_id, data.permission_ids)


@router.delete("/{role_id}/permissions", response_model=RoleResponse)
async def remove_role_permissions(
    role_id: str,
    data: RolePermissionsRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("manage_permissions")),
):
    return RoleService(db).remove_permissions(role_id, data.permission_ids)
