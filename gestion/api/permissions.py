"""
Permissions API endpoints
"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gestion.core.auth import AuthenticatedUser, require_permissions
from gestion.core.database import get_db
from gestion.domain.base import MessageResponse
from gestion.domain.user import (
    BulkPermissionResult,
    CreatePermissionRequest,
    PermissionResponse,
    UpdatePermissionRequest,
)
from gestion.services.permission_service import PermissionService


router = APIRouter()


@router.get("", response_model=List[PermissionResponse])
async def get_permissions(
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_permissions")),
):
    return PermissionService(db).find_all()


@router.get("/{permission_id}", response_model=PermissionResponse)
async def get_permission(
    permission_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_permissions")),
):
    return PermissionService(db).find_one(permission_id)


@router.post("", response_model=PermissionResponse, status_code=201)
async def create_permission(
    data: CreatePermissionRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("create_permissions")),
):
    return PermissionService(db).create(data)


@router.post("/bulk", response_model=List[BulkPermissionResult], status_code=201)
async def create_permissions_bulk(
    data: List[CreatePermissionRequest],
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("create_permissions")),
):
    """Crear varios permisos; el resultado se reporta por permiso"""
    return PermissionService(db).create_bulk(data)


@router.put("/{permission_id}", response_model=PermissionResponse)
async def update_permission(
    permission_id: str,
    data: UpdatePermissionRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("update_permissions")),
):
    return PermissionService(db).update(permission_id, data)


@router.delete("/{permission_id}", response_model=MessageResponse)
async def delete_permission(
    permission_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("delete_permissions")),
):
    return PermissionService(db).remove(permission_id)
