"""
Users, Roles & Permissions Domain Models

Author: TM3
Date: 2026-01-22
"""
from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field

from gestion.domain.base import CamelModel, UUIDStr


# =============================================================================
# Permissions
# =============================================================================

class CreatePermissionRequest(CamelModel):
    name: str = Field(..., min_length=3, max_length=100, pattern=r"^[a-z_]+$")
    description: Optional[str] = None


class UpdatePermissionRequest(CamelModel):
    name: Optional[str] = Field(None, min_length=3, max_length=100, pattern=r"^[a-z_]+$")
    description: Optional[str] = None


class PermissionResponse(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None


class BulkPermissionResult(CamelModel):
    success: bool
    name: str
    permission: Optional[PermissionResponse] = None
    error: Optional[str] = None


# =============================================================================
# Roles
# =============================================================================

class CreateRoleRequest(CamelModel):
    name: str = Field(..., min_length=2, max_length=50)
    description: Optional[str] = None
    permission_ids: Optional[List[UUIDStr]] = None


class UpdateRoleRequest(CamelModel):
    name: Optional[str] = Field(None, min_length=2, max_length=50)
    description: Optional[str] = None


class RolePermissionsRequest(CamelModel):
    permission_ids: List[UUIDStr] = Field(..., min_length=1)


class RoleResponse(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    permissions: List[PermissionResponse] = Field(default_factory=list)
    users_count: int = 0
    created_at: Optional[datetime] = None


# =============================================================================
# Users
# =============================================================================

class CreateUserRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    role_id: UUIDStr
    cargo_id: Optional[UUIDStr] = None


class UpdateUserRequest(CamelModel):
    """cargoId en null desasigna el cargo"""
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6)
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    role_id: Optional[UUIDStr] = None
    cargo_id: Optional[UUIDStr] = None
    is_active: Optional[bool] = None


class UserRole(CamelModel):
    id: str
    name: str


class UserCargo(CamelModel):
    id: str
    name: str
    area_id: str


class UserResponse(CamelModel):
    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    is_active: bool
    role: UserRole
    cargo: Optional[UserCargo] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserDetail(UserResponse):
    permissions: List[str] = Field(default_factory=list)
