"""
Auth Domain Models
"""
from typing import List, Optional

from pydantic import EmailStr, Field

from gestion.domain.base import CamelModel, UUIDStr


class LoginRequest(CamelModel):
    email: EmailStr = Field(..., description="Email del usuario")
    password: str = Field(..., min_length=6, description="Contraseña")


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    role_id: Optional[UUIDStr] = None


class RefreshRequest(CamelModel):
    refresh_token: str


class RoleSummary(CamelModel):
    id: str
    name: str


class UserSummary(CamelModel):
    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class UserProfile(UserSummary):
    is_active: bool
    role: RoleSummary
    cargo_id: Optional[str] = None
    permissions: List[str] = Field(default_factory=list)


class TokenResponse(CamelModel):
    access_token: str
    refresh_token: str
    user: UserProfile
