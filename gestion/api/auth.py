"""
Authentication API endpoints
- Login / register with JWT access + refresh tokens
- Token refresh and logout
- Current user profile
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gestion.core.auth import AuthenticatedUser, get_current_user
from gestion.core.database import get_db
from gestion.domain.auth import (
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
    UserProfile,
)
from gestion.domain.base import MessageResponse
from gestion.services.auth_service import AuthService


router = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def login(data: LoginRequest, db: Session = Depends(get_db)):
    """Iniciar sesión con email y contraseña"""
    return AuthService(db).login(data)


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(data: RegisterRequest, db: Session = Depends(get_db)):
    """Registrar un nuevo usuario (rol `user` por defecto)"""
    return AuthService(db).register(data)


@router.post("/refresh", response_model=TokenResponse)
async def refresh(data: RefreshRequest, db: Session = Depends(get_db)):
    return AuthService(db).refresh(data.refresh_token)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(get_current_user),
):
    AuthService(db).logout(user.id)
    return {"message": "Sesión cerrada correctamente"}


@router.get("/me", response_model=UserProfile)
async def me(
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(get_current_user),
):
    """Perfil del usuario autenticado con sus permisos"""
    return AuthService(db).profile(user.id)
