"""
Auth Service
Login, registro, refresh y logout con JWT (access + refresh).

Author: TM3
Date: 2026-01-13
"""
import hashlib
import hmac
import logging

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from gestion.core.auth import (
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)
from gestion.domain.auth import LoginRequest, RegisterRequest
from gestion.models import User
from gestion.repositories import RoleRepository, UserRepository

logger = logging.getLogger(__name__)

DEFAULT_ROLE = "user"


def hash_token(token: str) -> str:
    """SHA-256 del refresh token (bcrypt trunca a 72 bytes)"""
    return hashlib.sha256(token.encode()).hexdigest()


def build_profile(user: User) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "is_active": user.is_active,
        "role": {"id": user.role.id, "name": user.role.name},
        "cargo_id": user.cargo_id,
        "permissions": user.permission_names,
    }


class AuthService:

    def __init__(self, db: Session):
        self.db = db
        self.users = UserRepository(db)
        self.roles = RoleRepository(db)

    def login(self, data: LoginRequest) -> dict:
        user = self.users.find_by_email(data.email)
        if not user or not user.is_active or not verify_password(data.password, user.password):
            logger.info(f"Failed login attempt for {data.email}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Credenciales inválidas"
            )
        return self._issue_tokens(user)

    def register(self, data: RegisterRequest) -> dict:
        if self.users.find_by_email(data.email):
            raise HTTPException(status_code=400, detail="El email ya está registrado")

        if data.role_id:
            role = self.roles.get_by_id(data.role_id)
            if not role:
                raise HTTPException(status_code=400, detail="Invalid role ID")
        else:
            role = self.roles.find_by_name(DEFAULT_ROLE)
            if not role:
                raise HTTPException(status_code=500, detail=f"Rol por defecto '{DEFAULT_ROLE}' no existe")

        user = self.users.create(User(
            email=data.email.lower(),
            password=hash_password(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
            role_id=role.id,
        ))
        self.db.refresh(user)
        logger.info(f"User registered: {user.email} ({role.name})")
        return self._issue_tokens(user)

    def refresh(self, refresh_token: str) -> dict:
        payload = decode_token(refresh_token, "refresh")
        user = self.users.get_by_id(payload.get("sub", ""))
        if (
            not user
            or not user.is_active
            or not user.refresh_token
            or not hmac.compare_digest(hash_token(refresh_token), user.refresh_token)
        ):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Refresh token inválido"
            )
        return self._issue_tokens(user)

    def logout(self, user_id: str) -> None:
        user = self.users.get_by_id(user_id)
        if user:
            user.refresh_token = None
            self.db.commit()
            logger.info(f"User logged out: {user.email}")

    def profile(self, user_id: str) -> dict:
        user = self.users.get_by_id(user_id)
        if not user:
            raise HTTPException(status_code=404, detail=f"Usuario con ID {user_id} no encontrado")
        return build_profile(user)

    def _issue_tokens(self, user: User) -> dict:
        access_token = create_access_token(user)
        refresh_token = create_refresh_token(user)
        user.refresh_token = hash_token(refresh_token)
        self.db.commit()
        self.db.refresh(user)
        return {
            "access_token": access_token,
            "refresh_token": refresh_token,
            "user": build_profile(user),
        }
