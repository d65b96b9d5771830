"""
Authentication for Gestión API
Issues and validates JWT access/refresh tokens and resolves the current
user with its role permissions.
"""
from datetime import timedelta
from typing import List, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from passlib.context import CryptContext
from pydantic import BaseModel
from sqlalchemy.orm import Session

from gestion.core.config import settings
from gestion.core.database import get_db, utcnow
from gestion.models import User


# Security scheme for bearer tokens
security = HTTPBearer(auto_error=False)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ADMIN_ROLE = "admin"


class AuthenticatedUser(BaseModel):
    """User data resolved from the access token"""
    id: str
    email: str
    role_id: str
    role_name: str
    permissions: List[str] = []

    @property
    def is_admin(self) -> bool:
        return self.role_name == ADMIN_ROLE


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def _create_token(user, token_type: str, secret: str, seconds: int) -> str:
    payload = {
        "sub": user.id,
        "email": user.email,
        "roleId": user.role_id,
        "type": token_type,
        "iat": utcnow(),
        "exp": utcnow() + timedelta(seconds=seconds),
    }
    return jwt.encode(payload, secret, algorithm=settings.JWT_ALGORITHM)


def create_access_token(user) -> str:
    return _create_token(user, "access", settings.JWT_ACCESS_SECRET, settings.access_token_seconds)


def create_refresh_token(user) -> str:
    return _create_token(user, "refresh", settings.JWT_REFRESH_SECRET, settings.refresh_token_seconds)


def decode_token(token: str, token_type: str = "access") -> dict:
    """
    Decode and validate a token issued by this API.

    Payload:
    {
        "sub": "user_id",
        "email": "user@example.com",
        "roleId": "role_id",
        "type": "access" | "refresh",
        "iat": 1234567890,
        "exp": 1234567890
    }
    """
    secret = settings.JWT_ACCESS_SECRET if token_type == "access" else settings.JWT_REFRESH_SECRET
    try:
        payload = jwt.decode(token, secret, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        error_msg = str(e).lower()
        if "expired" in error_msg:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token has expired",
                headers={"WWW-Authenticate": "Bearer"}
            )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {str(e)}",
            headers={"WWW-Authenticate": "Bearer"}
        )

    if payload.get("type") != token_type:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type",
            headers={"WWW-Authenticate": "Bearer"}
        )
    return payload


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> AuthenticatedUser:
    """
    Dependency that extracts and validates the current user from JWT.

    Usage:
        @router.get("/protected")
        async def protected_route(user: AuthenticatedUser = Depends(get_current_user)):
            return {"message": f"Hello {user.email}"}
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"}
        )

    payload = decode_token(credentials.credentials, "access")
    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload: missing user id",
            headers={"WWW-Authenticate": "Bearer"}
        )

    user = db.get(User, user_id)
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Usuario no encontrado o inactivo",
            headers={"WWW-Authenticate": "Bearer"}
        )

    return AuthenticatedUser(
        id=user.id,
        email=user.email,
        role_id=user.role_id,
        role_name=user.role.name,
        permissions=user.permission_names,
    )


def require_permissions(*required: str):
    """
    Dependency factory for permission-based access control.

    Usage:
        @router.delete("/areas/{area_id}")
        async def delete_area(
            area_id: str,
            user: AuthenticatedUser = Depends(require_permissions("delete_areas"))
        ):
            pass
    """
    async def permission_checker(
        user: AuthenticatedUser = Depends(get_current_user)
    ) -> AuthenticatedUser:
        missing = [name for name in required if name not in user.permissions]
        if missing:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Missing required permissions: {', '.join(missing)}"
            )
        return user

    return permission_checker
