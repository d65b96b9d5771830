"""
User Service
Administración de usuarios: alta con rol y cargo, edición, desactivación
y borrado.
"""
import logging
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gestion.core.auth import hash_password
from gestion.domain.user import CreateUserRequest, UpdateUserRequest, UserDetail
from gestion.models import User
from gestion.repositories import CargoRepository, RoleRepository, UserRepository

logger = logging.getLogger(__name__)


class UserService:

    def __init__(self, db: Session):
        self.db = db
        self.repository = UserRepository(db)
        self.roles = RoleRepository(db)
        self.cargos = CargoRepository(db)

    def find_all(self) -> List[User]:
        return self.repository.find_all()

    def get(self, user_id: str) -> User:
        user = self.repository.get_by_id(user_id)
        if not user:
            raise HTTPException(status_code=404, detail=f"User with ID {user_id} not found")
        return user

    def find_one(self, user_id: str) -> UserDetail:
        user = self.get(user_id)
        detail = UserDetail.model_validate(user)
        detail.permissions = user.permission_names
        return detail

    def create(self, data: CreateUserRequest) -> User:
        if self.repository.find_by_email(data.email):
            raise HTTPException(status_code=400, detail="Email already registered")
        self._check_role(data.role_id)
        self._check_cargo(data.cargo_id)

        user = self.repository.create(User(
            email=data.email.lower(),
            password=hash_password(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
            role_id=data.role_id,
            cargo_id=data.cargo_id,
        ))
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"User created: {user.email} ({user.id})")
        return user

    def update(self, user_id: str, data: UpdateUserRequest) -> User:
        user = self.get(user_id)
        values = data.model_dump(exclude_unset=True)

        if values.get("email"):
            values["email"] = values["email"].lower()
            if self.repository.find_by_email(values["email"], exclude_id=user_id):
                raise HTTPException(status_code=400, detail="Email already in use")
        elif "email" in values:
            values.pop("email")

        if values.get("role_id"):
            self._check_role(values["role_id"])
        elif "role_id" in values:
            values.pop("role_id")

        if "cargo_id" in values:
            self._check_cargo(values["cargo_id"])

        if values.get("password"):
            values["password"] = hash_password(values["password"])
            # Obliga a iniciar sesión de nuevo
            values["refresh_token"] = None
        elif "password" in values:
            values.pop("password")

        if values.get("is_active") is False:
            values["refresh_token"] = None

        self.repository.update(user, values)
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"User updated: {user.email} ({sorted(values)})")
        return user

    def remove(self, user_id: str, current_user_id: str) -> dict:
        user = self.get(user_id)
        if user.id == current_user_id:
            raise HTTPException(status_code=400, detail="You cannot delete your own user")

        try:
            self.repository.delete(user)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=400,
                detail="Cannot delete user with related records. Deactivate it instead."
            )
        logger.info(f"User deleted: {user_id}")
        return {"message": "User deleted successfully"}

    def _check_role(self, role_id: str) -> None:
        if not self.roles.get_by_id(role_id):
            raise HTTPException(status_code=400, detail="Invalid role ID")

    def _check_cargo(self, cargo_id: Optional[str]) -> None:
        if cargo_id is None:
            return
        cargo = self.cargos.get_by_id(cargo_id)
        if not cargo:
            raise HTTPException(status_code=400, detail="Invalid cargo ID")
        if not cargo.is_active:
            raise HTTPException(status_code=400, detail="Cannot assign an inactive cargo")
