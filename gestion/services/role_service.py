"""
Role Service
Roles y asignación de permisos a roles.
"""
import logging
from typing import List

from fastapi import HTTPException
from sqlalchemy.orm import Session

from gestion.domain.user import CreateRoleRequest, RoleResponse, UpdateRoleRequest
from gestion.models import Permission, Role
from gestion.repositories import PermissionRepository, RoleRepository, UserRepository

logger = logging.getLogger(__name__)


class RoleService:

    def __init__(self, db: Session):
        self.db = db
        self.repository = RoleRepository(db)
        self.permissions = PermissionRepository(db)
        self.users = UserRepository(db)

    def find_all(self) -> List[RoleResponse]:
        return [self._to_response(role) for role in self.repository.find_all()]

    def get(self, role_id: str) -> Role:
        role = self.repository.get_by_id(role_id)
        if not role:
            raise HTTPException(status_code=404, detail=f"Role with ID {role_id} not found")
        return role

    def find_one(self, role_id: str) -> RoleResponse:
        return self._to_response(self.get(role_id))

    def create(self, data: CreateRoleRequest) -> RoleResponse:
        self._ensure_unique_name(data.name)
        role = Role(name=data.name, description=data.description)
        if data.permission_ids:
            role.permissions = self._resolve_permissions(data.permission_ids)

        self.repository.create(role)
        self.db.commit()
        self.db.refresh(role)
        logger.info(f"Role created: {role.name} with {len(role.permissions)} permission(s)")
        return self._to_response(role)

    def update(self, role_id: str, data: UpdateRoleRequest) -> RoleResponse:
        role = self.get(role_id)
        values = data.model_dump(exclude_unset=True)
        if values.get("name") and values["name"] != role.name:
            self._ensure_unique_name(values["name"], exclude_id=role_id)
        elif "name" in values:
            values.pop("name")

        self.repository.update(role, values)
        self.db.commit()
        self.db.refresh(role)
        return self._to_response(role)

    def remove(self, role_id: str) -> dict:
        role = self.get(role_id)
        if self.users.count_by_role(role_id) > 0:
            raise HTTPException(status_code=400, detail="Cannot delete role with assigned users")

        self.repository.delete(role)
        self.db.commit()
        logger.info(f"Role deleted: {role.name}")
        return {"message": "Role deleted successfully"}

    # ------------------------------------------------------------------
    # Permisos del rol
    # ------------------------------------------------------------------

    def set_permissions(self, role_id: str, permission_ids: List[str]) -> RoleResponse:
        """Reemplaza el conjunto completo de permisos del rol"""
        role = self.get(role_id)
        role.permissions = self._resolve_permissions(permission_ids)
        return self._save_permissions(role)

    def add_permissions(self, role_id: str, permission_ids: List[str]) -> RoleResponse:
        role = self.get(role_id)
        current = {permission.id for permission in role.permissions}
        for permission in self._resolve_permissions(permission_ids):
            if permission.id not in current:
                role.permissions.append(permission)
        return self._save_permissions(role)

    def remove_permissions(self, role_id: str, permission_ids: List[str]) -> RoleResponse:
        role = self.get(role_id)
        removed = set(permission_ids)
        role.permissions = [p for p in role.permissions if p.id not in removed]
        return self._save_permissions(role)

    def _save_permissions(self, role: Role) -> RoleResponse:
        self.db.commit()
        self.db.refresh(role)
        logger.info(f"Role {role.name} now has {len(role.permissions)} permission(s)")
        return self._to_response(role)

    def _resolve_permissions(self, permission_ids: List[str]) -> List[Permission]:
        requested = list(dict.fromkeys(permission_ids))
        permissions = self.permissions.find_by_ids(requested)
        if len(permissions) != len(requested):
            raise HTTPException(status_code=400, detail="One or more permission IDs are invalid")
        return permissions

    def _ensure_unique_name(self, name: str, exclude_id: str = None) -> None:
        if self.repository.find_by_name(name, exclude_id=exclude_id):
            raise HTTPException(status_code=400, detail=f'Role "{name}" already exists')

    def _to_response(self, role: Role) -> RoleResponse:
        response = RoleResponse.model_validate(role)
        response.permissions = sorted(response.permissions, key=lambda p: p.name)
        response.users_count = self.users.count_by_role(role.id)
        return response
