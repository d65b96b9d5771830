"""
Permission Service
"""
import logging
from typing import List

from fastapi import HTTPException
from sqlalchemy.orm import Session

from gestion.domain.user import (
    BulkPermissionResult,
    CreatePermissionRequest,
    PermissionResponse,
    UpdatePermissionRequest,
)
from gestion.models import Permission
from gestion.repositories import PermissionRepository

logger = logging.getLogger(__name__)


class PermissionService:

    def __init__(self, db: Session):
        self.db = db
        self.repository = PermissionRepository(db)

    def find_all(self) -> List[Permission]:
        return self.repository.find_all()

    def find_one(self, permission_id: str) -> Permission:
        permission = self.repository.get_by_id(permission_id)
        if not permission:
            raise HTTPException(status_code=404, detail=f"Permission with ID {permission_id} not found")
        return permission

    def create(self, data: CreatePermissionRequest) -> Permission:
        self._ensure_unique_name(data.name)
        permission = self.repository.create(Permission(name=data.name, description=data.description))
        self.db.commit()
        self.db.refresh(permission)
        logger.info(f"Permission created: {permission.name}")
        return permission

    def create_bulk(self, items: List[CreatePermissionRequest]) -> List[BulkPermissionResult]:
        """
        Crea varios permisos; cada uno se reporta por separado y un
        nombre repetido no impide crear los demás.
        """
        results = []
        for data in items:
            try:
                permission = self.create(data)
            except HTTPException as exc:
                results.append(BulkPermissionResult(success=False, name=data.name, error=exc.detail))
                continue
            results.append(BulkPermissionResult(
                success=True,
                name=data.name,
                permission=PermissionResponse.model_validate(permission),
            ))
        return results

    def update(self, permission_id: str, data: UpdatePermissionRequest) -> Permission:
        permission = self.find_one(permission_id)
        values = data.model_dump(exclude_unset=True)
        if values.get("name") and values["name"] != permission.name:
            self._ensure_unique_name(values["name"], exclude_id=permission_id)
        elif "name" in values:
            values.pop("name")

        self.repository.update(permission, values)
        self.db.commit()
        self.db.refresh(permission)
        return permission

    def remove(self, permission_id: str) -> dict:
        permission = self.find_one(permission_id)
        if self.repository.count_roles(permission_id) > 0:
            raise HTTPException(
                status_code=400,
                detail="Cannot delete permission assigned to roles. Remove from roles first."
            )

        self.repository.delete(permission)
        self.db.commit()
        logger.info(f"Permission deleted: {permission.name}")
        return {"message": "Permission deleted successfully"}

    def _ensure_unique_name(self, name: str, exclude_id: str = None) -> None:
        if self.repository.find_by_name(name, exclude_id=exclude_id):
            raise HTTPException(status_code=400, detail=f'Permission "{name}" already exists')
