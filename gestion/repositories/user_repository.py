"""
User, Role & Permission Repository
"""
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from gestion.models import Cargo, Permission, Role, User, role_permissions
from gestion.repositories.base_repository import BaseRepository


class UserRepository(BaseRepository[User]):

    def __init__(self, db: Session):
        super().__init__(db, User)

    def find_all(self) -> List[User]:
        return self.db.query(User).order_by(User.created_at.desc()).all()

    def find_by_email(self, email: str, exclude_id: Optional[str] = None) -> Optional[User]:
        query = self.db.query(User).filter(func.lower(User.email) == email.lower())
        if exclude_id:
            query = query.filter(User.id != exclude_id)
        return query.first()

    def find_active_admins(self) -> List[User]:
        return (
            self.db.query(User)
            .join(Role, User.role_id == Role.id)
            .filter(Role.name == "admin", User.is_active.is_(True))
            .all()
        )

    def count_by_role(self, role_id: str) -> int:
        return self.db.query(User).filter(User.role_id == role_id).count()

    def count_by_cargo(self, cargo_id: str) -> int:
        return self.db.query(User).filter(User.cargo_id == cargo_id).count()

    def count_by_area(self, area_id: str) -> int:
        return (
            self.db.query(User)
            .join(Cargo, User.cargo_id == Cargo.id)
            .filter(Cargo.area_id == area_id)
            .count()
        )


class RoleRepository(BaseRepository[Role]):

    def __init__(self, db: Session):
        super().__init__(db, Role)

    def find_all(self) -> List[Role]:
        return self.db.query(Role).order_by(Role.name.asc()).all()

    def find_by_name(self, name: str, exclude_id: Optional[str] = None) -> Optional[Role]:
        query = self.db.query(Role).filter(Role.name == name)
        if exclude_id:
            query = query.filter(Role.id != exclude_id)
        return query.first()


class PermissionRepository(BaseRepository[Permission]):

    def __init__(self, db: Session):
        super().__init__(db, Permission)

    def find_all(self) -> List[Permission]:
        return self.db.query(Permission).order_by(Permission.name.asc()).all()

    def find_by_name(self, name: str, exclude_id: Optional[str] = None) -> Optional[Permission]:
        query = self.db.query(Permission).filter(Permission.name == name)
        if exclude_id:
            query = query.filter(Permission.id != exclude_id)
        return query.first()

    def find_by_ids(self, ids: List[str]) -> List[Permission]:
        if not ids:
            return []
        return self.db.query(Permission).filter(Permission.id.in_(ids)).all()

    def count_roles(self, permission_id: str) -> int:
        return (
            self.db.query(role_permissions)
            .filter(role_permissions.c.permission_id == permission_id)
            .count()
        )
