"""
Modelos de usuarios, roles y permisos
"""
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Table, Text
from sqlalchemy.orm import relationship

from gestion.core.database import Base, new_uuid, utcnow


role_permissions = Table(
    "role_permissions",
    Base.metadata,
    Column("role_id", String(36), ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
    Column("permission_id", String(36), ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True),
)


class Permission(Base):
    __tablename__ = "permissions"

    id = Column(String(36), primary_key=True, default=new_uuid)
    name = Column(String(100), nullable=False, unique=True, index=True)
    description = Column(Text)
    created_at = Column(DateTime, default=utcnow)


class Role(Base):
    __tablename__ = "roles"

    id = Column(String(36), primary_key=True, default=new_uuid)
    name = Column(String(50), nullable=False, unique=True, index=True)
    description = Column(Text)
    created_at = Column(DateTime, default=utcnow)

    permissions = relationship("Permission", secondary=role_permissions, lazy="selectin")
    users = relationship("User", back_populates="role")


class User(Base):
    """
    Usuarios del sistema

    El rol "admin" puede aprobar solicitudes de edición, cambio de estado
    y autorización de OG.
    """
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_uuid)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=False)
    first_name = Column(String(100))
    last_name = Column(String(100))
    is_active = Column(Boolean, default=True, nullable=False)

    # Relaciones
    role_id = Column(String(36), ForeignKey("roles.id"), nullable=False, index=True)
    cargo_id = Column(String(36), ForeignKey("cargos.id"), index=True)

    # Refresh token (hash SHA-256)
    refresh_token = Column(String(255))

    # Metadata
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    role = relationship("Role", back_populates="users", lazy="joined")
    cargo = relationship("Cargo", back_populates="users")

    @property
    def is_admin(self) -> bool:
        return self.role is not None and self.role.name == "admin"

    @property
    def permission_names(self) -> list:
        if self.role is None:
            return []
        return sorted(p.name for p in self.role.permissions)
