"""
Modelos de estructura organizacional: áreas, cargos y áreas de producción
"""
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship

from gestion.core.database import Base, new_uuid, utcnow


class Area(Base):
    __tablename__ = "areas"

    id = Column(String(36), primary_key=True, default=new_uuid)
    name = Column(String(100), nullable=False, unique=True, index=True)
    description = Column(Text)
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    cargos = relationship("Cargo", back_populates="area")


class Cargo(Base):
    """
    Cargo dentro de un área. El nombre es único por área.
    """
    __tablename__ = "cargos"

    id = Column(String(36), primary_key=True, default=new_uuid)
    name = Column(String(100), nullable=False, index=True)
    description = Column(Text)
    area_id = Column(String(36), ForeignKey("areas.id"), nullable=False, index=True)
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    area = relationship("Area", back_populates="cargos")
    users = relationship("User", back_populates="cargo")


class ProductionArea(Base):
    """
    Áreas de producción del taller (impresión, corte, laminado...).
    Los ítems de OP, OT y OG guardan sus IDs en production_area_ids.
    """
    __tablename__ = "production_areas"

    id = Column(String(36), primary_key=True, default=new_uuid)
    name = Column(String(100), nullable=False, unique=True, index=True)
    description = Column(Text)
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
