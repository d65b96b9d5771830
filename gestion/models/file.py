"""
Metadatos de archivos almacenados en S3
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey

from gestion.core.database import Base, new_uuid, utcnow


class File(Base):
    __tablename__ = "files"

    id = Column(String(36), primary_key=True, default=new_uuid)
    original_name = Column(String(255), nullable=False)
    file_name = Column(String(400), nullable=False)
    mime_type = Column(String(100), nullable=False)
    size = Column(Integer, nullable=False)

    # Ubicación en S3
    s3_key = Column(String(600), nullable=False, unique=True)
    s3_bucket = Column(String(100), nullable=False)

    # Entidad asociada (order, payment, expense-order, ...)
    entity_type = Column(String(50), index=True)
    entity_id = Column(String(36), index=True)
    uploaded_by = Column(String(36), ForeignKey("users.id"), index=True)

    # Soft delete
    is_deleted = Column(Boolean, default=False, nullable=False, index=True)
    deleted_at = Column(DateTime)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
