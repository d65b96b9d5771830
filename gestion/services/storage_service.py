"""
Storage Service
Sube archivos a S3 y guarda sus metadatos en la tabla files.

Formato de llaves:
    {environment}/{entityType|general}/{uuid}/{timestampMs}-{uuid}-{nombre_sanitizado}

Author: TM3
Date: 2026-01-20
"""
import logging
import re
import time
import uuid
from typing import List, Optional, Tuple

from fastapi import HTTPException
from sqlalchemy.orm import Session

from gestion.connectors.s3_connector import S3Connector, StorageError, get_s3_connector
from gestion.core.config import settings
from gestion.core.database import utcnow
from gestion.domain.storage import FileResponse
from gestion.models import File
from gestion.repositories import FileRepository

logger = logging.getLogger(__name__)


ALLOWED_MIME_TYPES = (
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "text/csv",
    "text/plain",
)

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB


def sanitize_file_name(file_name: str) -> str:
    sanitized = re.sub(r"[^a-zA-Z0-9.-]", "_", file_name)
    sanitized = re.sub(r"_{2,}", "_", sanitized)
    return sanitized.lower()


def generate_file_name(original_name: str) -> str:
    timestamp = int(time.time() * 1000)
    return f"{timestamp}-{uuid.uuid4()}-{sanitize_file_name(original_name)}"


def generate_s3_key(file_name: str, entity_type: Optional[str] = None) -> str:
    return "/".join([
        settings.get_environment().value,
        entity_type or "general",
        str(uuid.uuid4()),
        file_name,
    ])


class StorageService:

    def __init__(self, db: Session, s3: S3Connector = None):
        self.db = db
        self.repository = FileRepository(db)
        self._s3 = s3

    @property
    def s3(self) -> S3Connector:
        if self._s3 is None:
            self._s3 = get_s3_connector()
        return self._s3

    def upload_file(
        self,
        content: bytes,
        original_name: str,
        mime_type: str,
        entity_type: Optional[str] = None,
        entity_id: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> FileResponse:
        """
        Valida, sube a S3 y registra el archivo.

        Si el registro en base de datos falla se intenta borrar el objeto
        ya subido a S3 y se responde 500.
        """
        self._validate_file(mime_type, len(content))

        file_name = generate_file_name(original_name)
        s3_key = generate_s3_key(file_name, entity_type)

        try:
            self.s3.upload_file(s3_key, content, mime_type)
            stored = self.repository.create(File(
                original_name=original_name,
                file_name=file_name,
                mime_type=mime_type,
                size=len(content),
                s3_key=s3_key,
                s3_bucket=self.s3.bucket_name,
                entity_type=entity_type,
                entity_id=entity_id,
                uploaded_by=user_id,
            ))
            self.db.commit()
            self.db.refresh(stored)
        except Exception as e:
            self.db.rollback()
            try:
                self.s3.delete_file(s3_key)
            except StorageError as rollback_error:
                logger.error(f"Failed to rollback S3 upload for: {s3_key} - {rollback_error}")
            logger.error(f"File upload failed: {file_name} - {e}")
            raise HTTPException(status_code=500, detail=f"Error al subir el archivo: {e}")

        logger.info(f"File uploaded successfully: {file_name}")
        return self.to_response(stored)

    def to_response(self, stored: File) -> FileResponse:
        response = FileResponse.model_validate(stored)
        response.url = self.s3.get_signed_url(stored.s3_key)
        return response

    def get_file(self, file_id: str) -> File:
        stored = self.repository.get_active(file_id)
        if not stored:
            raise HTTPException(status_code=404, detail=f"Archivo con ID {file_id} no encontrado")
        return stored

    def get_file_url(self, file_id: str, expires_in: Optional[int] = None) -> str:
        stored = self.get_file(file_id)
        try:
            return self.s3.get_signed_url(stored.s3_key, expires_in)
        except StorageError as e:
            raise HTTPException(status_code=500, detail=str(e))

    def download_file(self, file_id: str) -> Tuple[File, bytes]:
        stored = self.get_file(file_id)
        try:
            return stored, self.s3.get_file(stored.s3_key)
        except StorageError as e:
            raise HTTPException(status_code=500, detail=str(e))

    def find_by_entity(self, entity_type: str, entity_id: str) -> List[File]:
        return self.repository.find_by_entity(entity_type, entity_id)

    def find_by_user(self, user_id: str) -> List[File]:
        return self.repository.find_by_uploader(user_id)

    def delete_file(self, file_id: str, user_id: Optional[str] = None) -> None:
        """Borrado lógico; el objeto en S3 se conserva"""
        stored = self.get_file(file_id)
        if user_id and stored.uploaded_by and stored.uploaded_by != user_id:
            logger.warning(
                f"User {user_id} deleting file {file_id} uploaded by {stored.uploaded_by}"
            )

        stored.is_deleted = True
        stored.deleted_at = utcnow()
        self.db.commit()
        logger.info(f"File soft-deleted: {file_id}")

    def hard_delete_file(self, file_id: str) -> None:
        """Elimina el objeto de S3 y la fila"""
        stored = self.repository.get_by_id(file_id)
        if not stored:
            raise HTTPException(status_code=404, detail=f"Archivo con ID {file_id} no encontrado")

        try:
            self.s3.delete_file(stored.s3_key)
        except StorageError as e:
            logger.error(f"Hard delete failed for: {file_id} - {e}")
            raise HTTPException(status_code=500, detail=f"Failed to hard delete file: {e}")

        self.repository.delete(stored)
        self.db.commit()
        logger.info(f"File hard-deleted: {file_id}")

    @staticmethod
    def _validate_file(mime_type: str, size: int) -> None:
        if mime_type not in ALLOWED_MIME_TYPES:
            raise HTTPException(
                status_code=400,
                detail=f"Tipo de archivo no permitido: {mime_type}"
            )
        if size > MAX_FILE_SIZE:
            raise HTTPException(
                status_code=400,
                detail=f"El archivo excede el tamaño máximo permitido ({size} > {MAX_FILE_SIZE} bytes)"
            )
