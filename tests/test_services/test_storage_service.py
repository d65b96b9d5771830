"""
Unit tests for StorageService

Validación de archivos, rollback en S3 cuando falla la base de datos
y borrado definitivo.
"""
from unittest.mock import patch

import pytest
from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError

from gestion.connectors.s3_connector import StorageError
from gestion.models import File
from gestion.repositories import FileRepository
from gestion.services.storage_service import MAX_FILE_SIZE, StorageService


@pytest.fixture
def storage(db, mock_s3):
    return StorageService(db, s3=mock_s3)


@pytest.fixture
def stored_file(storage):
    response = storage.upload_file(b"contenido", "factura.pdf", "application/pdf", entity_type="order")
    return response.id


class TestUploadFile:

    def test_rejects_files_over_10mb(self, storage, mock_s3):
        content = b"0" * (MAX_FILE_SIZE + 1)

        with pytest.raises(HTTPException) as exc:
            storage.upload_file(content, "grande.pdf", "application/pdf")

        assert exc.value.status_code == 400
        mock_s3.upload_file.assert_not_called()

    def test_accepts_file_at_limit(self, storage, mock_s3):
        response = storage.upload_file(b"0" * MAX_FILE_SIZE, "limite.pdf", "application/pdf")

        assert response.size == MAX_FILE_SIZE
        mock_s3.upload_file.assert_called_once()

    def test_database_failure_removes_s3_object(self, db, storage, mock_s3):
        # Arrange
        with patch.object(FileRepository, "create", side_effect=SQLAlchemyError("conexión perdida")):
            # Act
            with pytest.raises(HTTPException) as exc:
                storage.upload_file(b"contenido", "factura.pdf", "application/pdf")

        # Assert
        assert exc.value.status_code == 500
        assert exc.value.detail.startswith("Error al subir el archivo: ")
        uploaded_key = mock_s3.upload_file.call_args[0][0]
        mock_s3.delete_file.assert_called_once_with(uploaded_key)
        assert db.query(File).count() == 0

    def test_failed_s3_rollback_still_returns_500(self, storage, mock_s3):
        mock_s3.delete_file.side_effect = StorageError("bucket no disponible")

        with patch.object(FileRepository, "create", side_effect=SQLAlchemyError("conexión perdida")):
            with pytest.raises(HTTPException) as exc:
                storage.upload_file(b"contenido", "factura.pdf", "application/pdf")

        assert exc.value.status_code == 500
        mock_s3.delete_file.assert_called_once()


class TestHardDeleteFile:

    def test_removes_object_and_row(self, db, storage, mock_s3, stored_file):
        s3_key = db.get(File, stored_file).s3_key

        storage.hard_delete_file(stored_file)

        mock_s3.delete_file.assert_called_once_with(s3_key)
        assert db.get(File, stored_file) is None

    def test_s3_failure_keeps_row(self, db, storage, mock_s3, stored_file):
        mock_s3.delete_file.side_effect = StorageError("acceso denegado")

        with pytest.raises(HTTPException) as exc:
            storage.hard_delete_file(stored_file)

        assert exc.value.status_code == 500
        assert db.get(File, stored_file) is not None

    def test_unknown_file(self, storage):
        with pytest.raises(HTTPException) as exc:
            storage.hard_delete_file("00000000-0000-0000-0000-000000000000")

        assert exc.value.status_code == 404
