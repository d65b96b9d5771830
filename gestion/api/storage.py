"""
Storage API endpoints (archivos en S3)

- POST /upload            Subir archivo (multipart: file, entityType?, entityId?)
- GET  /{id}              Metadatos + URL firmada
- GET  /{id}/url          Solo la URL firmada
- GET  /{id}/download     Descarga directa (attachment)
- DELETE /{id}            Borrado lógico
- GET  /entity/{type}/{id}, /user/{user_id}

Author: TM3
Date: 2026-01-17
"""
from typing import List, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile
from sqlalchemy.orm import Session

from gestion.core.auth import AuthenticatedUser, require_permissions
from gestion.core.config import settings
from gestion.core.database import get_db
from gestion.domain.base import MessageResponse
from gestion.domain.storage import FileResponse, SignedUrlResponse
from gestion.services.storage_service import StorageService


router = APIRouter()


@router.post("/upload", response_model=FileResponse, status_code=201)
async def upload_file(
    file: UploadFile = File(..., description="Archivo a subir (máx. 10 MB)"),
    entity_type: Optional[str] = Form(None, alias="entityType"),
    entity_id: Optional[str] = Form(None, alias="entityId"),
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("upload_files")),
):
    contents = await file.read()
    return StorageService(db).upload_file(
        contents,
        file.filename or "archivo",
        file.content_type or "application/octet-stream",
        entity_type=entity_type,
        entity_id=entity_id,
        user_id=user.id,
    )


@router.get("/entity/{entity_type}/{entity_id}", response_model=List[FileResponse])
async def get_files_by_entity(
    entity_type: str,
    entity_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_files")),
):
    service = StorageService(db)
    return [service.to_response(stored) for stored in service.find_by_entity(entity_type, entity_id)]


@router.get("/user/{user_id}", response_model=List[FileResponse])
async def get_files_by_user(
    user_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_files")),
):
    service = StorageService(db)
    return [service.to_response(stored) for stored in service.find_by_user(user_id)]


@router.get("/{file_id}", response_model=FileResponse)
async def get_file(
    file_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_files")),
):
    service = StorageService(db)
    return service.to_response(service.get_file(file_id))


@router.get("/{file_id}/url", response_model=SignedUrlResponse)
async def get_file_url(
    file_id: str,
    expires_in: Optional[int] = Query(None, alias="expiresIn", ge=1, description="Segundos"),
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_files")),
):
    url = StorageService(db).get_file_url(file_id, expires_in)
    return {"url": url, "expires_in": expires_in or settings.AWS_S3_SIGNED_URL_EXPIRATION}


@router.get("/{file_id}/download")
async def download_file(
    file_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_files")),
):
    stored, content = StorageService(db).download_file(file_id)
    return Response(
        content=content,
        media_type=stored.mime_type,
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(stored.original_name)}",
            "Content-Length": str(len(content)),
        },
    )


@router.delete("/{file_id}", response_model=MessageResponse)
async def delete_file(
    file_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("delete_files")),
):
    StorageService(db).delete_file(file_id, user.id)
    return {"message": "Archivo eliminado correctamente"}
