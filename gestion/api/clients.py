"""
Clients API endpoints
- CRUD de clientes (borrado lógico)
- Condición especial
- Carga masiva desde CSV

Author: TM3
Date: 2026-01-12
"""
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session

from gestion.core.auth import AuthenticatedUser, require_permissions
from gestion.core.database import get_db
from gestion.domain.base import MessageResponse
from gestion.domain.client import (
    ClientResponse,
    CreateClientRequest,
    UpdateClientRequest,
    UpdateSpecialConditionRequest,
    UploadClientsResult,
)
from gestion.services.client_service import ClientService


router = APIRouter()

MAX_CSV_SIZE = 1024 * 1024  # 1 MB


@router.get("", response_model=List[ClientResponse])
async def get_clients(
    include_inactive: bool = Query(False, alias="includeInactive"),
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_clients")),
):
    return ClientService(db).find_all(include_inactive)


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_clients")),
):
    return ClientService(db).find_one(client_id)


@router.post("/upload", response_model=UploadClientsResult)
async def upload_clients(
    file: UploadFile = File(..., description="CSV con clientes"),
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("create_clients")),
):
    """
    Carga masiva de clientes desde un archivo CSV

    Cabeceras requeridas: name, email, phone, personType, department, city
    Opcionales: manager, encargado, landlinePhone, address, nit, cedula

    Returns:
        {
            "total": 10,
            "successful": 8,
            "failed": 2,
            "errors": [{"row": 3, "error": "..."}]
        }
    """
    if not (file.filename or "").lower().endswith(".csv"):
        raise HTTPException(status_code=400, detail="El archivo debe ser un CSV")

    contents = await file.read()
    if len(contents) > MAX_CSV_SIZE:
        raise HTTPException(status_code=400, detail="El archivo no puede superar 1 MB")

    return ClientService(db).upload_clients(contents)


@router.post("", response_model=ClientResponse, status_code=201)
async def create_client(
    data: CreateClientRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("create_clients")),
):
    return ClientService(db).create(data)


@router.put("/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: str,
    data: UpdateClientRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("update_clients")),
):
    return ClientService(db).update(client_id, data)


@router.patch("/{client_id}/special-condition", response_model=ClientResponse)
async def update_special_condition(
    client_id: str,
    data: UpdateSpecialConditionRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("update_clients")),
):
    """Asigna o limpia (null) la condición especial del cliente"""
    return ClientService(db).update_special_condition(client_id, data.special_condition)


@router.delete("/{client_id}", response_model=MessageResponse)
async def delete_client(
    client_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("delete_clients")),
):
    return ClientService(db).remove(client_id)
