"""
Cargos API endpoints
"""
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from gestion.core.auth import AuthenticatedUser, require_permissions
from gestion.core.database import get_db
from gestion.domain.base import MessageResponse
from gestion.domain.organization import CargoResponse, CreateCargoRequest, UpdateCargoRequest
from gestion.services.cargo_service import CargoService


router = APIRouter()


@router.get("", response_model=List[CargoResponse])
async def get_cargos(
    include_inactive: bool = Query(False, alias="includeInactive"),
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_cargos")),
):
    return CargoService(db).find_all(include_inactive)


@router.get("/area/{area_id}", response_model=List[CargoResponse])
async def get_cargos_by_area(
    area_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_cargos")),
):
    return CargoService(db).find_by_area(area_id)


@router.get("/{cargo_id}", response_model=CargoResponse)
async def get_cargo(
    cargo_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_cargos")),
):
    return CargoService(db).find_one(cargo_id)


@router.post("", response_model=CargoResponse, status_code=201)
async def create_cargo(
    data: CreateCargoRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("create_cargos")),
):
    return CargoService(db).create(data)


@router.put("/{cargo_id}", response_model=CargoResponse)
async def update_cargo(
    cargo_id: str,
    data: UpdateCargoRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("update_cargos")),
):
    return CargoService(db).update(cargo_id, data)


@router.delete("/{cargo_id}", response_model=MessageResponse)
async def delete_cargo(
    cargo_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("delete_cargos")),
):
    return CargoService(db).remove(cargo_id)
