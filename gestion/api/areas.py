"""
Areas API endpoints
"""
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from gestion.core.auth import AuthenticatedUser, require_permissions
from gestion.core.database import get_db
from gestion.domain.base import MessageResponse
from gestion.domain.organization import (
    AreaDetail,
    AreaListItem,
    AreaResponse,
    CreateAreaRequest,
    UpdateAreaRequest,
)
from gestion.services.area_service import AreaService


router = APIRouter()


@router.get("", response_model=List[AreaListItem])
async def get_areas(
    include_inactive: bool = Query(False, alias="includeInactive"),
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_areas")),
):
    """Listar áreas ordenadas por nombre con el conteo de cargos activos"""
    return AreaService(db).find_all(include_inactive)


@router.get("/{area_id}", response_model=AreaDetail)
async def get_area(
    area_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_areas")),
):
    return AreaService(db).find_one(area_id)


@router.post("", response_model=AreaResponse, status_code=201)
async def create_area(
    data: CreateAreaRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("create_areas")),
):
    return AreaService(db).create(data)


@router.put("/{area_id}", response_model=AreaResponse)
async def update_area(
    area_id: str,
    data: UpdateAreaRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("update_areas")),
):
    return AreaService(db).update(area_id, data)


@router.delete("/{area_id}", response_model=MessageResponse)
async def delete_area(
    area_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("delete_areas")),
):
    """Borrado lógico; falla si el área tiene cargos activos"""
    return AreaService(db).remove(area_id)
