"""
Production Areas API endpoints
"""
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from gestion.core.auth import AuthenticatedUser, require_permissions
from gestion.core.database import get_db
from gestion.domain.base import MessageResponse
from gestion.domain.organization import (
    CreateProductionAreaRequest,
    ProductionAreaResponse,
    UpdateProductionAreaRequest,
)
from gestion.services.production_area_service import ProductionAreaService


router = APIRouter()


@router.get("", response_model=List[ProductionAreaResponse])
async def get_production_areas(
    include_inactive: bool = Query(False, alias="includeInactive"),
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_production_areas")),
):
    return ProductionAreaService(db).find_all(include_inactive)


@router.get("/{area_id}", response_model=ProductionAreaResponse)
async def get_production_area(
    area_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_production_areas")),
):
    return ProductionAreaService(db).find_one(area_id)


@router.post("", response_model=ProductionAreaResponse, status_code=201)
async def create_production_area(
    data: CreateProductionAreaRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("create_production_areas")),
):
    return ProductionAreaService(db).create(data)


@router.put("/{area_id}", response_model=ProductionAreaResponse)
async def update_production_area(
    area_id: str,
    data: UpdateProductionAreaRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("update_production_areas")),
):
    return ProductionAreaService(db).update(area_id, data)


@router.delete("/{area_id}", response_model=MessageResponse)
async def delete_production_area(
    area_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("delete_production_areas")),
):
    """Borrado lógico"""
    return ProductionAreaService(db).remove(area_id)
