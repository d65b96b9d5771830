"""
Areas, Cargos & Production Areas Domain Models

Author: TM3
Date: 2026-01-12
"""
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from gestion.domain.base import CamelModel, UUIDStr


# =============================================================================
# Areas
# =============================================================================

class CreateAreaRequest(CamelModel):
    name: str = Field(..., min_length=2, max_length=100, description="Nombre del área")
    description: Optional[str] = Field(None, description="Descripción del área")


class UpdateAreaRequest(CamelModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = None
    is_active: Optional[bool] = None


class AreaResponse(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AreaListItem(AreaResponse):
    cargos_count: int = 0


class CargoInArea(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    is_active: bool


class AreaDetail(AreaResponse):
    cargos: List[CargoInArea] = Field(default_factory=list)
    users_count: int = 0


# =============================================================================
# Cargos
# =============================================================================

class CreateCargoRequest(CamelModel):
    name: str = Field(..., min_length=2, max_length=100, description="Nombre del cargo")
    description: Optional[str] = None
    area_id: UUIDStr = Field(..., description="ID del área a la que pertenece")


class UpdateCargoRequest(CamelModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = None
    area_id: Optional[UUIDStr] = None
    is_active: Optional[bool] = None


class AreaSummary(CamelModel):
    id: str
    name: str
    is_active: bool


class CargoResponse(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    area_id: str
    is_active: bool
    area: Optional[AreaSummary] = None
    users_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# =============================================================================
# Production areas
# =============================================================================

class CreateProductionAreaRequest(CamelModel):
    name: str = Field(..., min_length=2, max_length=100, description="Nombre del área de producción")
    description: Optional[str] = None


class UpdateProductionAreaRequest(CamelModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = None
    is_active: Optional[bool] = None


class ProductionAreaResponse(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
