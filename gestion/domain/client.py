"""
Client, Location & Commercial Channel Domain Models

Author: TM3
Date: 2026-01-12
"""
from datetime import datetime
from typing import Annotated, List, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, Field

from gestion.domain.base import CamelModel, UUIDStr
from gestion.domain.enums import PersonType


def _check_email(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        raise ValueError("El email debe tener un formato válido")
    return value


def _check_special_condition(value: Optional[str]) -> Optional[str]:
    if value is not None and len(value) > 500:
        raise ValueError("La condición especial no puede exceder 500 caracteres")
    return value


ClientEmail = Annotated[str, AfterValidator(_check_email)]
SpecialCondition = Annotated[Optional[str], AfterValidator(_check_special_condition)]


# =============================================================================
# Locations
# =============================================================================

class CityResponse(CamelModel):
    id: str
    name: str
    code: Optional[str] = None
    department_id: str


class DepartmentResponse(CamelModel):
    id: str
    name: str
    code: Optional[str] = None


class DepartmentListItem(DepartmentResponse):
    cities_count: int = 0


class DepartmentDetail(DepartmentResponse):
    cities: List[CityResponse] = Field(default_factory=list)


class CityDetail(CityResponse):
    department: DepartmentResponse


# =============================================================================
# Clients
# =============================================================================

class CreateClientRequest(CamelModel):
    name: str = Field(..., min_length=2, max_length=200, description="Nombre o razón social")
    manager: Optional[str] = Field(None, max_length=200, description="Gerente")
    encargado: Optional[str] = Field(None, max_length=200, description="Persona encargada")
    phone: Optional[str] = Field(None, max_length=20)
    landline_phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = Field(None, max_length=300)
    email: ClientEmail
    department_id: UUIDStr
    city_id: UUIDStr
    person_type: PersonType
    nit: Optional[str] = Field(None, min_length=5, max_length=20)
    cedula: Optional[str] = Field(None, min_length=6, max_length=15)
    special_condition: SpecialCondition = None


class UpdateClientRequest(CamelModel):
    name: Optional[str] = Field(None, min_length=2, max_length=200)
    manager: Optional[str] = Field(None, max_length=200)
    encargado: Optional[str] = Field(None, max_length=200)
    phone: Optional[str] = Field(None, max_length=20)
    landline_phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = Field(None, max_length=300)
    email: Optional[ClientEmail] = None
    department_id: Optional[UUIDStr] = None
    city_id: Optional[UUIDStr] = None
    person_type: Optional[PersonType] = None
    nit: Optional[str] = Field(None, min_length=5, max_length=20)
    cedula: Optional[str] = Field(None, min_length=6, max_length=15)
    special_condition: SpecialCondition = None
    is_active: Optional[bool] = None


class UpdateSpecialConditionRequest(CamelModel):
    special_condition: SpecialCondition = None


class ClientResponse(CamelModel):
    id: str
    name: str
    manager: Optional[str] = None
    encargado: Optional[str] = None
    phone: Optional[str] = None
    landline_phone: Optional[str] = None
    address: Optional[str] = None
    email: str
    person_type: PersonType
    nit: Optional[str] = None
    cedula: Optional[str] = None
    special_condition: Optional[str] = None
    is_active: bool
    department_id: str
    city_id: str
    department: Optional[DepartmentResponse] = None
    city: Optional[CityResponse] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UploadRowError(CamelModel):
    row: int
    error: str


class UploadClientsResult(CamelModel):
    total: int
    successful: int
    failed: int
    errors: List[UploadRowError] = Field(default_factory=list)


# =============================================================================
# Commercial Channels
# =============================================================================

class CreateCommercialChannelRequest(CamelModel):
    name: str = Field(..., min_length=2, max_length=100, description="Nombre del canal comercial")
    description: Optional[str] = None


class UpdateCommercialChannelRequest(CamelModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = None
    is_active: Optional[bool] = None


class CommercialChannelResponse(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
