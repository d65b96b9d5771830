"""
Locations API endpoints (departamentos y ciudades, solo lectura)
"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gestion.core.auth import AuthenticatedUser, get_current_user
from gestion.core.database import get_db
from gestion.domain.client import CityDetail, CityResponse, DepartmentDetail, DepartmentListItem
from gestion.services.location_service import LocationService


router = APIRouter()


@router.get("/departments", response_model=List[DepartmentListItem])
async def get_departments(
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(get_current_user),
):
    return LocationService(db).find_departments()


@router.get("/departments/{department_id}", response_model=DepartmentDetail)
async def get_department(
    department_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(get_current_user),
):
    return LocationService(db).find_department(department_id)


@router.get("/departments/{department_id}/cities", response_model=List[CityResponse])
async def get_department_cities(
    department_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(get_current_user),
):
    return LocationService(db).find_cities(department_id)


@router.get("/cities/{city_id}", response_model=CityDetail)
async def get_city(
    city_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(get_current_user),
):
    return LocationService(db).find_city(city_id)
