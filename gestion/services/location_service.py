"""
Location Service
Departamentos y ciudades de Colombia (solo lectura).
"""
from typing import List

from fastapi import HTTPException
from sqlalchemy.orm import Session

from gestion.domain.client import DepartmentListItem
from gestion.models import City, Department
from gestion.repositories import LocationRepository


class LocationService:

    def __init__(self, db: Session):
        self.repository = LocationRepository(db)

    def find_departments(self) -> List[DepartmentListItem]:
        items = []
        for department in self.repository.find_departments():
            item = DepartmentListItem.model_validate(department)
            item.cities_count = self.repository.count_cities(department.id)
            items.append(item)
        return items

    def find_department(self, department_id: str) -> Department:
        department = self.repository.get_department(department_id)
        if not department:
            raise HTTPException(
                status_code=404,
                detail=f"Departamento con ID {department_id} no encontrado"
            )
        return department

    def find_cities(self, department_id: str) -> List[City]:
        self.find_department(department_id)
        return self.repository.find_cities(department_id)

    def find_city(self, city_id: str) -> City:
        city = self.repository.get_city(city_id)
        if not city:
            raise HTTPException(status_code=404, detail=f"Ciudad con ID {city_id} no encontrada")
        return city
