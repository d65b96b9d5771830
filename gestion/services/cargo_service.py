"""
Cargo Service
Un cargo pertenece a un área activa y su nombre es único dentro del área.
"""
import logging
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from gestion.domain.organization import CargoResponse, CreateCargoRequest, UpdateCargoRequest
from gestion.models import Area, Cargo
from gestion.repositories import AreaRepository, CargoRepository, UserRepository

logger = logging.getLogger(__name__)


class CargoService:

    def __init__(self, db: Session):
        self.db = db
        self.repository = CargoRepository(db)
        self.areas = AreaRepository(db)
        self.users = UserRepository(db)

    def _to_response(self, cargo: Cargo) -> CargoResponse:
        response = CargoResponse.model_validate(cargo)
        response.users_count = self.users.count_by_cargo(cargo.id)
        return response

    def find_all(self, include_inactive: bool = False) -> List[CargoResponse]:
        return [self._to_response(c) for c in self.repository.find_all(include_inactive)]

    def find_by_area(self, area_id: str) -> List[CargoResponse]:
        if not self.areas.get_by_id(area_id):
            raise HTTPException(status_code=404, detail=f"Área con ID {area_id} no encontrada")
        return [self._to_response(c) for c in self.repository.find_all(area_id=area_id)]

    def get(self, cargo_id: str) -> Cargo:
        cargo = self.repository.get_by_id(cargo_id)
        if not cargo:
            raise HTTPException(status_code=404, detail=f"Cargo con ID {cargo_id} no encontrado")
        return cargo

    def find_one(self, cargo_id: str) -> CargoResponse:
        return self._to_response(self.get(cargo_id))

    def create(self, data: CreateCargoRequest) -> CargoResponse:
        area = self._active_area(data.area_id, "No se puede crear un cargo en un área inactiva")
        self._ensure_unique_name(data.name, area.id)

        cargo = self.repository.create(
            Cargo(name=data.name, description=data.description, area_id=area.id)
        )
        self.db.commit()
        self.db.refresh(cargo)
        logger.info(f"Cargo created: {cargo.name} in area {area.name}")
        return self._to_response(cargo)

    def update(self, cargo_id: str, data: UpdateCargoRequest) -> CargoResponse:
        cargo = self.get(cargo_id)
        values = data.model_dump(exclude_unset=True)

        target_area_id = values.get("area_id") or cargo.area_id
        if target_area_id != cargo.area_id:
            self._active_area(target_area_id, "No se puede mover el cargo a un área inactiva")

        target_name = values.get("name") or cargo.name
        if target_name != cargo.name or target_area_id != cargo.area_id:
            self._ensure_unique_name(target_name, target_area_id, exclude_id=cargo_id)

        self.repository.update(cargo, values)
        self.db.commit()
        self.db.refresh(cargo)
        return self._to_response(cargo)

    def remove(self, cargo_id: str) -> dict:
        cargo = self.get(cargo_id)
        assigned = self.users.count_by_cargo(cargo_id)
        if assigned > 0:
            raise HTTPException(
                status_code=400,
                detail=f"No se puede eliminar el cargo porque tiene {assigned} usuario(s) asignado(s)"
            )

        cargo.is_active = False
        self.db.commit()
        logger.info(f"Cargo deactivated: {cargo.name} ({cargo.id})")
        return {"message": f"Cargo con ID {cargo_id} eliminado correctamente"}

    def _active_area(self, area_id: str, inactive_message: str) -> Area:
        area = self.areas.get_by_id(area_id)
        if not area:
            raise HTTPException(status_code=400, detail=f"Área con ID {area_id} no encontrada")
        if not area.is_active:
            raise HTTPException(status_code=400, detail=inactive_message)
        return area

    def _ensure_unique_name(self, name: str, area_id: str, exclude_id: Optional[str] = None) -> None:
        if self.repository.find_by_name_in_area(name, area_id, exclude_id=exclude_id):
            raise HTTPException(
                status_code=400,
                detail=f'Ya existe un cargo con el nombre "{name}" en esta área'
            )
