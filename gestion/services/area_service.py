"""
Area Service
"""
import logging
from typing import List

from fastapi import HTTPException
from sqlalchemy.orm import Session

from gestion.domain.organization import (
    AreaDetail,
    AreaListItem,
    CargoInArea,
    CreateAreaRequest,
    UpdateAreaRequest,
)
from gestion.models import Area
from gestion.repositories import AreaRepository, UserRepository

logger = logging.getLogger(__name__)


class AreaService:

    def __init__(self, db: Session):
        self.db = db
        self.repository = AreaRepository(db)
        self.users = UserRepository(db)

    def find_all(self, include_inactive: bool = False) -> List[AreaListItem]:
        items = []
        for area in self.repository.find_all(include_inactive):
            item = AreaListItem.model_validate(area)
            item.cargos_count = self.repository.count_active_cargos(area.id)
            items.append(item)
        return items

    def get(self, area_id: str) -> Area:
        area = self.repository.get_by_id(area_id)
        if not area:
            raise HTTPException(status_code=404, detail=f"Área con ID {area_id} no encontrada")
        return area

    def find_one(self, area_id: str) -> AreaDetail:
        area = self.get(area_id)
        detail = AreaDetail.model_validate(area)
        detail.cargos = [
            CargoInArea.model_validate(cargo)
            for cargo in sorted(area.cargos, key=lambda c: c.name)
            if cargo.is_active
        ]
        detail.users_count = self.users.count_by_area(area.id)
        return detail

    def create(self, data: CreateAreaRequest) -> Area:
        self._ensure_unique_name(data.name)
        area = self.repository.create(Area(name=data.name, description=data.description))
        self.db.commit()
        self.db.refresh(area)
        logger.info(f"Area created: {area.name} ({area.id})")
        return area

    def update(self, area_id: str, data: UpdateAreaRequest) -> Area:
        area = self.get(area_id)
        values = data.model_dump(exclude_unset=True)
        if values.get("name") and values["name"] != area.name:
            self._ensure_unique_name(values["name"], exclude_id=area_id)

        self.repository.update(area, values)
        self.db.commit()
        self.db.refresh(area)
        return area

    def remove(self, area_id: str) -> dict:
        area = self.get(area_id)
        active_cargos = self.repository.count_active_cargos(area_id)
        if active_cargos > 0:
            raise HTTPException(
                status_code=400,
                detail=f"No se puede eliminar el área porque tiene {active_cargos} cargo(s) activo(s)"
            )

        area.is_active = False
        self.db.commit()
        logger.info(f"Area deactivated: {area.name} ({area.id})")
        return {"message": f"Área con ID {area_id} eliminada correctamente"}

    def _ensure_unique_name(self, name: str, exclude_id: str = None) -> None:
        if self.repository.find_by_name(name, exclude_id=exclude_id):
            raise HTTPException(status_code=400, detail=f'Ya existe un área con el nombre "{name}"')
