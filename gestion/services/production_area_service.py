"""
Production Area Service

Catálogo de áreas de producción referenciadas por los ítems de OP, OT y
OG (campo productionAreaIds).
"""
import logging
from typing import Iterable, List

from fastapi import HTTPException
from sqlalchemy.orm import Session

from gestion.domain.organization import CreateProductionAreaRequest, UpdateProductionAreaRequest
from gestion.models import ProductionArea
from gestion.repositories import ProductionAreaRepository

logger = logging.getLogger(__name__)


class ProductionAreaService:

    def __init__(self, db: Session):
        self.db = db
        self.repository = ProductionAreaRepository(db)

    def find_all(self, include_inactive: bool = False) -> List[ProductionArea]:
        return self.repository.find_all(include_inactive)

    def find_one(self, area_id: str) -> ProductionArea:
        area = self.repository.get_by_id(area_id)
        if not area:
            raise HTTPException(status_code=404, detail=f"Área de producción con ID {area_id} no encontrada")
        return area

    def create(self, data: CreateProductionAreaRequest) -> ProductionArea:
        self._ensure_unique_name(data.name)
        area = self.repository.create(ProductionArea(name=data.name, description=data.description))
        self.db.commit()
        self.db.refresh(area)
        logger.info(f"Production area created: {area.name} ({area.id})")
        return area

    def update(self, area_id: str, data: UpdateProductionAreaRequest) -> ProductionArea:
        area = self.find_one(area_id)
        values = data.model_dump(exclude_unset=True)
        if values.get("name") and values["name"] != area.name:
            self._ensure_unique_name(values["name"], exclude_id=area_id)

        self.repository.update(area, values)
        self.db.commit()
        self.db.refresh(area)
        return area

    def remove(self, area_id: str) -> dict:
        area = self.find_one(area_id)
        area.is_active = False
        self.db.commit()
        logger.info(f"Production area deactivated: {area.name} ({area.id})")
        return {"message": f"Área de producción con ID {area_id} eliminada correctamente"}

    def ensure_exist(self, area_ids: Iterable[str]) -> None:
        """
        Valida que todas las áreas de producción referenciadas existan.

        Las áreas inactivas siguen siendo válidas para no romper ítems
        históricos; solo se rechazan IDs desconocidos.
        """
        requested = list(dict.fromkeys(area_ids or []))
        if not requested:
            return

        found = {area.id for area in self.repository.find_by_ids(requested)}
        missing = [area_id for area_id in requested if area_id not in found]
        if missing:
            raise HTTPException(
                status_code=400,
                detail=f"Áreas de producción no encontradas: {', '.join(missing)}"
            )

    def _ensure_unique_name(self, name: str, exclude_id: str = None) -> None:
        if self.repository.find_by_name(name, exclude_id=exclude_id):
            raise HTTPException(status_code=400, detail=f'Ya existe un área de producción con el nombre "{name}"')
