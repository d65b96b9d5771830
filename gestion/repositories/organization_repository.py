"""
Area, Cargo & Production Area Repository
"""
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from gestion.models import Area, Cargo, ProductionArea
from gestion.repositories.base_repository import BaseRepository


class AreaRepository(BaseRepository[Area]):

    def __init__(self, db: Session):
        super().__init__(db, Area)

    def find_all(self, include_inactive: bool = False) -> List[Area]:
        query = self.db.query(Area)
        if not include_inactive:
            query = query.filter(Area.is_active.is_(True))
        return query.order_by(Area.name.asc()).all()

    def find_by_name(self, name: str, exclude_id: Optional[str] = None) -> Optional[Area]:
        query = self.db.query(Area).filter(func.lower(Area.name) == name.lower())
        if exclude_id:
            query = query.filter(Area.id != exclude_id)
        return query.first()

    def count_active_cargos(self, area_id: str) -> int:
        return (
            self.db.query(Cargo)
            .filter(Cargo.area_id == area_id, Cargo.is_active.is_(True))
            .count()
        )


class CargoRepository(BaseRepository[Cargo]):

    def __init__(self, db: Session):
        super().__init__(db, Cargo)

    def find_all(self, include_inactive: bool = False, area_id: Optional[str] = None) -> List[Cargo]:
        query = self.db.query(Cargo)
        if not include_inactive:
            query = query.filter(Cargo.is_active.is_(True))
        if area_id:
            query = query.filter(Cargo.area_id == area_id)
        return query.order_by(Cargo.name.asc()).all()

    def find_by_name_in_area(
        self, name: str, area_id: str, exclude_id: Optional[str] = None
    ) -> Optional[Cargo]:
        query = self.db.query(Cargo).filter(
            func.lower(Cargo.name) == name.lower(),
            Cargo.area_id == area_id,
        )
        if exclude_id:
            query = query.filter(Cargo.id != exclude_id)
        return query.first()


class ProductionAreaRepository(BaseRepository[ProductionArea]):

    def __init__(self, db: Session):
        super().__init__(db, ProductionArea)

    def find_all(self, include_inactive: bool = False) -> List[ProductionArea]:
        query = self.db.query(ProductionArea)
        if not include_inactive:
            query = query.filter(ProductionArea.is_active.is_(True))
        return query.order_by(ProductionArea.name.asc()).all()

    def find_by_name(self, name: str, exclude_id: Optional[str] = None) -> Optional[ProductionArea]:
        query = self.db.query(ProductionArea).filter(func.lower(ProductionArea.name) == name.lower())
        if exclude_id:
            query = query.filter(ProductionArea.id != exclude_id)
        return query.first()

    def find_by_ids(self, ids: List[str]) -> List[ProductionArea]:
        if not ids:
            return []
        return self.db.query(ProductionArea).filter(ProductionArea.id.in_(ids)).all()
