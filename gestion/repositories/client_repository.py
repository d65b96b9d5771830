"""
Client, Location & Commercial Channel Repository
"""
from typing import Iterable, List, Optional, Set

from sqlalchemy import func
from sqlalchemy.orm import Session

from gestion.models import City, Client, CommercialChannel, Department
from gestion.repositories.base_repository import BaseRepository


class ClientRepository(BaseRepository[Client]):

    def __init__(self, db: Session):
        super().__init__(db, Client)

    def find_all(self, include_inactive: bool = False) -> List[Client]:
        query = self.db.query(Client)
        if not include_inactive:
            query = query.filter(Client.is_active.is_(True))
        return query.order_by(Client.name.asc()).all()

    def find_by_email(self, email: str, exclude_id: Optional[str] = None) -> Optional[Client]:
        query = self.db.query(Client).filter(func.lower(Client.email) == email.lower())
        if exclude_id:
            query = query.filter(Client.id != exclude_id)
        return query.first()

    def existing_emails(self, emails: Iterable[str]) -> Set[str]:
        """Emails (lowercase) already registered among `emails`"""
        lowered = {e.lower() for e in emails if e}
        if not lowered:
            return set()
        rows = (
            self.db.query(func.lower(Client.email))
            .filter(func.lower(Client.email).in_(lowered))
            .all()
        )
        return {row[0] for row in rows}


class LocationRepository:
    """Departamentos y ciudades (solo lectura)"""

    def __init__(self, db: Session):
        self.db = db

    def get_department(self, department_id: str) -> Optional[Department]:
        return self.db.get(Department, department_id)

    def get_city(self, city_id: str) -> Optional[City]:
        return self.db.get(City, city_id)

    def find_departments(self) -> List[Department]:
        return self.db.query(Department).order_by(Department.name.asc()).all()

    def count_cities(self, department_id: str) -> int:
        return self.db.query(City).filter(City.department_id == department_id).count()

    def find_cities(self, department_id: str) -> List[City]:
        return (
            self.db.query(City)
            .filter(City.department_id == department_id)
            .order_by(City.name.asc())
            .all()
        )

    def find_department_by_name(self, name: str) -> Optional[Department]:
        return (
            self.db.query(Department)
            .filter(func.lower(Department.name) == name.strip().lower())
            .first()
        )

    def find_city_by_name(self, name: str, department_id: str) -> Optional[City]:
        return (
            self.db.query(City)
            .filter(
                func.lower(City.name) == name.strip().lower(),
                City.department_id == department_id,
            )
            .first()
        )


class CommercialChannelRepository(BaseRepository[CommercialChannel]):

    def __init__(self, db: Session):
        super().__init__(db, CommercialChannel)

    def find_all(self) -> List[CommercialChannel]:
        return self.db.query(CommercialChannel).order_by(CommercialChannel.name.asc()).all()

    def find_by_name(self, name: str, exclude_id: Optional[str] = None) -> Optional[CommercialChannel]:
        query = self.db.query(CommercialChannel).filter(CommercialChannel.name == name)
        if exclude_id:
            query = query.filter(CommercialChannel.id != exclude_id)
        return query.first()
