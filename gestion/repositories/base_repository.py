"""
Base repository providing common CRUD operations.
"""
from typing import Generic, Optional, Type, TypeVar

from sqlalchemy.orm import Session

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Generic base repository providing common CRUD operations.
    Repositories flush, services commit.
    """

    def __init__(self, db: Session, model: Type[T]):
        self.db = db
        self.model = model

    def create(self, obj: T) -> T:
        self.db.add(obj)
        self.db.flush()
        return obj

    def get_by_id(self, id: str) -> Optional[T]:
        return self.db.get(self.model, id)

    def update(self, obj: T, values: Optional[dict] = None) -> T:
        """
        Apply `values` (only keys present) and flush.

        Args:
            obj: Model instance
            values: Column name -> new value
        """
        for key, value in (values or {}).items():
            setattr(obj, key, value)
        self.db.flush()
        return obj

    def delete(self, obj: T) -> None:
        self.db.delete(obj)
        self.db.flush()

    def count(self) -> int:
        return self.db.query(self.model).count()

    def exists(self, id: str) -> bool:
        return self.db.query(self.model).filter(self.model.id == id).count() > 0
