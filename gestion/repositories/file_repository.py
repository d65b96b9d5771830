"""
File repository for stored-file metadata.
"""
from typing import List, Optional

from sqlalchemy.orm import Session

from gestion.models import File
from gestion.repositories.base_repository import BaseRepository


class FileRepository(BaseRepository[File]):
    """Repository for File model operations. Soft-deleted rows are hidden."""

    def __init__(self, db: Session):
        super().__init__(db, File)

    def get_active(self, file_id: str) -> Optional[File]:
        return (
            self.db.query(File)
            .filter(File.id == file_id, File.is_deleted.is_(False))
            .first()
        )

    def find_by_entity(self, entity_type: str, entity_id: str) -> List[File]:
        return (
            self.db.query(File)
            .filter(
                File.entity_type == entity_type,
                File.entity_id == entity_id,
                File.is_deleted.is_(False),
            )
            .order_by(File.created_at.desc())
            .all()
        )

    def find_by_uploader(self, user_id: str) -> List[File]:
        return (
            self.db.query(File)
            .filter(File.uploaded_by == user_id, File.is_deleted.is_(False))
            .order_by(File.created_at.desc())
            .all()
        )
