"""
Notification Repository
"""
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from gestion.models import Notification
from gestion.repositories.base_repository import BaseRepository


class NotificationRepository(BaseRepository[Notification]):

    def __init__(self, db: Session):
        super().__init__(db, Notification)

    def find_by_user(self, user_id: str, is_read: Optional[bool] = None) -> List[Notification]:
        query = self.db.query(Notification).filter(Notification.user_id == user_id)
        if is_read is not None:
            query = query.filter(Notification.is_read.is_(is_read))
        return query.order_by(Notification.created_at.desc()).all()

    def find_for_user(self, notification_id: str, user_id: str) -> Optional[Notification]:
        return (
            self.db.query(Notification)
            .filter(Notification.id == notification_id, Notification.user_id == user_id)
            .first()
        )

    def count_unread(self, user_id: str) -> int:
        return (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
            .count()
        )

    def mark_all_read(self, user_id: str, now: datetime) -> int:
        updated = (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
            .update({"is_read": True, "read_at": now}, synchronize_session=False)
        )
        self.db.flush()
        return updated
