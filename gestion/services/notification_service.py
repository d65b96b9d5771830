"""
Notification Service
Notificaciones internas: creación, lectura y difusión a administradores.
"""
import logging
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from gestion.core.database import utcnow
from gestion.domain.enums import NotificationType
from gestion.models import Notification
from gestion.repositories import NotificationRepository, UserRepository

logger = logging.getLogger(__name__)


class NotificationService:
    """
    Las notificaciones se agregan a la sesión sin commit; quien llama
    decide cuándo confirmar la transacción.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repository = NotificationRepository(db)
        self.users = UserRepository(db)

    def create(
        self,
        user_id: str,
        type: NotificationType,
        title: str,
        message: str,
        related_id: Optional[str] = None,
        related_type: Optional[str] = None,
    ) -> Notification:
        notification = Notification(
            user_id=user_id,
            type=type.value,
            title=title,
            message=message,
            related_id=related_id,
            related_type=related_type,
        )
        return self.repository.create(notification)

    def notify_all_admins(
        self,
        type: NotificationType,
        title: str,
        message: str,
        related_id: Optional[str] = None,
        related_type: Optional[str] = None,
    ) -> List[Notification]:
        admins = self.users.find_active_admins()
        if not admins:
            logger.debug(f"No admins to notify for {type.value}")
            return []

        created = [
            self.create(admin.id, type, title, message, related_id, related_type)
            for admin in admins
        ]
        logger.info(f"Notified {len(created)} admins: {title}")
        return created

    # ------------------------------------------------------------------
    # Endpoints del usuario
    # ------------------------------------------------------------------

    def find_by_user(self, user_id: str, is_read: Optional[bool] = None) -> List[Notification]:
        return self.repository.find_by_user(user_id, is_read)

    def count_unread(self, user_id: str) -> int:
        return self.repository.count_unread(user_id)

    def mark_as_read(self, notification_id: str, user_id: str) -> Notification:
        notification = self._get_own(notification_id, user_id)
        if not notification.is_read:
            notification.is_read = True
            notification.read_at = utcnow()
            self.db.commit()
            self.db.refresh(notification)
        return notification

    def mark_all_as_read(self, user_id: str) -> int:
        updated = self.repository.mark_all_read(user_id, utcnow())
        self.db.commit()
        return updated

    def delete(self, notification_id: str, user_id: str) -> None:
        notification = self._get_own(notification_id, user_id)
        self.repository.delete(notification)
        self.db.commit()

    def _get_own(self, notification_id: str, user_id: str) -> Notification:
        notification = self.repository.find_for_user(notification_id, user_id)
        if not notification:
            raise HTTPException(
                status_code=404,
                detail=f"Notificación con ID {notification_id} no encontrada"
            )
        return notification
