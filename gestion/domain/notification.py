"""
Notification Domain Models
"""
from datetime import datetime
from typing import Optional

from gestion.domain.base import CamelModel
from gestion.domain.enums import NotificationType


class NotificationResponse(CamelModel):
    id: str
    user_id: str
    type: NotificationType
    title: str
    message: str
    related_id: Optional[str] = None
    related_type: Optional[str] = None
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class UnreadCountResponse(CamelModel):
    count: int


class MarkAllReadResponse(CamelModel):
    updated: int
