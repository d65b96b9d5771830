"""
Notifications API endpoints (solo las del usuario autenticado)
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from gestion.core.auth import AuthenticatedUser, get_current_user
from gestion.core.database import get_db
from gestion.domain.base import MessageResponse
from gestion.domain.notification import MarkAllReadResponse, NotificationResponse, UnreadCountResponse
from gestion.services.notification_service import NotificationService


router = APIRouter()


@router.get("", response_model=List[NotificationResponse])
async def get_notifications(
    is_read: Optional[bool] = Query(None, alias="isRead"),
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(get_current_user),
):
    return NotificationService(db).find_by_user(user.id, is_read)


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(get_current_user),
):
    return {"count": NotificationService(db).count_unread(user.id)}


@router.put("/mark-all-read", response_model=MarkAllReadResponse)
async def mark_all_as_read(
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(get_current_user),
):
    return {"updated": NotificationService(db).mark_all_as_read(user.id)}


@router.put("/{notification_id}/read", response_model=NotificationResponse)
async def mark_as_read(
    notification_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(get_current_user),
):
    return NotificationService(db).mark_as_read(notification_id, user.id)


@router.delete("/{notification_id}", response_model=MessageResponse)
async def delete_notification(
    notification_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(get_current_user),
):
    NotificationService(db).delete(notification_id, user.id)
    return {"message": "Notificación eliminada"}
