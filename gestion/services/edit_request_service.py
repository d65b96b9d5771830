"""
Order Edit Request Service
Permisos temporales para editar órdenes que ya salieron de DRAFT.

Flujo:
1. El usuario (no admin) crea la solicitud -> se notifica a los admins
2. Un admin aprueba (permiso válido por EDIT_PERMISSION_MINUTES) o rechaza
3. El job periódico marca como EXPIRED los permisos vencidos y avisa
   al usuario un minuto antes del vencimiento

Author: TM3
Date: 2026-01-19
"""
import logging
from datetime import timedelta
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from gestion.core.auth import AuthenticatedUser
from gestion.core.database import utcnow
from gestion.domain.enums import EditRequestStatus, NotificationType, OrderStatus
from gestion.domain.requests import CreateEditRequest, ReviewRequest
from gestion.models import OrderEditRequest
from gestion.repositories import OrderEditRequestRepository, OrderRepository
from gestion.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


EDIT_PERMISSION_MINUTES = 5

# Estados de OP en los que se puede pedir permiso de edición
EDITABLE_ORDER_STATUSES = (
    OrderStatus.CONFIRMED.value,
    OrderStatus.IN_PRODUCTION.value,
    OrderStatus.READY.value,
    OrderStatus.DELIVERED.value,
    OrderStatus.DELIVERED_ON_CREDIT.value,
    OrderStatus.WARRANTY.value,
)


class EditRequestService:

    def __init__(self, db: Session):
        self.db = db
        self.repository = OrderEditRequestRepository(db)
        self.orders = OrderRepository(db)
        self.notifications = NotificationService(db)

    def create(self, order_id: str, user: AuthenticatedUser, data: CreateEditRequest) -> OrderEditRequest:
        order = self.orders.get_by_id(order_id)
        if not order:
            raise HTTPException(status_code=404, detail=f"Order with id {order_id} not found")

        if order.status not in EDITABLE_ORDER_STATUSES:
            raise HTTPException(
                status_code=400,
                detail=f"Order status {order.status} does not allow edit requests"
            )

        if user.is_admin:
            raise HTTPException(
                status_code=400,
                detail="Administrators can edit orders directly without requesting permission"
            )

        if self.repository.find_pending_for(order_id, user.id):
            raise HTTPException(
                status_code=400,
                detail="You already have a pending edit request for this order"
            )

        request = self.repository.create(OrderEditRequest(
            order_id=order_id,
            requested_by_id=user.id,
            observations=data.observations,
            status=EditRequestStatus.PENDING.value,
        ))
        self.db.refresh(request)

        requester = request.requested_by.first_name or request.requested_by.email
        self.notifications.notify_all_admins(
            NotificationType.EDIT_REQUEST_PENDING,
            "Nueva solicitud de edición de orden",
            f"{requester} solicita permiso para editar la orden {order.order_number}",
            related_id=request.id,
            related_type="OrderEditRequest",
        )
        self.db.commit()
        logger.info(f"Edit request {request.id} created for order {order.order_number}")
        return request

    def approve(
        self,
        request_id: str,
        reviewer: AuthenticatedUser,
        data: ReviewRequest,
        order_id: Optional[str] = None,
    ) -> OrderEditRequest:
        request = self._pending(request_id, order_id)
        if not reviewer.is_admin:
            raise HTTPException(status_code=403, detail="Only administrators can approve requests")

        now = utcnow()
        request.status = EditRequestStatus.APPROVED.value
        request.reviewed_by_id = reviewer.id
        request.reviewed_at = now
        request.review_notes = data.review_notes
        request.expires_at = now + timedelta(minutes=EDIT_PERMISSION_MINUTES)
        self.db.flush()

        self.notifications.create(
            request.requested_by_id,
            NotificationType.EDIT_REQUEST_APPROVED,
            "Solicitud de edición aprobada",
            f"Tu solicitud para editar la orden {request.order.order_number} ha sido aprobada. "
            f"Tienes {EDIT_PERMISSION_MINUTES} minutos para realizar los cambios.",
            related_id=request.order_id,
            related_type="Order",
        )
        self.db.commit()
        self.db.refresh(request)
        logger.info(f"Edit request {request_id} approved until {request.expires_at}")
        return request

    def reject(
        self,
        request_id: str,
        reviewer: AuthenticatedUser,
        data: ReviewRequest,
        order_id: Optional[str] = None,
    ) -> OrderEditRequest:
        request = self._pending(request_id, order_id)
        if not reviewer.is_admin:
            raise HTTPException(status_code=403, detail="Only administrators can reject requests")

        request.status = EditRequestStatus.REJECTED.value
        request.reviewed_by_id = reviewer.id
        request.reviewed_at = utcnow()
        request.review_notes = data.review_notes
        self.db.flush()

        reason = f" Motivo: {data.review_notes}" if data.review_notes else ""
        self.notifications.create(
            request.requested_by_id,
            NotificationType.EDIT_REQUEST_REJECTED,
            "Solicitud de edición rechazada",
            f"Tu solicitud para editar la orden {request.order.order_number} ha sido rechazada.{reason}",
            related_id=request.order_id,
            related_type="Order",
        )
        self.db.commit()
        self.db.refresh(request)
        logger.info(f"Edit request {request_id} rejected")
        return request

    def has_active_permission(self, order_id: str, user_id: str) -> bool:
        return self.get_active_permission(order_id, user_id) is not None

    def get_active_permission(self, order_id: str, user_id: str) -> Optional[OrderEditRequest]:
        return self.repository.find_active_permission(order_id, user_id, utcnow())

    def find_all_pending(self) -> List[OrderEditRequest]:
        return self.repository.find_pending()

    def find_by_order(self, order_id: str) -> List[OrderEditRequest]:
        return self.repository.find_by_order(order_id)

    def find_one(self, order_id: str, request_id: str) -> OrderEditRequest:
        request = self.repository.find_in_order(order_id, request_id)
        if not request:
            raise HTTPException(status_code=404, detail="Edit request not found")
        return request

    def _pending(self, request_id: str, order_id: Optional[str] = None) -> OrderEditRequest:
        if order_id:
            request = self.repository.find_in_order(order_id, request_id)
        else:
            request = self.repository.get_by_id(request_id)

        if not request or request.status != EditRequestStatus.PENDING.value:
            raise HTTPException(status_code=404, detail="Edit request not found or already processed")
        return request


# =============================================================================
# Background job
# =============================================================================

def expire_permissions(db: Session) -> int:
    """
    APPROVED con expires_at <= ahora -> EXPIRED, y se notifica al usuario.

    Returns:
        Número de permisos expirados
    """
    logger.debug("Running expire_permissions job")
    repository = OrderEditRequestRepository(db)
    notifications = NotificationService(db)

    expired = repository.find_expired_approvals(utcnow())
    if not expired:
        logger.debug("No expired permissions found")
        return 0

    for request in expired:
        request.status = EditRequestStatus.EXPIRED.value
        _notify_requester(
            db,
            notifications,
            request,
            NotificationType.EDIT_PERMISSION_EXPIRED,
            "Permiso de edición expirado",
            f"Tu permiso para editar la orden {request.order.order_number} ha expirado.",
        )
    db.commit()

    logger.info(f"Expired {len(expired)} edit permissions")
    return len(expired)


def notify_expiring_permissions(db: Session) -> int:
    """Avisa a los usuarios cuyo permiso vence en el próximo minuto"""
    repository = OrderEditRequestRepository(db)
    notifications = NotificationService(db)

    now = utcnow()
    expiring = repository.find_expiring_approvals(now, now + timedelta(minutes=1))
    if not expiring:
        logger.debug("No expiring permissions found")
        return 0

    for request in expiring:
        _notify_requester(
            db,
            notifications,
            request,
            NotificationType.EDIT_PERMISSION_EXPIRING,
            "Permiso de edición por expirar",
            f"Tu permiso para editar la orden {request.order.order_number} expira en 1 minuto. "
            "Guarda tus cambios.",
        )
    db.commit()

    logger.info(f"Notified {len(expiring)} users about expiring permissions")
    return len(expiring)


def _notify_requester(
    db: Session,
    notifications: NotificationService,
    request: OrderEditRequest,
    type: NotificationType,
    title: str,
    message: str,
) -> None:
    # Un aviso fallido no debe revertir el resto del lote
    try:
        with db.begin_nested():
            notifications.create(
                request.requested_by_id,
                type,
                title,
                message,
                related_id=request.order_id,
                related_type="Order",
            )
    except SQLAlchemyError as e:
        logger.error(f"Failed to notify user {request.requested_by_id} about edit request {request.id}: {e}")
