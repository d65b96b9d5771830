"""
Order Status Change Request Service
Un usuario no administrador solicita un cambio de estado que requiere
autorización (p.ej. DELIVERED_ON_CREDIT); un administrador la revisa.
"""
import logging
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from gestion.core.auth import AuthenticatedUser
from gestion.core.database import utcnow
from gestion.domain.enums import EditRequestStatus, NotificationType
from gestion.domain.requests import CreateStatusChangeRequest, ReviewRequest
from gestion.models import OrderStatusChangeRequest
from gestion.repositories import OrderRepository, StatusChangeRequestRepository
from gestion.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


class StatusChangeRequestService:

    def __init__(self, db: Session):
        self.db = db
        self.repository = StatusChangeRequestRepository(db)
        self.orders = OrderRepository(db)
        self.notifications = NotificationService(db)

    def create(self, data: CreateStatusChangeRequest, user: AuthenticatedUser) -> OrderStatusChangeRequest:
        order = self.orders.get_by_id(data.order_id)
        if not order:
            raise HTTPException(status_code=404, detail=f"Order with id {data.order_id} not found")

        if order.status != data.current_status.value:
            raise HTTPException(
                status_code=400,
                detail=f"Current order status is {order.status}, not {data.current_status.value}"
            )

        if user.is_admin:
            raise HTTPException(
                status_code=400,
                detail="Administrators can change order status directly without requesting permission"
            )

        if self.repository.find_pending_for(order.id, user.id, data.requested_status.value):
            raise HTTPException(
                status_code=400,
                detail="You already have a pending status change request for this order"
            )

        request = self.repository.create(OrderStatusChangeRequest(
            order_id=order.id,
            requested_by_id=user.id,
            current_status=data.current_status.value,
            requested_status=data.requested_status.value,
            reason=data.reason,
            status=EditRequestStatus.PENDING.value,
        ))
        self.db.refresh(request)

        requester = request.requested_by.first_name or request.requested_by.email
        self.notifications.notify_all_admins(
            NotificationType.STATUS_CHANGE_REQUEST_PENDING,
            "Nueva solicitud de cambio de estado",
            f"{requester} solicita cambiar la orden {order.order_number} "
            f"de {data.current_status.value} a {data.requested_status.value}",
            related_id=request.id,
            related_type="OrderStatusChangeRequest",
        )
        self.db.commit()
        logger.info(f"Status change request {request.id} created for order {order.order_number}")
        return request

    def approve(self, request_id: str, reviewer: AuthenticatedUser, data: ReviewRequest) -> OrderStatusChangeRequest:
        request = self._pending(request_id)
        self._ensure_admin(reviewer, "Only administrators can approve requests")

        if request.order.status != request.current_status:
            raise HTTPException(
                status_code=400,
                detail=(
                    f"Order status has changed from {request.current_status} to {request.order.status}. "
                    "Request is no longer valid."
                )
            )

        self._review(request, EditRequestStatus.APPROVED, reviewer, data)
        self.notifications.create(
            request.requested_by_id,
            NotificationType.STATUS_CHANGE_REQUEST_APPROVED,
            "Solicitud de cambio de estado aprobada",
            f"Tu solicitud para cambiar la orden {request.order.order_number} "
            f"a {request.requested_status} ha sido aprobada.",
            related_id=request.order_id,
            related_type="Order",
        )
        self.db.commit()
        self.db.refresh(request)
        logger.info(f"Status change request {request_id} approved by {reviewer.email}")
        return request

    def reject(self, request_id: str, reviewer: AuthenticatedUser, data: ReviewRequest) -> OrderStatusChangeRequest:
        request = self._pending(request_id)
        self._ensure_admin(reviewer, "Only administrators can reject requests")

        self._review(request, EditRequestStatus.REJECTED, reviewer, data)
        reason = f" Motivo: {data.review_notes}" if data.review_notes else ""
        self.notifications.create(
            request.requested_by_id,
            NotificationType.STATUS_CHANGE_REQUEST_REJECTED,
            "Solicitud de cambio de estado rechazada",
            f"Tu solicitud para cambiar la orden {request.order.order_number} "
            f"a {request.requested_status} ha sido rechazada.{reason}",
            related_id=request.order_id,
            related_type="Order",
        )
        self.db.commit()
        self.db.refresh(request)
        logger.info(f"Status change request {request_id} rejected by {reviewer.email}")
        return request

    def find_pending(self, order_id: Optional[str] = None) -> List[OrderStatusChangeRequest]:
        return self.repository.find_pending(order_id)

    def find_by_user(self, user_id: str) -> List[OrderStatusChangeRequest]:
        return self.repository.find_by_user(user_id)

    def find_one(self, request_id: str) -> OrderStatusChangeRequest:
        request = self.repository.get_by_id(request_id)
        if not request:
            raise HTTPException(status_code=404, detail="Status change request not found")
        return request

    def _pending(self, request_id: str) -> OrderStatusChangeRequest:
        request = self.repository.get_by_id(request_id)
        if not request or request.status != EditRequestStatus.PENDING.value:
            raise HTTPException(
                status_code=404,
                detail="Status change request not found or already processed"
            )
        return request

    @staticmethod
    def _ensure_admin(user: AuthenticatedUser, message: str) -> None:
        if not user.is_admin:
            raise HTTPException(status_code=403, detail=message)

    def _review(
        self,
        request: OrderStatusChangeRequest,
        status: EditRequestStatus,
        reviewer: AuthenticatedUser,
        data: ReviewRequest,
    ) -> None:
        request.status = status.value
        request.reviewed_by_id = reviewer.id
        request.reviewed_at = utcnow()
        request.review_notes = data.review_notes
        self.db.flush()
