"""
Expense Order Auth Request Service
Solicitudes para autorizar una OG cuando el usuario no es administrador.
"""
import logging
from typing import List

from fastapi import HTTPException
from sqlalchemy.orm import Session

from gestion.core.auth import AuthenticatedUser
from gestion.core.database import utcnow
from gestion.domain.enums import EditRequestStatus, NotificationType
from gestion.domain.requests import CreateExpenseAuthRequest, ReviewRequest
from gestion.models import ExpenseOrderAuthRequest
from gestion.repositories import ExpenseAuthRequestRepository, ExpenseOrderRepository
from gestion.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


class ExpenseAuthRequestService:

    def __init__(self, db: Session):
        self.db = db
        self.repository = ExpenseAuthRequestRepository(db)
        self.expense_orders = ExpenseOrderRepository(db)
        self.notifications = NotificationService(db)

    def create(self, data: CreateExpenseAuthRequest, user: AuthenticatedUser) -> ExpenseOrderAuthRequest:
        expense_order = self.expense_orders.get_by_id(data.expense_order_id)
        if not expense_order:
            raise HTTPException(status_code=404, detail=f"OG con id {data.expense_order_id} no encontrada")

        if user.is_admin:
            raise HTTPException(
                status_code=400,
                detail="Los administradores pueden autorizar la OG directamente sin crear una solicitud"
            )

        if self.repository.find_pending_for(expense_order.id, user.id):
            raise HTTPException(
                status_code=400,
                detail="Ya tienes una solicitud de autorización pendiente para esta OG"
            )

        request = self.repository.create(ExpenseOrderAuthRequest(
            expense_order_id=expense_order.id,
            requested_by_id=user.id,
            reason=data.reason,
            status=EditRequestStatus.PENDING.value,
        ))
        self.db.refresh(request)

        requester = request.requested_by.first_name or request.requested_by.email
        self.notifications.notify_all_admins(
            NotificationType.EXPENSE_AUTH_REQUEST_PENDING,
            "Nueva solicitud de autorización de OG",
            f"{requester} solicita autorizar la OG {expense_order.og_number}",
            related_id=request.id,
            related_type="ExpenseOrderAuthRequest",
        )
        self.db.commit()
        logger.info(f"Expense auth request {request.id} created for {expense_order.og_number}")
        return request

    def approve(self, request_id: str, reviewer: AuthenticatedUser, data: ReviewRequest) -> ExpenseOrderAuthRequest:
        request = self._pending(request_id)
        if not reviewer.is_admin:
            raise HTTPException(status_code=403, detail="Solo los administradores pueden aprobar solicitudes")

        self._review(request, EditRequestStatus.APPROVED, reviewer, data)
        self.notifications.create(
            request.requested_by_id,
            NotificationType.EXPENSE_AUTH_REQUEST_APPROVED,
            "Solicitud de autorización de OG aprobada",
            f"Tu solicitud para autorizar la OG {request.expense_order.og_number} ha sido aprobada. "
            "Ya puedes cambiar el estado.",
            related_id=request.expense_order_id,
            related_type="ExpenseOrder",
        )
        self.db.commit()
        self.db.refresh(request)
        return request

    def reject(self, request_id: str, reviewer: AuthenticatedUser, data: ReviewRequest) -> ExpenseOrderAuthRequest:
        request = self._pending(request_id)
        if not reviewer.is_admin:
            raise HTTPException(status_code=403, detail="Solo los administradores pueden rechazar solicitudes")

        self._review(request, EditRequestStatus.REJECTED, reviewer, data)
        reason = f" Motivo: {data.review_notes}" if data.review_notes else ""
        self.notifications.create(
            request.requested_by_id,
            NotificationType.EXPENSE_AUTH_REQUEST_REJECTED,
            "Solicitud de autorización de OG rechazada",
            f"Tu solicitud para autorizar la OG {request.expense_order.og_number} ha sido rechazada.{reason}",
            related_id=request.expense_order_id,
            related_type="ExpenseOrder",
        )
        self.db.commit()
        self.db.refresh(request)
        return request

    def find_pending(self) -> List[ExpenseOrderAuthRequest]:
        return self.repository.find_by_status(EditRequestStatus.PENDING.value)

    def find_all(self) -> List[ExpenseOrderAuthRequest]:
        return self.repository.find_by_status()

    def find_by_user(self, user_id: str) -> List[ExpenseOrderAuthRequest]:
        return self.repository.find_by_user(user_id)

    def _pending(self, request_id: str) -> ExpenseOrderAuthRequest:
        request = self.repository.get_by_id(request_id)
        if not request or request.status != EditRequestStatus.PENDING.value:
            raise HTTPException(status_code=404, detail="Solicitud no encontrada o ya procesada")
        return request

    def _review(
        self,
        request: ExpenseOrderAuthRequest,
        status: EditRequestStatus,
        reviewer: AuthenticatedUser,
        data: ReviewRequest,
    ) -> None:
        request.status = status.value
        request.reviewed_by_id = reviewer.id
        request.reviewed_at = utcnow()
        request.review_notes = data.review_notes
        self.db.flush()
        logger.info(f"Expense auth request {request.id} {status.value.lower()} by {reviewer.email}")
