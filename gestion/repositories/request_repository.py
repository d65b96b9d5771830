"""
Approval Request Repository

Solicitudes de edición de OP, cambio de estado de OP y autorización de OG.
"""
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from gestion.domain.enums import EditRequestStatus
from gestion.models import ExpenseOrderAuthRequest, OrderEditRequest, OrderStatusChangeRequest
from gestion.repositories.base_repository import BaseRepository


class OrderEditRequestRepository(BaseRepository[OrderEditRequest]):

    def __init__(self, db: Session):
        super().__init__(db, OrderEditRequest)

    def find_pending_for(self, order_id: str, user_id: str) -> Optional[OrderEditRequest]:
        return (
            self.db.query(OrderEditRequest)
            .filter(
                OrderEditRequest.order_id == order_id,
                OrderEditRequest.requested_by_id == user_id,
                OrderEditRequest.status == EditRequestStatus.PENDING.value,
            )
            .first()
        )

    def find_by_order(self, order_id: str) -> List[OrderEditRequest]:
        return (
            self.db.query(OrderEditRequest)
            .filter(OrderEditRequest.order_id == order_id)
            .order_by(OrderEditRequest.created_at.desc())
            .all()
        )

    def find_in_order(self, order_id: str, request_id: str) -> Optional[OrderEditRequest]:
        return (
            self.db.query(OrderEditRequest)
            .filter(OrderEditRequest.id == request_id, OrderEditRequest.order_id == order_id)
            .first()
        )

    def find_pending(self) -> List[OrderEditRequest]:
        return (
            self.db.query(OrderEditRequest)
            .filter(OrderEditRequest.status == EditRequestStatus.PENDING.value)
            .order_by(OrderEditRequest.created_at.asc())
            .all()
        )

    def find_active_permission(
        self, order_id: str, user_id: str, now: datetime
    ) -> Optional[OrderEditRequest]:
        return (
            self.db.query(OrderEditRequest)
            .filter(
                OrderEditRequest.order_id == order_id,
                OrderEditRequest.requested_by_id == user_id,
                OrderEditRequest.status == EditRequestStatus.APPROVED.value,
                OrderEditRequest.expires_at > now,
            )
            .order_by(OrderEditRequest.expires_at.desc())
            .first()
        )

    def find_expired_approvals(self, now: datetime) -> List[OrderEditRequest]:
        return (
            self.db.query(OrderEditRequest)
            .filter(
                OrderEditRequest.status == EditRequestStatus.APPROVED.value,
                OrderEditRequest.expires_at <= now,
            )
            .all()
        )

    def find_expiring_approvals(self, now: datetime, until: datetime) -> List[OrderEditRequest]:
        return (
            self.db.query(OrderEditRequest)
            .filter(
                OrderEditRequest.status == EditRequestStatus.APPROVED.value,
                OrderEditRequest.expires_at >= now,
                OrderEditRequest.expires_at <= until,
            )
            .all()
        )


class StatusChangeRequestRepository(BaseRepository[OrderStatusChangeRequest]):

    def __init__(self, db: Session):
        super().__init__(db, OrderStatusChangeRequest)

    def find_pending_for(
        self, order_id: str, user_id: str, requested_status: str
    ) -> Optional[OrderStatusChangeRequest]:
        return (
            self.db.query(OrderStatusChangeRequest)
            .filter(
                OrderStatusChangeRequest.order_id == order_id,
                OrderStatusChangeRequest.requested_by_id == user_id,
                OrderStatusChangeRequest.requested_status == requested_status,
                OrderStatusChangeRequest.status == EditRequestStatus.PENDING.value,
            )
            .first()
        )

    def find_approved_for(
        self, order_id: str, user_id: str, requested_status: str
    ) -> Optional[OrderStatusChangeRequest]:
        return (
            self.db.query(OrderStatusChangeRequest)
            .filter(
                OrderStatusChangeRequest.order_id == order_id,
                OrderStatusChangeRequest.requested_by_id == user_id,
                OrderStatusChangeRequest.requested_status == requested_status,
                OrderStatusChangeRequest.status == EditRequestStatus.APPROVED.value,
            )
            .first()
        )

    def find_pending(self, order_id: Optional[str] = None) -> List[OrderStatusChangeRequest]:
        query = self.db.query(OrderStatusChangeRequest).filter(
            OrderStatusChangeRequest.status == EditRequestStatus.PENDING.value
        )
        if order_id:
            query = query.filter(OrderStatusChangeRequest.order_id == order_id)
        return query.order_by(OrderStatusChangeRequest.created_at.asc()).all()

    def find_by_user(self, user_id: str) -> List[OrderStatusChangeRequest]:
        return (
            self.db.query(OrderStatusChangeRequest)
            .filter(OrderStatusChangeRequest.requested_by_id == user_id)
            .order_by(OrderStatusChangeRequest.created_at.desc())
            .all()
        )


class ExpenseAuthRequestRepository(BaseRepository[ExpenseOrderAuthRequest]):

    def __init__(self, db: Session):
        super().__init__(db, ExpenseOrderAuthRequest)

    def find_pending_for(self, expense_order_id: str, user_id: str) -> Optional[ExpenseOrderAuthRequest]:
        return (
            self.db.query(ExpenseOrderAuthRequest)
            .filter(
                ExpenseOrderAuthRequest.expense_order_id == expense_order_id,
                ExpenseOrderAuthRequest.requested_by_id == user_id,
                ExpenseOrderAuthRequest.status == EditRequestStatus.PENDING.value,
            )
            .first()
        )

    def find_latest_approved(self, expense_order_id: str, user_id: str) -> Optional[ExpenseOrderAuthRequest]:
        return (
            self.db.query(ExpenseOrderAuthRequest)
            .filter(
                ExpenseOrderAuthRequest.expense_order_id == expense_order_id,
                ExpenseOrderAuthRequest.requested_by_id == user_id,
                ExpenseOrderAuthRequest.status == EditRequestStatus.APPROVED.value,
            )
            .order_by(ExpenseOrderAuthRequest.reviewed_at.desc())
            .first()
        )

    def find_by_status(self, status: Optional[str] = None) -> List[ExpenseOrderAuthRequest]:
        query = self.db.query(ExpenseOrderAuthRequest)
        if status:
            query = query.filter(ExpenseOrderAuthRequest.status == status)
        return query.order_by(ExpenseOrderAuthRequest.created_at.desc()).all()

    def find_by_user(self, user_id: str) -> List[ExpenseOrderAuthRequest]:
        return (
            self.db.query(ExpenseOrderAuthRequest)
            .filter(ExpenseOrderAuthRequest.requested_by_id == user_id)
            .order_by(ExpenseOrderAuthRequest.created_at.desc())
            .all()
        )
