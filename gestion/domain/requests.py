"""
Solicitudes de aprobación: cambio de estado de OP, edición de OP y
autorización de OG
"""
from datetime import datetime
from typing import Optional

from pydantic import Field

from gestion.domain.auth import UserSummary
from gestion.domain.base import CamelModel, UUIDStr
from gestion.domain.enums import EditRequestStatus, OrderStatus


class ReviewRequest(CamelModel):
    review_notes: Optional[str] = Field(None, description="Notas del revisor")


# Cambio de estado

class CreateStatusChangeRequest(CamelModel):
    order_id: UUIDStr
    current_status: OrderStatus
    requested_status: OrderStatus
    reason: Optional[str] = None


class OrderRequestSummary(CamelModel):
    id: str
    order_number: str
    status: OrderStatus


class StatusChangeRequestResponse(CamelModel):
    id: str
    order_id: str
    order: Optional[OrderRequestSummary] = None
    requested_by_id: str
    requested_by: Optional[UserSummary] = None
    current_status: OrderStatus
    requested_status: OrderStatus
    reason: Optional[str] = None
    status: EditRequestStatus
    reviewed_by_id: Optional[str] = None
    reviewed_by: Optional[UserSummary] = None
    reviewed_at: Optional[datetime] = None
    review_notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Edición

class CreateEditRequest(CamelModel):
    observations: Optional[str] = None


class EditRequestResponse(CamelModel):
    id: str
    order_id: str
    order: Optional[OrderRequestSummary] = None
    requested_by_id: str
    requested_by: Optional[UserSummary] = None
    observations: Optional[str] = None
    status: EditRequestStatus
    reviewed_by_id: Optional[str] = None
    reviewed_by: Optional[UserSummary] = None
    reviewed_at: Optional[datetime] = None
    review_notes: Optional[str] = None
    expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Autorización de OG

class CreateExpenseAuthRequest(CamelModel):
    expense_order_id: UUIDStr
    reason: Optional[str] = None


class ExpenseOrderRequestSummary(CamelModel):
    id: str
    og_number: str
    status: str
    total: float


class ExpenseAuthRequestResponse(CamelModel):
    id: str
    expense_order_id: str
    expense_order: Optional[ExpenseOrderRequestSummary] = None
    requested_by_id: str
    requested_by: Optional[UserSummary] = None
    reason: Optional[str] = None
    status: EditRequestStatus
    reviewed_by_id: Optional[str] = None
    reviewed_by: Optional[UserSummary] = None
    reviewed_at: Optional[datetime] = None
    review_notes: Optional[str] = None
    created_at: Optional[datetime] = None
