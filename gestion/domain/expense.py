"""
Expense Domain Models

Tipos de gasto, subcategorías y órdenes de gasto (OG).

Author: TM3
Date: 2026-01-16
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from gestion.domain.auth import UserSummary
from gestion.domain.base import CamelModel, PageMeta, UUIDStr
from gestion.domain.enums import ExpenseOrderStatus, PaymentMethod


# =============================================================================
# Expense types / subcategories
# =============================================================================

class CreateExpenseTypeRequest(CamelModel):
    name: str = Field(..., min_length=2, max_length=100)
    description: Optional[str] = None


class UpdateExpenseTypeRequest(CamelModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = None
    is_active: Optional[bool] = None


class CreateExpenseSubcategoryRequest(CamelModel):
    name: str = Field(..., min_length=2, max_length=100)
    description: Optional[str] = None
    expense_type_id: UUIDStr


class UpdateExpenseSubcategoryRequest(CamelModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = None
    expense_type_id: Optional[UUIDStr] = None
    is_active: Optional[bool] = None


class ExpenseSubcategoryResponse(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    expense_type_id: str
    is_active: bool


class ExpenseTypeResponse(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    is_active: bool
    subcategories: List[ExpenseSubcategoryResponse] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ExpenseTypeSummary(CamelModel):
    id: str
    name: str


# =============================================================================
# Expense orders
# =============================================================================

class ExpenseOrderItemInput(CamelModel):
    quantity: Decimal = Field(..., gt=0)
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    supplier_id: Optional[UUIDStr] = None
    unit_price: Decimal = Field(..., gt=0)
    payment_method: PaymentMethod
    production_area_ids: Optional[List[UUIDStr]] = None
    receipt_file_id: Optional[UUIDStr] = None


class UpdateExpenseOrderItemInput(CamelModel):
    quantity: Optional[Decimal] = Field(None, gt=0)
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    supplier_id: Optional[UUIDStr] = None
    unit_price: Optional[Decimal] = Field(None, gt=0)
    payment_method: Optional[PaymentMethod] = None
    production_area_ids: Optional[List[UUIDStr]] = None
    receipt_file_id: Optional[UUIDStr] = None


class CreateExpenseOrderRequest(CamelModel):
    expense_type_id: UUIDStr
    expense_subcategory_id: UUIDStr
    work_order_id: Optional[UUIDStr] = None
    authorized_to_id: UUIDStr
    responsible_id: Optional[UUIDStr] = None
    observations: Optional[str] = None
    area_or_machine: Optional[str] = Field(None, max_length=200)
    items: List[ExpenseOrderItemInput] = Field(..., min_length=1)


class UpdateExpenseOrderRequest(CamelModel):
    expense_type_id: Optional[UUIDStr] = None
    expense_subcategory_id: Optional[UUIDStr] = None
    work_order_id: Optional[UUIDStr] = None
    authorized_to_id: Optional[UUIDStr] = None
    responsible_id: Optional[UUIDStr] = None
    observations: Optional[str] = None
    area_or_machine: Optional[str] = Field(None, max_length=200)
    items: Optional[List[UpdateExpenseOrderItemInput]] = None


class AddExpenseOrderItemsRequest(CamelModel):
    items: List[ExpenseOrderItemInput] = Field(..., min_length=1)


class UpdateExpenseOrderStatusRequest(CamelModel):
    status: ExpenseOrderStatus


class ExpenseOrderItemResponse(CamelModel):
    id: str
    quantity: float
    name: str
    description: Optional[str] = None
    supplier_id: Optional[str] = None
    unit_price: float
    total: float
    payment_method: PaymentMethod
    receipt_file_id: Optional[str] = None
    production_area_ids: List[str] = Field(default_factory=list)
    sort_order: int


class ExpenseOrderResponse(CamelModel):
    id: str
    og_number: str
    expense_type_id: str
    expense_type: Optional[ExpenseTypeSummary] = None
    expense_subcategory_id: str
    expense_subcategory: Optional[ExpenseTypeSummary] = None
    work_order_id: Optional[str] = None
    authorized_to_id: str
    authorized_to: Optional[UserSummary] = None
    responsible_id: Optional[str] = None
    created_by_id: str
    authorized_by_id: Optional[str] = None
    authorized_by: Optional[UserSummary] = None
    authorized_at: Optional[datetime] = None
    observations: Optional[str] = None
    area_or_machine: Optional[str] = None
    status: ExpenseOrderStatus
    total: float
    items: List[ExpenseOrderItemResponse] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ExpenseOrderPage(CamelModel):
    data: List[ExpenseOrderResponse]
    meta: PageMeta
