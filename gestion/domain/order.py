"""
Order Domain Models

Órdenes de pedido (OP): items, pagos (abonos), descuentos y filtros.
Los montos entran como Decimal y salen como float en las respuestas.

Author: TM3
Date: 2026-01-14
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import Field, model_validator

from gestion.domain.auth import UserSummary
from gestion.domain.base import CamelModel, PageMeta, UUIDStr
from gestion.domain.enums import OrderStatus, PaymentMethod
from gestion.domain.storage import FileResponse


# =============================================================================
# Requests
# =============================================================================

class CreateOrderItem(CamelModel):
    """
    Item de una orden. `id` solo se envía al actualizar una orden existente
    """
    id: Optional[UUIDStr] = Field(None, description="ID del item existente (solo en actualización)")
    product_id: Optional[UUIDStr] = None
    description: str = Field(..., min_length=1, description="Descripción del producto o servicio")
    quantity: Decimal = Field(..., gt=0)
    unit_price: Decimal = Field(..., ge=0)
    specifications: Optional[Dict[str, Any]] = None
    production_area_ids: List[UUIDStr] = Field(default_factory=list)


class InitialPayment(CamelModel):
    amount: Decimal = Field(..., ge=0)
    payment_method: PaymentMethod
    reference: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_amount(self):
        # CREDIT admite abono inicial en cero
        if self.payment_method != PaymentMethod.CREDIT and self.amount <= 0:
            raise ValueError("El monto debe ser mayor a cero para este método de pago")
        return self


class CreateOrderRequest(CamelModel):
    client_id: UUIDStr
    commercial_channel_id: Optional[UUIDStr] = None
    delivery_date: Optional[datetime] = None
    notes: Optional[str] = None
    items: List[CreateOrderItem]
    initial_payment: Optional[InitialPayment] = None


class UpdateOrderRequest(CamelModel):
    client_id: Optional[UUIDStr] = None
    commercial_channel_id: Optional[UUIDStr] = None
    delivery_date: Optional[datetime] = None
    delivery_date_reason: Optional[str] = None
    notes: Optional[str] = None
    items: Optional[List[CreateOrderItem]] = None
    initial_payment: Optional[InitialPayment] = None


class UpdateOrderStatusRequest(CamelModel):
    status: OrderStatus = Field(..., description="Nuevo estado de la orden")


class AddOrderItemRequest(CamelModel):
    product_id: Optional[UUIDStr] = None
    description: str = Field(..., min_length=1)
    quantity: Decimal = Field(..., gt=0)
    unit_price: Decimal = Field(..., ge=0)
    specifications: Optional[Dict[str, Any]] = None
    production_area_ids: List[UUIDStr] = Field(default_factory=list)


class UpdateOrderItemRequest(CamelModel):
    description: Optional[str] = Field(None, min_length=1)
    quantity: Optional[Decimal] = Field(None, gt=0)
    unit_price: Optional[Decimal] = Field(None, ge=0)
    specifications: Optional[Dict[str, Any]] = None
    production_area_ids: Optional[List[UUIDStr]] = None


class CreatePaymentRequest(CamelModel):
    amount: Decimal = Field(..., gt=0)
    payment_method: PaymentMethod
    payment_date: Optional[datetime] = None
    reference: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None
    receipt_file_id: Optional[UUIDStr] = None


class ApplyDiscountRequest(CamelModel):
    amount: Decimal = Field(..., gt=0, description="Monto del descuento")
    reason: str = Field(..., min_length=1, description="Razón del descuento")


# =============================================================================
# Responses
# =============================================================================

class OrderItemResponse(CamelModel):
    id: str
    product_id: Optional[str] = None
    description: str
    quantity: float
    unit_price: float
    total: float
    specifications: Optional[Dict[str, Any]] = None
    production_area_ids: List[str] = Field(default_factory=list)
    sort_order: int


class PaymentResponse(CamelModel):
    id: str
    order_id: str
    amount: float
    payment_method: PaymentMethod
    payment_date: datetime
    reference: Optional[str] = None
    notes: Optional[str] = None
    receipt_file_id: Optional[str] = None
    received_by_id: Optional[str] = None
    received_by: Optional[UserSummary] = None
    created_at: Optional[datetime] = None


class DiscountResponse(CamelModel):
    id: str
    order_id: str
    amount: float
    reason: str
    applied_by_id: Optional[str] = None
    applied_by: Optional[UserSummary] = None
    applied_at: Optional[datetime] = None


class OrderClientSummary(CamelModel):
    id: str
    name: str
    email: str
    special_condition: Optional[str] = None


class OrderResponse(CamelModel):
    id: str
    order_number: str
    client_id: str
    client: Optional[OrderClientSummary] = None
    commercial_channel_id: Optional[str] = None
    created_by_id: str
    order_date: datetime
    delivery_date: Optional[datetime] = None
    previous_delivery_date: Optional[datetime] = None
    delivery_date_reason: Optional[str] = None
    delivery_date_changed_at: Optional[datetime] = None
    delivery_date_changed_by: Optional[str] = None
    status: OrderStatus
    subtotal: float
    tax_rate: float
    tax: float
    discount_amount: float
    total: float
    paid_amount: float
    balance: float
    notes: Optional[str] = None
    items: List[OrderItemResponse] = Field(default_factory=list)
    payments: List[PaymentResponse] = Field(default_factory=list)
    discounts: List[DiscountResponse] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OrderPage(CamelModel):
    data: List[OrderResponse]
    meta: PageMeta


class AuditLogResponse(CamelModel):
    id: str
    entity_type: str
    entity_id: str
    action: str
    old_values: Optional[Dict[str, Any]] = None
    new_values: Optional[Dict[str, Any]] = None
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None


class ReceiptUploadResponse(CamelModel):
    message: str
    file: FileResponse
