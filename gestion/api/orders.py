"""
Orders API endpoints (órdenes de pedido - OP)

- CRUD de órdenes y cambio de estado
- Items (solo DRAFT)
- Pagos (abonos) y comprobantes
- Descuentos
- Historial de auditoría

Author: TM3
Date: 2026-01-14
"""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.orm import Session

from gestion.core.auth import AuthenticatedUser, require_permissions
from gestion.core.database import get_db
from gestion.domain.base import MessageResponse
from gestion.domain.enums import OrderStatus
from gestion.domain.order import (
    AddOrderItemRequest,
    ApplyDiscountRequest,
    AuditLogResponse,
    CreateOrderRequest,
    CreatePaymentRequest,
    DiscountResponse,
    OrderPage,
    OrderResponse,
    PaymentResponse,
    ReceiptUploadResponse,
    UpdateOrderItemRequest,
    UpdateOrderRequest,
    UpdateOrderStatusRequest,
)
from gestion.services.order_service import OrderService


router = APIRouter()


@router.get("", response_model=OrderPage)
async def get_orders(
    status: Optional[OrderStatus] = Query(None, description="Filtrar por estado"),
    client_id: Optional[str] = Query(None, alias="clientId"),
    order_date_from: Optional[datetime] = Query(None, alias="orderDateFrom"),
    order_date_to: Optional[datetime] = Query(None, alias="orderDateTo"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_orders")),
):
    """
    Listar órdenes con filtros y paginación

    Returns:
        {"data": [...], "meta": {"total", "page", "limit", "totalPages"}}
    """
    return OrderService(db).find_all(
        status=status,
        client_id=client_id,
        order_date_from=order_date_from,
        order_date_to=order_date_to,
        page=page,
        limit=limit,
    )


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_orders")),
):
    return OrderService(db).find_one(order_id)


@router.post("", response_model=OrderResponse, status_code=201)
async def create_order(
    data: CreateOrderRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("create_orders")),
):
    return OrderService(db).create(data, user.id)


@router.put("/{order_id}", response_model=OrderResponse)
async def update_order(
    order_id: str,
    data: UpdateOrderRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("update_orders")),
):
    """
    Actualizar una orden

    Fuera de DRAFT solo pueden editar los administradores o usuarios con
    un permiso de edición aprobado y vigente.
    """
    return OrderService(db).update(order_id, data, user)


@router.put("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str,
    data: UpdateOrderStatusRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("approve_orders")),
):
    return OrderService(db).update_status(order_id, data.status, user)


@router.delete("/{order_id}", response_model=MessageResponse)
async def delete_order(
    order_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("delete_orders")),
):
    return OrderService(db).remove(order_id, user.id)


@router.get("/{order_id}/audit-logs", response_model=List[AuditLogResponse])
async def get_order_audit_logs(
    order_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_orders")),
):
    return OrderService(db).find_audit_logs(order_id)


# ============================================================================
# Items
# ============================================================================

@router.post("/{order_id}/items", response_model=OrderResponse, status_code=201)
async def add_order_item(
    order_id: str,
    data: AddOrderItemRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("update_orders")),
):
    return OrderService(db).add_item(order_id, data)


@router.put("/{order_id}/items/{item_id}", response_model=OrderResponse)
async def update_order_item(
    order_id: str,
    item_id: str,
    data: UpdateOrderItemRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("update_orders")),
):
    return OrderService(db).update_item(order_id, item_id, data)


@router.delete("/{order_id}/items/{item_id}", response_model=OrderResponse)
async def delete_order_item(
    order_id: str,
    item_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("update_orders")),
):
    return OrderService(db).remove_item(order_id, item_id)


# ============================================================================
# Payments
# ============================================================================

@router.get("/{order_id}/payments", response_model=List[PaymentResponse])
async def get_order_payments(
    order_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_orders")),
):
    return OrderService(db).find_payments(order_id)


@router.post("/{order_id}/payments", response_model=PaymentResponse, status_code=201)
async def add_order_payment(
    order_id: str,
    data: CreatePaymentRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("update_orders")),
):
    """Registrar un abono; no puede superar el saldo pendiente"""
    return OrderService(db).add_payment(order_id, data, user.id)


@router.post("/{order_id}/payments/{payment_id}/receipt", response_model=ReceiptUploadResponse)
async def upload_payment_receipt(
    order_id: str,
    payment_id: str,
    file: UploadFile = File(..., description="Comprobante de pago"),
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("update_orders")),
):
    """Sube (o reemplaza) el comprobante de un pago"""
    contents = await file.read()
    return OrderService(db).upload_payment_receipt(
        order_id,
        payment_id,
        contents,
        file.filename or "comprobante",
        file.content_type or "application/octet-stream",
        user.id,
    )


@router.delete("/{order_id}/payments/{payment_id}/receipt", response_model=MessageResponse)
async def delete_payment_receipt(
    order_id: str,
    payment_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("update_orders")),
):
    return OrderService(db).delete_payment_receipt(order_id, payment_id)


# ============================================================================
# Discounts
# ============================================================================

@router.get("/{order_id}/discounts", response_model=List[DiscountResponse])
async def get_order_discounts(
    order_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_orders")),
):
    return OrderService(db).find_discounts(order_id)


@router.post("/{order_id}/discounts", response_model=DiscountResponse, status_code=201)
async def apply_order_discount(
    order_id: str,
    data: ApplyDiscountRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("update_orders")),
):
    return OrderService(db).apply_discount(order_id, data, user.id)


@router.delete("/{order_id}/discounts/{discount_id}", response_model=OrderResponse)
async def remove_order_discount(
    order_id: str,
    discount_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("update_orders")),
):
    return OrderService(db).remove_discount(order_id, discount_id)
