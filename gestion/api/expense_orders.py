"""
Expense orders API endpoints (órdenes de gasto - OG)

Author: TM3
Date: 2026-01-16
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from gestion.core.auth import AuthenticatedUser, require_permissions
from gestion.core.database import get_db
from gestion.domain.enums import ExpenseOrderStatus
from gestion.domain.expense import (
    AddExpenseOrderItemsRequest,
    CreateExpenseOrderRequest,
    ExpenseOrderPage,
    ExpenseOrderResponse,
    UpdateExpenseOrderRequest,
    UpdateExpenseOrderStatusRequest,
)
from gestion.services.expense_order_service import ExpenseOrderService


router = APIRouter()


@router.get("", response_model=ExpenseOrderPage)
async def get_expense_orders(
    status: Optional[ExpenseOrderStatus] = None,
    work_order_id: Optional[str] = Query(None, alias="workOrderId"),
    expense_type_id: Optional[str] = Query(None, alias="expenseTypeId"),
    search: Optional[str] = Query(None, description="Buscar por número de OG"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_expense_orders")),
):
    return ExpenseOrderService(db).find_all(
        status=status,
        work_order_id=work_order_id,
        expense_type_id=expense_type_id,
        search=search,
        page=page,
        limit=limit,
    )


@router.get("/{expense_order_id}", response_model=ExpenseOrderResponse)
async def get_expense_order(
    expense_order_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_expense_orders")),
):
    return ExpenseOrderService(db).find_one(expense_order_id)


@router.post("", response_model=ExpenseOrderResponse, status_code=201)
async def create_expense_order(
    data: CreateExpenseOrderRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("create_expense_orders")),
):
    return ExpenseOrderService(db).create(data, user.id)


@router.post("/{expense_order_id}/items", response_model=ExpenseOrderResponse, status_code=201)
async def add_expense_order_items(
    expense_order_id: str,
    data: AddExpenseOrderItemsRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("update_expense_orders")),
):
    return ExpenseOrderService(db).add_items(expense_order_id, data.items)


@router.patch("/{expense_order_id}", response_model=ExpenseOrderResponse)
async def update_expense_order(
    expense_order_id: str,
    data: UpdateExpenseOrderRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("update_expense_orders")),
):
    """Actualizar una OG en DRAFT o CREATED; si se envían ítems, reemplazan a los actuales"""
    return ExpenseOrderService(db).update(expense_order_id, data)


@router.patch("/{expense_order_id}/status", response_model=ExpenseOrderResponse)
async def update_expense_order_status(
    expense_order_id: str,
    data: UpdateExpenseOrderStatusRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("update_expense_orders")),
):
    """
    Cambiar el estado de una OG

    - AUTHORIZED: directo para administradores; el resto necesita una
      solicitud de autorización aprobada
    - PAID: requiere el permiso approve_expense_orders
    """
    return ExpenseOrderService(db).update_status(expense_order_id, data.status, user)


@router.delete("/{expense_order_id}", status_code=204)
async def delete_expense_order(
    expense_order_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("delete_expense_orders")),
):
    ExpenseOrderService(db).remove(expense_order_id)
