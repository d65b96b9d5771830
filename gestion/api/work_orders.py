"""
Work orders API endpoints (órdenes de trabajo - OT)

Author: TM3
Date: 2026-01-15
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from gestion.core.auth import AuthenticatedUser, require_permissions
from gestion.core.database import get_db
from gestion.domain.enums import WorkOrderStatus
from gestion.domain.work_order import (
    CreateWorkOrderRequest,
    UpdateWorkOrderRequest,
    UpdateWorkOrderStatusRequest,
    WorkOrderPage,
    WorkOrderResponse,
    WorkOrderSupplyInput,
    WorkOrderSupplyResponse,
)
from gestion.services.work_order_service import WorkOrderService


router = APIRouter()


@router.get("", response_model=WorkOrderPage)
async def get_work_orders(
    status: Optional[WorkOrderStatus] = None,
    order_id: Optional[str] = Query(None, alias="orderId"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_work_orders")),
):
    return WorkOrderService(db).find_all(status=status, order_id=order_id, page=page, limit=limit)


@router.get("/{work_order_id}", response_model=WorkOrderResponse)
async def get_work_order(
    work_order_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_work_orders")),
):
    return WorkOrderService(db).find_one(work_order_id)


@router.post("", response_model=WorkOrderResponse, status_code=201)
async def create_work_order(
    data: CreateWorkOrderRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("create_work_orders")),
):
    """Crear una OT a partir de una orden de pedido; el asesor es el usuario actual"""
    return WorkOrderService(db).create(data, user.id)


@router.patch("/{work_order_id}", response_model=WorkOrderResponse)
async def update_work_order(
    work_order_id: str,
    data: UpdateWorkOrderRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("update_work_orders")),
):
    return WorkOrderService(db).update(work_order_id, data)


@router.patch("/{work_order_id}/status", response_model=WorkOrderResponse)
async def update_work_order_status(
    work_order_id: str,
    data: UpdateWorkOrderStatusRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("update_work_orders")),
):
    return WorkOrderService(db).update_status(work_order_id, data.status)


@router.delete("/{work_order_id}", status_code=204)
async def delete_work_order(
    work_order_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("delete_work_orders")),
):
    WorkOrderService(db).remove(work_order_id)


@router.post(
    "/{work_order_id}/items/{item_id}/supplies",
    response_model=WorkOrderSupplyResponse,
    status_code=201,
)
async def add_supply(
    work_order_id: str,
    item_id: str,
    data: WorkOrderSupplyInput,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("update_work_orders")),
):
    return WorkOrderService(db).add_supply(work_order_id, item_id, data)


@router.delete("/{work_order_id}/items/{item_id}/supplies/{supply_id}", status_code=204)
async def remove_supply(
    work_order_id: str,
    item_id: str,
    supply_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("update_work_orders")),
):
    WorkOrderService(db).remove_supply(work_order_id, item_id, supply_id)
