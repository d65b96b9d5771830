"""
Work Order (OT) Domain Models

Author: TM3
Date: 2026-01-15
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from gestion.domain.auth import UserSummary
from gestion.domain.base import CamelModel, PageMeta, UUIDStr
from gestion.domain.enums import OrderStatus, WorkOrderStatus


class WorkOrderSupplyInput(CamelModel):
    supply_id: UUIDStr
    quantity: Optional[Decimal] = Field(None, ge=0)
    notes: Optional[str] = None


class WorkOrderItemInput(CamelModel):
    order_item_id: UUIDStr
    product_description: Optional[str] = None
    observations: Optional[str] = None
    production_area_ids: Optional[List[UUIDStr]] = None
    supplies: Optional[List[WorkOrderSupplyInput]] = None


class CreateWorkOrderRequest(CamelModel):
    order_id: UUIDStr = Field(..., description="Orden de pedido asociada")
    designer_id: Optional[UUIDStr] = None
    file_name: Optional[str] = Field(None, max_length=30)
    observations: Optional[str] = None
    items: List[WorkOrderItemInput] = Field(..., min_length=1)


class UpdateWorkOrderItemInput(CamelModel):
    id: UUIDStr
    product_description: Optional[str] = None
    observations: Optional[str] = None
    production_area_ids: Optional[List[UUIDStr]] = None
    supplies: Optional[List[WorkOrderSupplyInput]] = None


class UpdateWorkOrderRequest(CamelModel):
    designer_id: Optional[UUIDStr] = None
    file_name: Optional[str] = Field(None, max_length=30)
    observations: Optional[str] = None
    items: Optional[List[UpdateWorkOrderItemInput]] = None


class UpdateWorkOrderStatusRequest(CamelModel):
    status: WorkOrderStatus


class WorkOrderSupplyResponse(CamelModel):
    id: str
    supply_id: str
    quantity: Optional[float] = None
    notes: Optional[str] = None


class WorkOrderItemResponse(CamelModel):
    id: str
    order_item_id: str
    product_description: str
    observations: Optional[str] = None
    production_area_ids: List[str] = Field(default_factory=list)
    supplies: List[WorkOrderSupplyResponse] = Field(default_factory=list)


class WorkOrderOrderSummary(CamelModel):
    id: str
    order_number: str
    status: OrderStatus
    client_id: str


class WorkOrderResponse(CamelModel):
    id: str
    work_order_number: str
    order_id: str
    order: Optional[WorkOrderOrderSummary] = None
    advisor_id: str
    advisor: Optional[UserSummary] = None
    designer_id: Optional[str] = None
    designer: Optional[UserSummary] = None
    file_name: Optional[str] = None
    observations: Optional[str] = None
    status: WorkOrderStatus
    items: List[WorkOrderItemResponse] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class WorkOrderPage(CamelModel):
    data: List[WorkOrderResponse]
    meta: PageMeta
