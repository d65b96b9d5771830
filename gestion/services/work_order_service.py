"""
Work Order Service
Órdenes de trabajo (OT) generadas a partir de una orden de pedido.
"""
import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from gestion.domain.base import page_of
from gestion.domain.enums import ConsecutiveType, OrderStatus, WorkOrderStatus
from gestion.domain.work_order import (
    CreateWorkOrderRequest,
    UpdateWorkOrderRequest,
    WorkOrderSupplyInput,
)
from gestion.models import WorkOrder, WorkOrderItem, WorkOrderItemSupply
from gestion.repositories import OrderRepository, WorkOrderRepository
from gestion.services.consecutive_service import ConsecutiveService
from gestion.services.production_area_service import ProductionAreaService

logger = logging.getLogger(__name__)


ALLOWED_TRANSITIONS = {
    WorkOrderStatus.DRAFT: [WorkOrderStatus.CONFIRMED, WorkOrderStatus.CANCELLED],
    WorkOrderStatus.CONFIRMED: [WorkOrderStatus.IN_PRODUCTION, WorkOrderStatus.CANCELLED],
    WorkOrderStatus.IN_PRODUCTION: [WorkOrderStatus.COMPLETED, WorkOrderStatus.CANCELLED],
    WorkOrderStatus.COMPLETED: [],
    WorkOrderStatus.CANCELLED: [],
}

EDITABLE_STATUSES = (
    WorkOrderStatus.DRAFT.value,
    WorkOrderStatus.CONFIRMED.value,
    WorkOrderStatus.IN_PRODUCTION.value,
)

# Estados de la OP que admiten crear una OT
ORDER_STATUSES_FOR_WORK_ORDER = (
    OrderStatus.CONFIRMED.value,
    OrderStatus.IN_PRODUCTION.value,
    OrderStatus.READY.value,
)


def _build_supply(data: WorkOrderSupplyInput) -> WorkOrderItemSupply:
    return WorkOrderItemSupply(supply_id=data.supply_id, quantity=data.quantity, notes=data.notes)


class WorkOrderService:

    def __init__(self, db: Session):
        self.db = db
        self.repository = WorkOrderRepository(db)
        self.orders = OrderRepository(db)
        self.consecutives = ConsecutiveService(db)
        self.production_areas = ProductionAreaService(db)

    def create(self, data: CreateWorkOrderRequest, advisor_id: str) -> WorkOrder:
        order = self.orders.get_by_id(data.order_id)
        if not order:
            raise HTTPException(status_code=404, detail=f"Orden con id {data.order_id} no encontrada")

        if order.status not in ORDER_STATUSES_FOR_WORK_ORDER:
            raise HTTPException(
                status_code=400,
                detail=(
                    "Solo se pueden crear OTs para órdenes en estado CONFIRMED, IN_PRODUCTION o READY. "
                    f"Estado actual: {order.status}"
                )
            )

        existing = self.repository.find_active_by_order(order.id)
        if existing:
            raise HTTPException(
                status_code=400,
                detail=(
                    f"La orden {order.order_number} ya tiene una OT activa ({existing.work_order_number}). "
                    "Solo se permite una OT activa por orden de pedido."
                )
            )

        order_items = {item.id: item for item in order.items}
        for item in data.items:
            if item.order_item_id not in order_items:
                raise HTTPException(
                    status_code=400,
                    detail=f"El item con orderItemId {item.order_item_id} no pertenece a la orden {order.id}"
                )
        self._check_production_areas(data.items)

        work_order = WorkOrder(
            work_order_number=self.consecutives.generate_number(ConsecutiveType.WORK_ORDER),
            order_id=order.id,
            advisor_id=advisor_id,
            designer_id=data.designer_id,
            file_name=data.file_name,
            observations=data.observations,
            status=WorkOrderStatus.DRAFT.value,
        )
        for item in data.items:
            work_order.items.append(WorkOrderItem(
                order_item_id=item.order_item_id,
                product_description=item.product_description or order_items[item.order_item_id].description,
                observations=item.observations,
                production_area_ids=list(item.production_area_ids or []),
                supplies=[_build_supply(s) for s in item.supplies or []],
            ))

        self.repository.create(work_order)
        self.db.commit()
        self.db.refresh(work_order)
        logger.info(f"Work order created: {work_order.work_order_number} for order {order.order_number}")
        return work_order

    def find_all(
        self,
        status: Optional[WorkOrderStatus] = None,
        order_id: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> dict:
        work_orders, total = self.repository.find_with_filters(
            status=status.value if status else None,
            order_id=order_id,
            page=page,
            limit=limit,
        )
        return page_of(work_orders, total, page, limit)

    def find_one(self, work_order_id: str) -> WorkOrder:
        work_order = self.repository.get_by_id(work_order_id)
        if not work_order:
            raise HTTPException(status_code=404, detail=f"OT con id {work_order_id} no encontrada")
        return work_order

    def update(self, work_order_id: str, data: UpdateWorkOrderRequest) -> WorkOrder:
        work_order = self.find_one(work_order_id)
        if work_order.status not in EDITABLE_STATUSES:
            raise HTTPException(
                status_code=400,
                detail=(
                    f"No se puede modificar una OT en estado {work_order.status}. "
                    "Solo se permite editar en estados DRAFT, CONFIRMED o IN_PRODUCTION."
                )
            )

        self._check_production_areas(data.items or [])

        values = data.model_dump(exclude_unset=True, exclude={"items"})
        self.repository.update(work_order, values)

        items = {item.id: item for item in work_order.items}
        for item_data in data.items or []:
            item = items.get(item_data.id)
            if item is None:
                continue
            if item_data.product_description is not None:
                item.product_description = item_data.product_description
            if "observations" in item_data.model_fields_set:
                item.observations = item_data.observations
            if item_data.production_area_ids is not None:
                item.production_area_ids = list(item_data.production_area_ids)
            if item_data.supplies is not None:
                item.supplies = [_build_supply(s) for s in item_data.supplies]

        self.db.commit()
        self.db.refresh(work_order)
        return work_order

    def update_status(self, work_order_id: str, status: WorkOrderStatus) -> WorkOrder:
        work_order = self.find_one(work_order_id)
        current = WorkOrderStatus(work_order.status)
        allowed = ALLOWED_TRANSITIONS[current]

        if status not in allowed:
            allowed_text = ", ".join(s.value for s in allowed) or "ninguna"
            raise HTTPException(
                status_code=400,
                detail=(
                    f"No se puede cambiar el estado de {current.value} a {status.value}. "
                    f"Transiciones permitidas: {allowed_text}"
                )
            )

        work_order.status = status.value
        self.db.commit()
        self.db.refresh(work_order)
        logger.info(f"Work order {work_order.work_order_number}: {current.value} -> {status.value}")
        return work_order

    def add_supply(self, work_order_id: str, item_id: str, data: WorkOrderSupplyInput) -> WorkOrderItemSupply:
        item = self._get_item(work_order_id, item_id)
        supply = _build_supply(data)
        item.supplies.append(supply)
        self.db.commit()
        self.db.refresh(supply)
        return supply

    def remove_supply(self, work_order_id: str, item_id: str, supply_id: str) -> dict:
        item = self._get_item(work_order_id, item_id)
        supply = self.repository.find_supply(item.id, supply_id)
        if not supply:
            raise HTTPException(
                status_code=404,
                detail=f"Insumo con id {supply_id} no encontrado en el item {item_id}"
            )
        item.supplies.remove(supply)
        self.db.commit()
        return {"message": "Insumo eliminado correctamente"}

    def remove(self, work_order_id: str) -> dict:
        work_order = self.find_one(work_order_id)
        if work_order.status != WorkOrderStatus.DRAFT.value:
            raise HTTPException(
                status_code=400,
                detail=f"Solo se pueden eliminar OTs en estado DRAFT. Estado actual: {work_order.status}"
            )

        self.repository.delete(work_order)
        self.db.commit()
        logger.info(f"Work order deleted: {work_order.work_order_number}")
        return {"message": "OT eliminada correctamente"}

    def _get_item(self, work_order_id: str, item_id: str) -> WorkOrderItem:
        self.find_one(work_order_id)
        item = self.repository.find_item(work_order_id, item_id)
        if not item:
            raise HTTPException(
                status_code=404,
                detail=f"Item con id {item_id} no encontrado en la OT {work_order_id}"
            )
        return item

    def _check_production_areas(self, items) -> None:
        self.production_areas.ensure_exist(
            area_id for item in items for area_id in (item.production_area_ids or [])
        )
