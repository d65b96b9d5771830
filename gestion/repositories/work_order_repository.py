"""
Work Order Repository
"""
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from gestion.domain.enums import WorkOrderStatus
from gestion.models import WorkOrder, WorkOrderItem, WorkOrderItemSupply
from gestion.repositories.base_repository import BaseRepository


class WorkOrderRepository(BaseRepository[WorkOrder]):

    def __init__(self, db: Session):
        super().__init__(db, WorkOrder)

    def find_with_filters(
        self,
        status: Optional[str] = None,
        order_id: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[WorkOrder], int]:
        query = self.db.query(WorkOrder)
        if status:
            query = query.filter(WorkOrder.status == status)
        if order_id:
            query = query.filter(WorkOrder.order_id == order_id)

        total = query.count()
        work_orders = (
            query.order_by(WorkOrder.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return work_orders, total

    def find_active_by_order(self, order_id: str) -> Optional[WorkOrder]:
        """OT no cancelada de la orden, si existe"""
        return (
            self.db.query(WorkOrder)
            .filter(
                WorkOrder.order_id == order_id,
                WorkOrder.status != WorkOrderStatus.CANCELLED.value,
            )
            .first()
        )

    def find_item(self, work_order_id: str, item_id: str) -> Optional[WorkOrderItem]:
        return (
            self.db.query(WorkOrderItem)
            .filter(WorkOrderItem.id == item_id, WorkOrderItem.work_order_id == work_order_id)
            .first()
        )

    def find_supply(self, item_id: str, supply_row_id: str) -> Optional[WorkOrderItemSupply]:
        return (
            self.db.query(WorkOrderItemSupply)
            .filter(
                WorkOrderItemSupply.id == supply_row_id,
                WorkOrderItemSupply.work_order_item_id == item_id,
            )
            .first()
        )
