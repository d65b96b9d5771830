"""
Order Timeline Service

Arma el árbol OP -> OT -> OG a partir de cualquiera de sus documentos y
ofrece la búsqueda por número o nombre de cliente.
"""
import logging
from decimal import Decimal
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from gestion.domain.enums import TimelineEntityType, WorkOrderStatus
from gestion.domain.timeline import TimelineSearchItem, TimelineSearchResult, TimelineTree
from gestion.models import ExpenseOrder, Order, User, WorkOrder
from gestion.repositories import (
    ExpenseOrderRepository,
    OrderRepository,
    TimelineRepository,
    WorkOrderRepository,
)

logger = logging.getLogger(__name__)

NO_CLIENT = "Sin cliente"

WORK_ORDER_TERMINAL_STATUSES = (WorkOrderStatus.COMPLETED.value, WorkOrderStatus.CANCELLED.value)


def display_name(user: Optional[User]) -> Optional[str]:
    if user is None:
        return None
    parts = [part.strip() for part in (user.first_name, user.last_name) if part and part.strip()]
    return " ".join(parts) or None


def _amount(value) -> Optional[float]:
    return float(value) if value is not None else None


def _expense_total(expense_order: ExpenseOrder) -> Optional[float]:
    total = sum((Decimal(str(item.total)) for item in expense_order.items), Decimal("0"))
    return float(total) if total else None


class OrderTimelineService:

    def __init__(self, db: Session):
        self.db = db
        self.repository = TimelineRepository(db)
        self.orders = OrderRepository(db)
        self.work_orders = WorkOrderRepository(db)
        self.expense_orders = ExpenseOrderRepository(db)

    def get_tree(self, entity_type: TimelineEntityType, entity_id: str) -> TimelineTree:
        """
        Árbol completo de la OP a la que pertenece el documento.

        Una OG sin OT no tiene OP: se devuelve un árbol de un solo nodo.
        """
        if entity_type == TimelineEntityType.ORDER:
            order = self.orders.get_by_id(entity_id)
            if not order:
                raise HTTPException(status_code=404, detail=f"Orden con id {entity_id} no encontrada")
            return self._order_tree(order, focused_id=order.id)

        if entity_type == TimelineEntityType.WORK_ORDER:
            work_order = self.work_orders.get_by_id(entity_id)
            if not work_order:
                raise HTTPException(status_code=404, detail=f"OT con id {entity_id} no encontrada")
            return self._order_tree(work_order.order, focused_id=work_order.id)

        expense_order = self.expense_orders.get_by_id(entity_id)
        if not expense_order:
            raise HTTPException(status_code=404, detail=f"OG con id {entity_id} no encontrada")
        if expense_order.work_order is None:
            node = self._expense_node(expense_order, NO_CLIENT)
            return TimelineTree(nodes=[node], edges=[], root_id=expense_order.id, focused_id=expense_order.id)
        return self._order_tree(expense_order.work_order.order, focused_id=expense_order.id)

    def search(self, term: str, limit: int = 20) -> TimelineSearchResult:
        term = (term or "").strip()
        result = TimelineSearchResult()
        if not term:
            return result

        result.orders = [
            TimelineSearchItem(
                id=order.id,
                type="OP",
                number=order.order_number,
                status=order.status,
                client_name=order.client.name,
                entity_type=TimelineEntityType.ORDER,
            )
            for order in self.repository.search_orders(term, limit)
        ]
        result.work_orders = [
            TimelineSearchItem(
                id=work_order.id,
                type="OT",
                number=work_order.work_order_number,
                status=work_order.status,
                client_name=work_order.order.client.name,
                entity_type=TimelineEntityType.WORK_ORDER,
            )
            for work_order in self.repository.search_work_orders(term, limit)
        ]
        result.expense_orders = [
            TimelineSearchItem(
                id=expense_order.id,
                type="OG",
                number=expense_order.og_number,
                status=expense_order.status,
                client_name=self._expense_client(expense_order),
                entity_type=TimelineEntityType.EXPENSE_ORDER,
            )
            for expense_order in self.repository.search_expense_orders(term, limit)
        ]
        return result

    def _order_tree(self, order: Order, focused_id: str) -> TimelineTree:
        client_name = order.client.name
        nodes = [{
            "id": order.id,
            "type": "OP",
            "number": order.order_number,
            "status": order.status,
            "client_name": client_name,
            "total": _amount(order.total),
            "detail_path": f"/orders/{order.id}",
            "created_at": order.created_at,
            "created_by_name": display_name(order.created_by),
            "pending_balance": _amount(order.balance),
        }]
        edges = []

        for work_order in self.repository.find_work_orders(order.id):
            nodes.append(self._work_order_node(work_order, client_name))
            edges.append({"source": order.id, "target": work_order.id})

            for expense_order in self.repository.find_expense_orders(work_order.id):
                nodes.append(self._expense_node(expense_order, client_name))
                edges.append({"source": work_order.id, "target": expense_order.id})

        logger.debug(f"Timeline for {order.order_number}: {len(nodes)} node(s)")
        return TimelineTree(nodes=nodes, edges=edges, root_id=order.id, focused_id=focused_id)

    @staticmethod
    def _work_order_node(work_order: WorkOrder, client_name: str) -> dict:
        ended = work_order.status in WORK_ORDER_TERMINAL_STATUSES
        return {
            "id": work_order.id,
            "type": "OT",
            "number": work_order.work_order_number,
            "status": work_order.status,
            "client_name": client_name,
            "total": None,
            "detail_path": f"/work-orders/{work_order.id}",
            "created_at": work_order.created_at,
            "ended_at": work_order.updated_at if ended else None,
            "advisor_name": display_name(work_order.advisor),
            "designer_name": display_name(work_order.designer),
        }

    @staticmethod
    def _expense_node(expense_order: ExpenseOrder, client_name: str) -> dict:
        return {
            "id": expense_order.id,
            "type": "OG",
            "number": expense_order.og_number,
            "status": expense_order.status,
            "client_name": client_name,
            "total": _expense_total(expense_order),
            "detail_path": f"/expense-orders/{expense_order.id}",
            "created_at": expense_order.created_at,
        }

    @staticmethod
    def _expense_client(expense_order: ExpenseOrder) -> str:
        work_order = expense_order.work_order
        if work_order is None or work_order.order is None or work_order.order.client is None:
            return NO_CLIENT
        return work_order.order.client.name
