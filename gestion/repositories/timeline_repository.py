"""
Timeline Repository

Consultas de lectura que cruzan OP, OT y OG.
"""
from typing import List

from sqlalchemy.orm import Session

from gestion.models import Client, ExpenseOrder, Order, WorkOrder


class TimelineRepository:

    def __init__(self, db: Session):
        self.db = db

    def find_work_orders(self, order_id: str) -> List[WorkOrder]:
        return (
            self.db.query(WorkOrder)
            .filter(WorkOrder.order_id == order_id)
            .order_by(WorkOrder.created_at.asc())
            .all()
        )

    def find_expense_orders(self, work_order_id: str) -> List[ExpenseOrder]:
        return (
            self.db.query(ExpenseOrder)
            .filter(ExpenseOrder.work_order_id == work_order_id)
            .order_by(ExpenseOrder.created_at.asc())
            .all()
        )

    def search_orders(self, term: str, limit: int) -> List[Order]:
        pattern = f"%{term}%"
        return (
            self.db.query(Order)
            .join(Client, Order.client_id == Client.id)
            .filter(Order.order_number.ilike(pattern) | Client.name.ilike(pattern))
            .order_by(Order.created_at.desc())
            .limit(limit)
            .all()
        )

    def search_work_orders(self, term: str, limit: int) -> List[WorkOrder]:
        pattern = f"%{term}%"
        return (
            self.db.query(WorkOrder)
            .join(Order, WorkOrder.order_id == Order.id)
            .join(Client, Order.client_id == Client.id)
            .filter(WorkOrder.work_order_number.ilike(pattern) | Client.name.ilike(pattern))
            .order_by(WorkOrder.created_at.desc())
            .limit(limit)
            .all()
        )

    def search_expense_orders(self, term: str, limit: int) -> List[ExpenseOrder]:
        pattern = f"%{term}%"
        return (
            self.db.query(ExpenseOrder)
            .outerjoin(WorkOrder, ExpenseOrder.work_order_id == WorkOrder.id)
            .outerjoin(Order, WorkOrder.order_id == Order.id)
            .outerjoin(Client, Order.client_id == Client.id)
            .filter(ExpenseOrder.og_number.ilike(pattern) | Client.name.ilike(pattern))
            .order_by(ExpenseOrder.created_at.desc())
            .limit(limit)
            .all()
        )
