"""
Order Repository - Data Access Layer for Orders

Órdenes de pedido, consecutivos y auditoría.

Author: TM3
Date: 2026-01-14
"""
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from gestion.models import AuditLog, Consecutive, Order, OrderDiscount, OrderItem, Payment
from gestion.repositories.base_repository import BaseRepository


class OrderRepository(BaseRepository[Order]):
    """
    Repository for Order data access
    """

    def __init__(self, db: Session):
        super().__init__(db, Order)

    def find_with_filters(
        self,
        status: Optional[str] = None,
        client_id: Optional[str] = None,
        order_date_from: Optional[datetime] = None,
        order_date_to: Optional[datetime] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[Order], int]:
        """
        Órdenes paginadas, más recientes primero

        Returns:
            Tuple of (orders, total_count)
        """
        query = self.db.query(Order)
        if status:
            query = query.filter(Order.status == status)
        if client_id:
            query = query.filter(Order.client_id == client_id)
        if order_date_from:
            query = query.filter(Order.order_date >= order_date_from)
        if order_date_to:
            query = query.filter(Order.order_date <= order_date_to)

        total = query.count()
        orders = (
            query.order_by(Order.order_date.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return orders, total

    def find_item(self, order_id: str, item_id: str) -> Optional[OrderItem]:
        return (
            self.db.query(OrderItem)
            .filter(OrderItem.id == item_id, OrderItem.order_id == order_id)
            .first()
        )

    def find_payment(self, order_id: str, payment_id: str) -> Optional[Payment]:
        return (
            self.db.query(Payment)
            .filter(Payment.id == payment_id, Payment.order_id == order_id)
            .first()
        )

    def find_payments(self, order_id: str) -> List[Payment]:
        return (
            self.db.query(Payment)
            .filter(Payment.order_id == order_id)
            .order_by(Payment.payment_date.desc())
            .all()
        )

    def find_first_payment(self, order_id: str) -> Optional[Payment]:
        return (
            self.db.query(Payment)
            .filter(Payment.order_id == order_id)
            .order_by(Payment.created_at.asc())
            .first()
        )

    def find_discount(self, order_id: str, discount_id: str) -> Optional[OrderDiscount]:
        return (
            self.db.query(OrderDiscount)
            .filter(OrderDiscount.id == discount_id, OrderDiscount.order_id == order_id)
            .first()
        )

    def find_discounts(self, order_id: str) -> List[OrderDiscount]:
        return (
            self.db.query(OrderDiscount)
            .filter(OrderDiscount.order_id == order_id)
            .order_by(OrderDiscount.applied_at.desc())
            .all()
        )


class ConsecutiveRepository(BaseRepository[Consecutive]):

    def __init__(self, db: Session):
        super().__init__(db, Consecutive)

    def find_for_update(self, type_: str) -> Optional[Consecutive]:
        # SQLite ignora FOR UPDATE; PostgreSQL bloquea la fila hasta el commit
        return (
            self.db.query(Consecutive)
            .filter(Consecutive.type == type_)
            .with_for_update()
            .first()
        )


class AuditLogRepository(BaseRepository[AuditLog]):

    def __init__(self, db: Session):
        super().__init__(db, AuditLog)

    def find_by_entity(self, entity_type: str, entity_id: str) -> List[AuditLog]:
        return (
            self.db.query(AuditLog)
            .filter(AuditLog.entity_type == entity_type, AuditLog.entity_id == entity_id)
            .order_by(AuditLog.created_at.asc())
            .all()
        )

    def find_with_filters(
        self,
        user_id: Optional[str] = None,
        action: Optional[str] = None,
        entity_type: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        page: int = 1,
        limit: int = 50,
    ) -> Tuple[List[AuditLog], int]:
        """
        Registros paginados, más recientes primero

        Returns:
            Tuple of (logs, total_count)
        """
        query = self.db.query(AuditLog)
        if user_id:
            query = query.filter(AuditLog.user_id == user_id)
        if action:
            query = query.filter(AuditLog.action == action)
        if entity_type:
            query = query.filter(AuditLog.entity_type == entity_type)
        if start_date:
            query = query.filter(AuditLog.created_at >= start_date)
        if end_date:
            query = query.filter(AuditLog.created_at <= end_date)

        total = query.count()
        logs = (
            query.order_by(AuditLog.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return logs, total

    def find_latest_by_user(self, user_id: str, limit: int = 100) -> List[AuditLog]:
        return (
            self.db.query(AuditLog)
            .filter(AuditLog.user_id == user_id)
            .order_by(AuditLog.created_at.desc())
            .limit(limit)
            .all()
        )

    def find_latest_by_record(self, entity_id: str, limit: int = 100) -> List[AuditLog]:
        return (
            self.db.query(AuditLog)
            .filter(AuditLog.entity_id == entity_id)
            .order_by(AuditLog.created_at.desc())
            .limit(limit)
            .all()
        )
