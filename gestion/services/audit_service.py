"""
Audit Service
Registro de cambios sobre órdenes (CREATE, UPDATE, DELETE) y consultas
sobre el historial completo.
"""
import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from gestion.domain.audit import AuditLogEntry
from gestion.domain.auth import UserSummary
from gestion.domain.base import page_of
from gestion.models import AuditLog, Order, User
from gestion.repositories import AuditLogRepository

logger = logging.getLogger(__name__)


ORDER_AUDIT_FIELDS = (
    "order_number",
    "client_id",
    "commercial_channel_id",
    "status",
    "delivery_date",
    "subtotal",
    "tax",
    "discount_amount",
    "total",
    "paid_amount",
    "balance",
    "notes",
)


def _jsonable(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def snapshot_order(order: Optional[Order]) -> Optional[Dict[str, Any]]:
    """Copia serializable de los campos auditados de una orden"""
    if order is None:
        return None
    data = {field: _jsonable(getattr(order, field)) for field in ORDER_AUDIT_FIELDS}
    data["items"] = [
        {
            "id": item.id,
            "description": item.description,
            "quantity": _jsonable(item.quantity),
            "unit_price": _jsonable(item.unit_price),
            "total": _jsonable(item.total),
        }
        for item in order.items
    ]
    return data


class AuditService:

    def __init__(self, db: Session):
        self.db = db
        self.repository = AuditLogRepository(db)

    def log_order_change(
        self,
        action: str,
        order_id: str,
        old_values: Optional[Dict[str, Any]],
        new_values: Optional[Dict[str, Any]],
        user_id: Optional[str],
    ) -> AuditLog:
        entry = AuditLog(
            entity_type="Order",
            entity_id=order_id,
            action=action,
            old_values=old_values,
            new_values=new_values,
            user_id=user_id,
        )
        logger.debug(f"Audit {action} on Order {order_id} by {user_id}")
        return self.repository.create(entry)

    def find_by_order(self, order_id: str) -> List[AuditLog]:
        return self.repository.find_by_entity("Order", order_id)

    def find_all(
        self,
        user_id: Optional[str] = None,
        action: Optional[str] = None,
        entity_type: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        page: int = 1,
        limit: int = 50,
    ) -> dict:
        logs, total = self.repository.find_with_filters(
            user_id=user_id,
            action=action,
            entity_type=entity_type,
            start_date=start_date,
            end_date=end_date,
            page=page,
            limit=limit,
        )
        return page_of(self._with_users(logs), total, page, limit)

    def find_by_user(self, user_id: str) -> List[AuditLogEntry]:
        return self._with_users(self.repository.find_latest_by_user(user_id))

    def find_by_record(self, record_id: str) -> List[AuditLogEntry]:
        return self._with_users(self.repository.find_latest_by_record(record_id))

    def _with_users(self, logs: List[AuditLog]) -> List[AuditLogEntry]:
        # user_id no es FK: el usuario pudo haber sido eliminado
        user_ids = {log.user_id for log in logs if log.user_id}
        users = {}
        if user_ids:
            users = {u.id: u for u in self.db.query(User).filter(User.id.in_(user_ids)).all()}

        entries = []
        for log in logs:
            entry = AuditLogEntry.model_validate(log)
            user = users.get(log.user_id)
            if user is not None:
                entry.user = UserSummary.model_validate(user)
            entries.append(entry)
        return entries
