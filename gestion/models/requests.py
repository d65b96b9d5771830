"""
Solicitudes de autorización: edición de orden, cambio de estado y
autorización de OG
"""
from sqlalchemy import Column, String, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship

from gestion.core.database import Base, new_uuid, utcnow


class OrderEditRequest(Base):
    """
    Permiso temporal (5 minutos tras aprobación) para editar una orden bloqueada
    """
    __tablename__ = "order_edit_requests"

    id = Column(String(36), primary_key=True, default=new_uuid)
    order_id = Column(String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    requested_by_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    observations = Column(Text)

    status = Column(String(20), nullable=False, default="PENDING", index=True)
    reviewed_by_id = Column(String(36), ForeignKey("users.id"))
    reviewed_at = Column(DateTime)
    review_notes = Column(Text)
    expires_at = Column(DateTime, index=True)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    order = relationship("Order")
    requested_by = relationship("User", foreign_keys=[requested_by_id])
    reviewed_by = relationship("User", foreign_keys=[reviewed_by_id])


class OrderStatusChangeRequest(Base):
    __tablename__ = "order_status_change_requests"

    id = Column(String(36), primary_key=True, default=new_uuid)
    order_id = Column(String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    requested_by_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    current_status = Column(String(30), nullable=False)
    requested_status = Column(String(30), nullable=False)
    reason = Column(Text)

    status = Column(String(20), nullable=False, default="PENDING", index=True)
    reviewed_by_id = Column(String(36), ForeignKey("users.id"))
    reviewed_at = Column(DateTime)
    review_notes = Column(Text)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    order = relationship("Order")
    requested_by = relationship("User", foreign_keys=[requested_by_id])
    reviewed_by = relationship("User", foreign_keys=[reviewed_by_id])


class ExpenseOrderAuthRequest(Base):
    __tablename__ = "expense_order_auth_requests"

    id = Column(String(36), primary_key=True, default=new_uuid)
    expense_order_id = Column(
        String(36), ForeignKey("expense_orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    requested_by_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    reason = Column(Text)

    status = Column(String(20), nullable=False, default="PENDING", index=True)
    reviewed_by_id = Column(String(36), ForeignKey("users.id"))
    reviewed_at = Column(DateTime)
    review_notes = Column(Text)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    expense_order = relationship("ExpenseOrder")
    requested_by = relationship("User", foreign_keys=[requested_by_id])
    reviewed_by = relationship("User", foreign_keys=[reviewed_by_id])
