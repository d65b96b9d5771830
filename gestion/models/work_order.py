"""
Órdenes de trabajo (OT)
"""
from sqlalchemy import Column, String, DateTime, ForeignKey, Text, Numeric, JSON
from sqlalchemy.orm import relationship

from gestion.core.database import Base, new_uuid, utcnow


class WorkOrder(Base):
    __tablename__ = "work_orders"

    id = Column(String(36), primary_key=True, default=new_uuid)
    work_order_number = Column(String(30), nullable=False, unique=True, index=True)

    order_id = Column(String(36), ForeignKey("orders.id"), nullable=False, index=True)
    advisor_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    designer_id = Column(String(36), ForeignKey("users.id"))

    file_name = Column(String(30))
    observations = Column(Text)
    status = Column(String(20), nullable=False, default="DRAFT", index=True)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    order = relationship("Order", lazy="joined")
    advisor = relationship("User", foreign_keys=[advisor_id])
    designer = relationship("User", foreign_keys=[designer_id])
    items = relationship("WorkOrderItem", back_populates="work_order", cascade="all, delete-orphan")


class WorkOrderItem(Base):
    __tablename__ = "work_order_items"

    id = Column(String(36), primary_key=True, default=new_uuid)
    work_order_id = Column(String(36), ForeignKey("work_orders.id", ondelete="CASCADE"), nullable=False, index=True)
    order_item_id = Column(String(36), ForeignKey("order_items.id"), nullable=False)

    product_description = Column(Text, nullable=False)
    observations = Column(Text)
    production_area_ids = Column(JSON, default=list)

    created_at = Column(DateTime, default=utcnow)

    work_order = relationship("WorkOrder", back_populates="items")
    order_item = relationship("OrderItem")
    supplies = relationship("WorkOrderItemSupply", back_populates="item", cascade="all, delete-orphan")


class WorkOrderItemSupply(Base):
    """
    Insumo asignado a un item de OT
    """
    __tablename__ = "work_order_item_supplies"

    id = Column(String(36), primary_key=True, default=new_uuid)
    work_order_item_id = Column(
        String(36), ForeignKey("work_order_items.id", ondelete="CASCADE"), nullable=False, index=True
    )
    supply_id = Column(String(36), nullable=False)
    quantity = Column(Numeric(12, 2))
    notes = Column(Text)

    item = relationship("WorkOrderItem", back_populates="supplies")
