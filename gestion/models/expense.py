"""
Órdenes de gasto (OG), tipos de gasto y subcategorías
"""
from decimal import Decimal

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Text, Numeric, JSON
from sqlalchemy.orm import relationship

from gestion.core.database import Base, new_uuid, utcnow


class ExpenseType(Base):
    __tablename__ = "expense_types"

    id = Column(String(36), primary_key=True, default=new_uuid)
    name = Column(String(100), nullable=False, unique=True, index=True)
    description = Column(Text)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    subcategories = relationship("ExpenseSubcategory", back_populates="expense_type", order_by="ExpenseSubcategory.name")


class ExpenseSubcategory(Base):
    __tablename__ = "expense_subcategories"

    id = Column(String(36), primary_key=True, default=new_uuid)
    name = Column(String(100), nullable=False, index=True)
    description = Column(Text)
    expense_type_id = Column(String(36), ForeignKey("expense_types.id"), nullable=False, index=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    expense_type = relationship("ExpenseType", back_populates="subcategories")


class ExpenseOrder(Base):
    __tablename__ = "expense_orders"

    id = Column(String(36), primary_key=True, default=new_uuid)
    og_number = Column(String(30), nullable=False, unique=True, index=True)

    # Clasificación
    expense_type_id = Column(String(36), ForeignKey("expense_types.id"), nullable=False)
    expense_subcategory_id = Column(String(36), ForeignKey("expense_subcategories.id"), nullable=False)
    work_order_id = Column(String(36), ForeignKey("work_orders.id"), index=True)

    # Responsables
    authorized_to_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    responsible_id = Column(String(36), ForeignKey("users.id"))
    created_by_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    authorized_by_id = Column(String(36), ForeignKey("users.id"))
    authorized_at = Column(DateTime)

    observations = Column(Text)
    area_or_machine = Column(String(200))
    status = Column(String(20), nullable=False, default="DRAFT", index=True)
    total = Column(Numeric(14, 2), nullable=False, default=Decimal("0"))

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    expense_type = relationship("ExpenseType", lazy="joined")
    expense_subcategory = relationship("ExpenseSubcategory", lazy="joined")
    work_order = relationship("WorkOrder")
    authorized_to = relationship("User", foreign_keys=[authorized_to_id])
    responsible = relationship("User", foreign_keys=[responsible_id])
    created_by = relationship("User", foreign_keys=[created_by_id])
    authorized_by = relationship("User", foreign_keys=[authorized_by_id])
    items = relationship(
        "ExpenseOrderItem",
        back_populates="expense_order",
        cascade="all, delete-orphan",
        order_by="ExpenseOrderItem.sort_order",
    )


class ExpenseOrderItem(Base):
    __tablename__ = "expense_order_items"

    id = Column(String(36), primary_key=True, default=new_uuid)
    expense_order_id = Column(
        String(36), ForeignKey("expense_orders.id", ondelete="CASCADE"), nullable=False, index=True
    )

    quantity = Column(Numeric(12, 2), nullable=False)
    name = Column(String(200), nullable=False)
    description = Column(Text)
    supplier_id = Column(String(36))
    unit_price = Column(Numeric(14, 2), nullable=False)
    total = Column(Numeric(14, 2), nullable=False)
    payment_method = Column(String(20), nullable=False)
    receipt_file_id = Column(String(36), ForeignKey("files.id"))
    production_area_ids = Column(JSON, default=list)
    sort_order = Column(Integer, nullable=False, default=0)

    expense_order = relationship("ExpenseOrder", back_populates="items")
