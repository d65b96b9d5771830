"""
Modelos relacionados con órdenes de pedido (OP)
"""
from decimal import Decimal

from sqlalchemy import Column, Integer, String, DateTime, Text, Numeric, ForeignKey, JSON
from sqlalchemy.orm import relationship

from gestion.core.database import Base, new_uuid, utcnow


class Consecutive(Base):
    """
    Contador por tipo de documento (OP, OT, GAS, ...), reiniciado cada año
    """
    __tablename__ = "consecutives"

    id = Column(String(36), primary_key=True, default=new_uuid)
    type = Column(String(30), nullable=False, unique=True)
    prefix = Column(String(10), nullable=False)
    year = Column(Integer, nullable=False)
    last_number = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class Order(Base):
    """
    Orden de pedido
    """
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=new_uuid)

    # Identificación
    order_number = Column(String(30), nullable=False, unique=True, index=True)

    # Relaciones
    client_id = Column(String(36), ForeignKey("clients.id"), nullable=False, index=True)
    commercial_channel_id = Column(String(36), ForeignKey("commercial_channels.id"), index=True)
    created_by_id = Column(String(36), ForeignKey("users.id"), nullable=False)

    # Fechas
    order_date = Column(DateTime, nullable=False, default=utcnow, index=True)
    delivery_date = Column(DateTime)

    # Cambios de fecha de entrega
    previous_delivery_date = Column(DateTime)
    delivery_date_reason = Column(Text)
    delivery_date_changed_at = Column(DateTime)
    delivery_date_changed_by = Column(String(36))

    # Estado
    status = Column(String(30), nullable=False, default="DRAFT", index=True)

    # Montos
    subtotal = Column(Numeric(14, 2), nullable=False, default=Decimal("0"))
    tax_rate = Column(Numeric(5, 4), nullable=False, default=Decimal("0.19"))
    tax = Column(Numeric(14, 2), nullable=False, default=Decimal("0"))
    discount_amount = Column(Numeric(14, 2), nullable=False, default=Decimal("0"))
    total = Column(Numeric(14, 2), nullable=False, default=Decimal("0"))
    paid_amount = Column(Numeric(14, 2), nullable=False, default=Decimal("0"))
    balance = Column(Numeric(14, 2), nullable=False, default=Decimal("0"))

    notes = Column(Text)

    # Metadata
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    client = relationship("Client", back_populates="orders", lazy="joined")
    commercial_channel = relationship("CommercialChannel", back_populates="orders", lazy="joined")
    created_by = relationship("User")
    items = relationship(
        "OrderItem", back_populates="order", cascade="all, delete-orphan", order_by="OrderItem.sort_order"
    )
    payments = relationship(
        "Payment", back_populates="order", cascade="all, delete-orphan", order_by="Payment.created_at"
    )
    discounts = relationship(
        "OrderDiscount", back_populates="order", cascade="all, delete-orphan", order_by="OrderDiscount.applied_at"
    )


class OrderItem(Base):
    """
    Items de cada orden
    """
    __tablename__ = "order_items"

    id = Column(String(36), primary_key=True, default=new_uuid)
    order_id = Column(String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(String(36))

    description = Column(Text, nullable=False)
    quantity = Column(Numeric(12, 2), nullable=False)
    unit_price = Column(Numeric(14, 2), nullable=False)
    total = Column(Numeric(14, 2), nullable=False)
    specifications = Column(JSON)
    production_area_ids = Column(JSON, default=list)
    sort_order = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime, default=utcnow)

    order = relationship("Order", back_populates="items")


class Payment(Base):
    """
    Pagos (abonos) registrados sobre una orden
    """
    __tablename__ = "payments"

    id = Column(String(36), primary_key=True, default=new_uuid)
    order_id = Column(String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)

    amount = Column(Numeric(14, 2), nullable=False)
    payment_method = Column(String(20), nullable=False)
    payment_date = Column(DateTime, nullable=False, default=utcnow)
    reference = Column(String(100))
    notes = Column(Text)
    receipt_file_id = Column(String(36), ForeignKey("files.id"))
    received_by_id = Column(String(36), ForeignKey("users.id"))

    created_at = Column(DateTime, default=utcnow)

    order = relationship("Order", back_populates="payments")
    received_by = relationship("User")


class OrderDiscount(Base):
    __tablename__ = "order_discounts"

    id = Column(String(36), primary_key=True, default=new_uuid)
    order_id = Column(String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)

    amount = Column(Numeric(14, 2), nullable=False)
    reason = Column(Text, nullable=False)
    applied_by_id = Column(String(36), ForeignKey("users.id"))
    applied_at = Column(DateTime, default=utcnow)

    order = relationship("Order", back_populates="discounts")
    applied_by = relationship("User")


class AuditLog(Base):
    """
    Auditoría de cambios (quién, qué y cuándo)
    """
    __tablename__ = "audit_logs"

    id = Column(String(36), primary_key=True, default=new_uuid)
    entity_type = Column(String(50), nullable=False, index=True)
    entity_id = Column(String(36), nullable=False, index=True)

    # Qué cambió
    action = Column(String(20), nullable=False)  # CREATE, UPDATE, DELETE
    old_values = Column(JSON)
    new_values = Column(JSON)

    # Quién y cuándo
    user_id = Column(String(36), index=True)
    created_at = Column(DateTime, default=utcnow, index=True)
