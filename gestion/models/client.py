"""
Modelos de clientes, ubicaciones y canales comerciales
"""
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship

from gestion.core.database import Base, new_uuid, utcnow


class Department(Base):
    __tablename__ = "departments"

    id = Column(String(36), primary_key=True, default=new_uuid)
    name = Column(String(100), nullable=False, unique=True, index=True)
    code = Column(String(10))

    cities = relationship("City", back_populates="department", order_by="City.name")


class City(Base):
    __tablename__ = "cities"

    id = Column(String(36), primary_key=True, default=new_uuid)
    name = Column(String(100), nullable=False, index=True)
    code = Column(String(10))
    department_id = Column(String(36), ForeignKey("departments.id"), nullable=False, index=True)

    department = relationship("Department", back_populates="cities")


class Client(Base):
    """
    Clientes (personas naturales o empresas)
    """
    __tablename__ = "clients"

    id = Column(String(36), primary_key=True, default=new_uuid)

    # Identificación
    name = Column(String(200), nullable=False, index=True)
    person_type = Column(String(20), nullable=False, default="NATURAL")
    nit = Column(String(20))
    cedula = Column(String(15))

    # Contacto
    manager = Column(String(200))
    encargado = Column(String(200))
    email = Column(String(255), nullable=False, unique=True, index=True)
    phone = Column(String(20))
    landline_phone = Column(String(20))
    address = Column(String(300))

    # Ubicación
    department_id = Column(String(36), ForeignKey("departments.id"), nullable=False, index=True)
    city_id = Column(String(36), ForeignKey("cities.id"), nullable=False, index=True)

    special_condition = Column(String(500))
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    # Metadata
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    department = relationship("Department", lazy="joined")
    city = relationship("City", lazy="joined")
    orders = relationship("Order", back_populates="client")


class CommercialChannel(Base):
    __tablename__ = "commercial_channels"

    id = Column(String(36), primary_key=True, default=new_uuid)
    name = Column(String(100), nullable=False, unique=True, index=True)
    description = Column(Text)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    orders = relationship("Order", back_populates="commercial_channel")
