"""
Datos iniciales: permisos, roles, usuarios, departamentos/ciudades y
tipos de gasto por defecto. Es idempotente (se puede correr varias veces).

Usage:
    python -m gestion.seed

Author: TM3
Date: 2026-01-20
"""
import logging
from typing import Dict, List

from sqlalchemy.orm import Session

from gestion.core.auth import hash_password
from gestion.core.database import Base, SessionLocal, engine
from gestion.models import (
    City,
    Department,
    ExpenseSubcategory,
    ExpenseType,
    Permission,
    Role,
    User,
)

logger = logging.getLogger(__name__)


CRUD_RESOURCES = [
    "areas",
    "cargos",
    "clients",
    "commercial_channels",
    "orders",
    "work_orders",
    "expense_orders",
    "expense_types",
    "production_areas",
    "users",
    "roles",
    "permissions",
]

EXTRA_PERMISSIONS = [
    "approve_orders",
    "approve_expense_orders",
    "upload_files",
    "read_files",
    "delete_files",
    "manage_permissions",
    "read_audit_logs",
]

PERMISSIONS = [
    f"{action}_{resource}"
    for resource in CRUD_RESOURCES
    for action in ("create", "read", "update", "delete")
] + EXTRA_PERMISSIONS

MANAGER_PERMISSIONS = [p for p in PERMISSIONS if p.startswith("read_")] + [
    "create_clients",
    "update_clients",
    "create_orders",
    "update_orders",
    "approve_orders",
    "create_work_orders",
    "update_work_orders",
    "create_users",
    "update_users",
    "upload_files",
]

USER_PERMISSIONS = [
    "read_areas",
    "read_cargos",
    "read_production_areas",
    "read_users",
    "read_roles",
    "read_clients",
    "create_clients",
    "update_clients",
    "read_commercial_channels",
    "read_orders",
    "create_orders",
    "update_orders",
    "read_work_orders",
    "create_work_orders",
    "update_work_orders",
    "read_expense_types",
    "read_expense_orders",
    "create_expense_orders",
    "update_expense_orders",
    "upload_files",
    "read_files",
]

ROLES = {
    "admin": ("Administrador del sistema", PERMISSIONS),
    "manager": ("Gerente", MANAGER_PERMISSIONS),
    "user": ("Usuario operativo", USER_PERMISSIONS),
}

USERS = [
    ("admin@example.com", "admin123", "Admin", "Sistema", "admin"),
    ("manager@example.com", "manager123", "Manager", "Sistema", "manager"),
    ("user@example.com", "user123", "Usuario", "Sistema", "user"),
]

DEPARTMENTS = [
    ("Cundinamarca", "CUN", ["Bogotá", "Soacha", "Chía", "Zipaquirá", "Facatativá", "Girardot", "Fusagasugá", "Madrid"]),
    ("Antioquia", "ANT", ["Medellín", "Envigado", "Bello", "Itagüí", "Rionegro", "Sabaneta"]),
    ("Valle del Cauca", "VAC", ["Cali", "Buenaventura", "Palmira", "Tuluá", "Buga", "Yumbo"]),
    ("Atlántico", "ATL", ["Barranquilla", "Soledad", "Malambo", "Puerto Colombia"]),
    ("Santander", "SAN", ["Bucaramanga", "Floridablanca", "Girón", "Piedecuesta", "Barrancabermeja"]),
    ("Bolívar", "BOL", ["Cartagena", "Magangué", "Turbaco", "Arjona"]),
    ("Boyacá", "BOY", ["Tunja", "Duitama", "Sogamoso", "Paipa"]),
    ("Tolima", "TOL", ["Ibagué", "Espinal", "Melgar", "Honda"]),
]

EXPENSE_TYPES = {
    "Materiales": ["Materia prima", "Insumos de impresión", "Empaques"],
    "Servicios": ["Servicios públicos", "Mantenimiento", "Servicios profesionales"],
    "Transporte": ["Fletes", "Mensajería", "Combustible"],
    "Administrativos": ["Papelería", "Arriendo", "Otros"],
}


def _seed_permissions(db: Session) -> Dict[str, Permission]:
    existing = {p.name: p for p in db.query(Permission).all()}
    for name in PERMISSIONS:
        if name not in existing:
            existing[name] = Permission(name=name, description=name.replace("_", " ").capitalize())
            db.add(existing[name])
    db.flush()
    return existing


def _seed_roles(db: Session, permissions: Dict[str, Permission]) -> Dict[str, Role]:
    roles = {}
    for name, (description, granted) in ROLES.items():
        role = db.query(Role).filter(Role.name == name).first()
        if role is None:
            role = Role(name=name, description=description)
            db.add(role)
        role.permissions = [permissions[p] for p in granted]
        roles[name] = role
    db.flush()
    return roles


def _seed_users(db: Session, roles: Dict[str, Role]) -> None:
    for email, password, first_name, last_name, role_name in USERS:
        if db.query(User).filter(User.email == email).first():
            continue
        db.add(User(
            email=email,
            password=hash_password(password),
            first_name=first_name,
            last_name=last_name,
            role_id=roles[role_name].id,
        ))
    db.flush()


def _seed_locations(db: Session) -> int:
    created = 0
    for name, code, cities in DEPARTMENTS:
        department = db.query(Department).filter(Department.name == name).first()
        if department is None:
            department = Department(name=name, code=code)
            db.add(department)
            db.flush()

        existing: List[str] = [c.name for c in db.query(City).filter(City.department_id == department.id)]
        for city_name in cities:
            if city_name not in existing:
                db.add(City(name=city_name, department_id=department.id))
                created += 1
    db.flush()
    return created


def _seed_expense_types(db: Session) -> None:
    for name, subcategories in EXPENSE_TYPES.items():
        expense_type = db.query(ExpenseType).filter(ExpenseType.name == name).first()
        if expense_type is None:
            expense_type = ExpenseType(name=name)
            db.add(expense_type)
            db.flush()
            for sub_name in subcategories:
                db.add(ExpenseSubcategory(name=sub_name, expense_type_id=expense_type.id))
    db.flush()


def seed(db: Session) -> None:
    permissions = _seed_permissions(db)
    roles = _seed_roles(db, permissions)
    _seed_users(db, roles)
    cities = _seed_locations(db)
    _seed_expense_types(db)
    db.commit()
    logger.info(f"Seed completed: {len(permissions)} permissions, {len(roles)} roles, {cities} new cities")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        seed(session)
    finally:
        session.close()
