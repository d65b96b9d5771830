"""
Unit tests for administration services

Usuarios, roles, permisos, áreas de producción y consultas de auditoría.
"""
import uuid
from datetime import timedelta

import pytest
from fastapi import HTTPException

from gestion.core.auth import verify_password
from gestion.core.database import utcnow
from gestion.domain.organization import (
    CreateAreaRequest,
    CreateCargoRequest,
    CreateProductionAreaRequest,
    UpdateCargoRequest,
    UpdateProductionAreaRequest,
)
from gestion.domain.user import (
    CreatePermissionRequest,
    CreateRoleRequest,
    CreateUserRequest,
    UpdatePermissionRequest,
    UpdateRoleRequest,
    UpdateUserRequest,
)
from gestion.models import Permission, Role, User
from gestion.seed import PERMISSIONS
from gestion.services.area_service import AreaService
from gestion.services.audit_service import AuditService
from gestion.services.cargo_service import CargoService
from gestion.services.permission_service import PermissionService
from gestion.services.production_area_service import ProductionAreaService
from gestion.services.role_service import RoleService
from gestion.services.user_service import UserService


@pytest.fixture
def user_role(db) -> Role:
    return db.query(Role).filter(Role.name == "user").one()


@pytest.fixture
def cargo(db):
    area = AreaService(db).create(CreateAreaRequest(name="Ventas"))
    return CargoService(db).create(CreateCargoRequest(name="Asesor comercial", areaId=area.id))


@pytest.fixture
def new_user(db, user_role):
    return UserService(db).create(CreateUserRequest(
        email="operario@example.com",
        password="secreto123",
        firstName="Laura",
        lastName="Ríos",
        roleId=user_role.id,
    ))


class TestUserService:

    def test_create_hashes_password(self, db, new_user):
        assert new_user.password != "secreto123"
        assert verify_password("secreto123", new_user.password)
        assert new_user.role.name == "user"
        assert new_user.is_active is True

    def test_duplicate_email_ignores_case(self, db, new_user, user_role):
        with pytest.raises(HTTPException) as exc:
            UserService(db).create(CreateUserRequest(
                email="OPERARIO@example.com",
                password="otroSecreto",
                firstName="Otra",
                lastName="Persona",
                roleId=user_role.id,
            ))

        assert exc.value.status_code == 400
        assert exc.value.detail == "Email already registered"

    def test_unknown_role(self, db):
        with pytest.raises(HTTPException) as exc:
            UserService(db).create(CreateUserRequest(
                email="sinrol@example.com",
                password="secreto123",
                firstName="Sin",
                lastName="Rol",
                roleId=str(uuid.uuid4()),
            ))

        assert exc.value.detail == "Invalid role ID"

    def test_inactive_cargo_cannot_be_assigned(self, db, new_user, cargo):
        CargoService(db).update(cargo.id, UpdateCargoRequest(isActive=False))

        with pytest.raises(HTTPException) as exc:
            UserService(db).update(new_user.id, UpdateUserRequest(cargoId=cargo.id))

        assert exc.value.detail == "Cannot assign an inactive cargo"

    def test_assign_and_clear_cargo(self, db, new_user, cargo):
        assigned = UserService(db).update(new_user.id, UpdateUserRequest(cargoId=cargo.id))
        assert assigned.cargo_id == cargo.id

        cleared = UserService(db).update(new_user.id, UpdateUserRequest(cargoId=None))
        assert cleared.cargo_id is None

    def test_email_taken_by_another_user(self, db, new_user):
        with pytest.raises(HTTPException) as exc:
            UserService(db).update(new_user.id, UpdateUserRequest(email="admin@example.com"))

        assert exc.value.detail == "Email already in use"

    def test_password_change_revokes_refresh_token(self, db, new_user):
        new_user.refresh_token = "hash-anterior"
        db.commit()

        updated = UserService(db).update(new_user.id, UpdateUserRequest(password="nuevaClave1"))

        assert verify_password("nuevaClave1", updated.password)
        assert updated.refresh_token is None

    def test_detail_lists_role_permissions(self, db, new_user):
        detail = UserService(db).find_one(new_user.id)

        assert "read_orders" in detail.permissions
        assert "delete_users" not in detail.permissions

    def test_cannot_delete_self(self, db, admin_user):
        with pytest.raises(HTTPException) as exc:
            UserService(db).remove(admin_user.id, admin_user.id)

        assert exc.value.status_code == 400

    def test_remove(self, db, new_user, admin_user):
        result = UserService(db).remove(new_user.id, admin_user.id)

        assert result == {"message": "User deleted successfully"}
        assert db.get(User, new_user.id) is None


class TestRoleService:

    def test_seeded_roles(self, db):
        roles = {role.name: role for role in RoleService(db).find_all()}

        assert set(roles) == {"admin", "manager", "user"}
        assert len(roles["admin"].permissions) == len(PERMISSIONS)
        assert roles["user"].users_count == 1

    def test_create_with_permissions(self, db):
        read_orders = db.query(Permission).filter(Permission.name == "read_orders").one()

        role = RoleService(db).create(CreateRoleRequest(name="auditor", permissionIds=[read_orders.id]))

        assert [p.name for p in role.permissions] == ["read_orders"]
        assert role.users_count == 0

    def test_duplicate_name(self, db):
        with pytest.raises(HTTPException) as exc:
            RoleService(db).create(CreateRoleRequest(name="manager"))

        assert exc.value.status_code == 400

    def test_invalid_permission_ids(self, db):
        with pytest.raises(HTTPException) as exc:
            RoleService(db).create(CreateRoleRequest(name="fantasma", permissionIds=[str(uuid.uuid4())]))

        assert exc.value.detail == "One or more permission IDs are invalid"

    def test_add_set_and_remove_permissions(self, db):
        # Arrange
        service = RoleService(db)
        role = service.create(CreateRoleRequest(name="bodega"))
        by_name = {p.name: p.id for p in db.query(Permission).all()}

        # Act
        added = service.add_permissions(role.id, [by_name["read_orders"], by_name["read_clients"]])
        again = service.add_permissions(role.id, [by_name["read_orders"]])
        replaced = service.set_permissions(role.id, [by_name["read_files"]])
        emptied = service.remove_permissions(role.id, [by_name["read_files"]])

        # Assert
        assert [p.name for p in added.permissions] == ["read_clients", "read_orders"]
        assert len(again.permissions) == 2
        assert [p.name for p in replaced.permissions] == ["read_files"]
        assert emptied.permissions == []

    def test_role_with_users_cannot_be_removed(self, db, user_role):
        with pytest.raises(HTTPException) as exc:
            RoleService(db).remove(user_role.id)

        assert exc.value.detail == "Cannot delete role with assigned users"

    def test_update_and_remove(self, db):
        service = RoleService(db)
        role = service.create(CreateRoleRequest(name="temporal"))

        updated = service.update(role.id, UpdateRoleRequest(description="Rol de prueba"))
        service.remove(role.id)

        assert updated.description == "Rol de prueba"
        assert db.get(Role, role.id) is None


class TestPermissionService:

    def test_bulk_reports_each_permission(self, db):
        results = PermissionService(db).create_bulk([
            CreatePermissionRequest(name="export_reports"),
            CreatePermissionRequest(name="read_orders"),
        ])

        assert [r.success for r in results] == [True, False]
        assert results[0].permission.name == "export_reports"
        assert results[1].error == 'Permission "read_orders" already exists'

    def test_assigned_permission_cannot_be_removed(self, db):
        read_orders = db.query(Permission).filter(Permission.name == "read_orders").one()

        with pytest.raises(HTTPException) as exc:
            PermissionService(db).remove(read_orders.id)

        assert exc.value.detail == "Cannot delete permission assigned to roles. Remove from roles first."

    def test_update_and_remove_unassigned(self, db):
        service = PermissionService(db)
        permission = service.create(CreatePermissionRequest(name="export_reports"))

        renamed = service.update(permission.id, UpdatePermissionRequest(name="export_sales_reports"))
        service.remove(permission.id)

        assert renamed.name == "export_sales_reports"
        with pytest.raises(HTTPException) as exc:
            service.find_one(permission.id)
        assert exc.value.status_code == 404


class TestProductionAreaService:

    def test_unique_name(self, db, production_area):
        with pytest.raises(HTTPException) as exc:
            ProductionAreaService(db).create(CreateProductionAreaRequest(name="impresión DIGITAL"))

        assert exc.value.detail == 'Ya existe un área de producción con el nombre "impresión DIGITAL"'

    def test_remove_is_soft_delete(self, db, production_area):
        service = ProductionAreaService(db)

        result = service.remove(production_area.id)

        assert result == {"message": f"Área de producción con ID {production_area.id} eliminada correctamente"}
        assert service.find_all() == []
        assert [a.id for a in service.find_all(include_inactive=True)] == [production_area.id]

    def test_update(self, db, production_area):
        updated = ProductionAreaService(db).update(
            production_area.id, UpdateProductionAreaRequest(description="Plotter y láser")
        )

        assert updated.description == "Plotter y láser"

    def test_ensure_exist(self, db, production_area):
        service = ProductionAreaService(db)
        missing = str(uuid.uuid4())

        service.ensure_exist([production_area.id, production_area.id])
        service.ensure_exist([])
        with pytest.raises(HTTPException) as exc:
            service.ensure_exist([production_area.id, missing])

        assert exc.value.status_code == 400
        assert exc.value.detail == f"Áreas de producción no encontradas: {missing}"

    def test_inactive_area_still_resolves(self, db, production_area):
        ProductionAreaService(db).remove(production_area.id)

        ProductionAreaService(db).ensure_exist([production_area.id])


class TestAuditQueries:

    def test_filters_and_pagination(self, db, make_order, admin_user):
        for _ in range(3):
            make_order()

        page = AuditService(db).find_all(action="CREATE", page=1, limit=2)
        deletes = AuditService(db).find_all(action="DELETE")

        assert page["meta"] == {"total": 3, "page": 1, "limit": 2, "total_pages": 2}
        assert len(page["data"]) == 2
        assert page["data"][0].user.email == admin_user.email
        assert deletes["meta"]["total"] == 0

    def test_date_range(self, db, make_order):
        make_order()
        now = utcnow()

        in_range = AuditService(db).find_all(start_date=now - timedelta(hours=1), end_date=now + timedelta(hours=1))
        future = AuditService(db).find_all(start_date=now + timedelta(days=1))

        assert in_range["meta"]["total"] == 1
        assert future["meta"]["total"] == 0

    def test_by_user_and_record(self, db, make_order, admin_user, regular_user):
        order = make_order()

        by_admin = AuditService(db).find_by_user(admin_user.id)
        by_user = AuditService(db).find_by_user(regular_user.id)
        by_record = AuditService(db).find_by_record(order.id)

        assert [entry.entity_id for entry in by_admin] == [order.id]
        assert by_user == []
        assert by_record[0].action == "CREATE"

    def test_unknown_user_leaves_entry_without_user(self, db, make_order):
        order = make_order()
        log = AuditService(db).repository.find_latest_by_record(order.id)[0]
        log.user_id = str(uuid.uuid4())
        db.commit()

        assert AuditService(db).find_by_record(order.id)[0].user is None
