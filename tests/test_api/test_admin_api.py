"""
Integration tests for administration endpoints

users, roles, permissions, production-areas, audit-logs, order-timeline
"""
API = "/api/v1"


def _role_id(client, headers, name):
    roles = client.get(f"{API}/roles", headers=headers).json()
    return next(role["id"] for role in roles if role["name"] == name)


def _permission_ids(client, headers, *names):
    permissions = client.get(f"{API}/permissions", headers=headers).json()
    by_name = {p["name"]: p["id"] for p in permissions}
    return [by_name[name] for name in names]


class TestUsersApi:

    def _create(self, client, headers, **extra):
        payload = {
            "email": "diseno@example.com",
            "password": "secreto123",
            "firstName": "Camilo",
            "lastName": "Torres",
            "roleId": _role_id(client, headers, "user"),
        }
        payload.update(extra)
        return client.post(f"{API}/users", json=payload, headers=headers)

    def test_user_crud(self, client, admin_headers):
        created = self._create(client, admin_headers)
        user_id = created.json()["id"]

        detail = client.get(f"{API}/users/{user_id}", headers=admin_headers)
        updated = client.put(f"{API}/users/{user_id}", json={"isActive": False}, headers=admin_headers)
        listed = client.get(f"{API}/users", headers=admin_headers)
        deleted = client.delete(f"{API}/users/{user_id}", headers=admin_headers)
        missing = client.get(f"{API}/users/{user_id}", headers=admin_headers)

        assert created.status_code == 201
        assert created.json()["role"]["name"] == "user"
        assert "password" not in created.json()
        assert "read_orders" in detail.json()["permissions"]
        assert updated.json()["isActive"] is False
        assert listed.json()[0]["id"] == user_id
        assert deleted.json() == {"message": "User deleted successfully"}
        assert missing.status_code == 404

    def test_created_user_can_log_in(self, client, admin_headers):
        self._create(client, admin_headers)

        response = client.post(
            f"{API}/auth/login", json={"email": "diseno@example.com", "password": "secreto123"}
        )

        assert response.status_code == 200

    def test_validation(self, client, admin_headers):
        short_password = self._create(client, admin_headers, password="123")
        bad_email = self._create(client, admin_headers, email="no-es-email")
        duplicate = self._create(client, admin_headers, email="user@example.com")

        assert short_password.status_code == 422
        assert bad_email.status_code == 422
        assert duplicate.status_code == 400
        assert duplicate.json()["detail"] == "Email already registered"

    def test_manager_can_create_but_not_delete(self, client, admin_headers, manager_headers):
        created = self._create(client, manager_headers)

        deleted = client.delete(f"{API}/users/{created.json()['id']}", headers=manager_headers)

        assert created.status_code == 201
        assert deleted.status_code == 403
        assert deleted.json()["detail"] == "Missing required permissions: delete_users"

    def test_admin_cannot_delete_self(self, client, admin_headers, admin_user):
        response = client.delete(f"{API}/users/{admin_user.id}", headers=admin_headers)

        assert response.status_code == 400


class TestRolesAndPermissionsApi:

    def test_role_crud_and_permissions(self, client, admin_headers):
        read_orders, read_clients = _permission_ids(client, admin_headers, "read_orders", "read_clients")

        created = client.post(
            f"{API}/roles", json={"name": "auditor", "permissionIds": [read_orders]}, headers=admin_headers
        )
        role_id = created.json()["id"]
        added = client.post(
            f"{API}/roles/{role_id}/permissions", json={"permissionIds": [read_clients]}, headers=admin_headers
        )
        removed = client.request(
            "DELETE", f"{API}/roles/{role_id}/permissions",
            json={"permissionIds": [read_orders]}, headers=admin_headers,
        )
        replaced = client.put(
            f"{API}/roles/{role_id}/permissions", json={"permissionIds": [read_orders]}, headers=admin_headers
        )
        deleted = client.delete(f"{API}/roles/{role_id}", headers=admin_headers)

        assert created.status_code == 201
        assert [p["name"] for p in added.json()["permissions"]] == ["read_clients", "read_orders"]
        assert [p["name"] for p in removed.json()["permissions"]] == ["read_clients"]
        assert [p["name"] for p in replaced.json()["permissions"]] == ["read_orders"]
        assert deleted.status_code == 200

    def test_empty_permission_list_is_422(self, client, admin_headers):
        role_id = _role_id(client, admin_headers, "manager")

        response = client.put(f"{API}/roles/{role_id}/permissions", json={"permissionIds": []}, headers=admin_headers)

        assert response.status_code == 422

    def test_role_in_use_cannot_be_deleted(self, client, admin_headers):
        role_id = _role_id(client, admin_headers, "user")

        response = client.delete(f"{API}/roles/{role_id}", headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "Cannot delete role with assigned users"

    def test_user_can_read_roles_but_not_manage_them(self, client, user_headers):
        role_id = _role_id(client, user_headers, "user")

        response = client.put(
            f"{API}/roles/{role_id}/permissions",
            json={"permissionIds": ["00000000-0000-0000-0000-000000000000"]},
            headers=user_headers,
        )

        assert response.status_code == 403
        assert response.json()["detail"] == "Missing required permissions: manage_permissions"

    def test_permission_endpoints(self, client, admin_headers):
        bulk = client.post(
            f"{API}/permissions/bulk",
            json=[{"name": "export_reports"}, {"name": "read_orders"}],
            headers=admin_headers,
        )
        new_id = bulk.json()[0]["permission"]["id"]
        [assigned_id] = _permission_ids(client, admin_headers, "read_orders")

        invalid_name = client.post(f"{API}/permissions", json={"name": "Read-Orders"}, headers=admin_headers)
        renamed = client.put(f"{API}/permissions/{new_id}", json={"description": "Reportes"}, headers=admin_headers)
        blocked = client.delete(f"{API}/permissions/{assigned_id}", headers=admin_headers)
        deleted = client.delete(f"{API}/permissions/{new_id}", headers=admin_headers)

        assert bulk.status_code == 201
        assert [r["success"] for r in bulk.json()] == [True, False]
        assert invalid_name.status_code == 422
        assert renamed.json()["description"] == "Reportes"
        assert blocked.status_code == 400
        assert deleted.json() == {"message": "Permission deleted successfully"}


class TestProductionAreasApi:

    def test_crud(self, client, admin_headers, user_headers):
        created = client.post(f"{API}/production-areas", json={"name": "Acabados"}, headers=admin_headers)
        area_id = created.json()["id"]

        duplicate = client.post(f"{API}/production-areas", json={"name": "acabados"}, headers=admin_headers)
        updated = client.put(
            f"{API}/production-areas/{area_id}", json={"description": "Laminado y troquel"}, headers=admin_headers
        )
        read_by_user = client.get(f"{API}/production-areas/{area_id}", headers=user_headers)
        removed = client.delete(f"{API}/production-areas/{area_id}", headers=admin_headers)
        listed = client.get(f"{API}/production-areas", headers=admin_headers)

        assert created.status_code == 201
        assert created.json()["isActive"] is True
        assert duplicate.status_code == 400
        assert updated.json()["description"] == "Laminado y troquel"
        assert read_by_user.status_code == 200
        assert removed.json() == {"message": f"Área de producción con ID {area_id} eliminada correctamente"}
        assert listed.json() == []

    def test_user_cannot_create(self, client, user_headers):
        response = client.post(f"{API}/production-areas", json={"name": "Corte"}, headers=user_headers)

        assert response.status_code == 403

    def test_unknown_area(self, client, admin_headers):
        response = client.get(f"{API}/production-areas/00000000-0000-0000-0000-000000000000", headers=admin_headers)

        assert response.status_code == 404


class TestAuditLogsApi:

    def test_list_and_filters(self, client, admin_headers, make_order, admin_user):
        order = make_order()
        make_order()

        page = client.get(f"{API}/audit-logs", params={"limit": 1}, headers=admin_headers)
        by_entity = client.get(f"{API}/audit-logs", params={"entityType": "Client"}, headers=admin_headers)
        by_user = client.get(f"{API}/audit-logs/user/{admin_user.id}", headers=admin_headers)
        by_record = client.get(f"{API}/audit-logs/record/{order.id}", headers=admin_headers)

        assert page.json()["meta"] == {"total": 2, "page": 1, "limit": 1, "totalPages": 2}
        assert page.json()["data"][0]["user"]["email"] == "admin@example.com"
        assert by_entity.json()["meta"]["total"] == 0
        assert len(by_user.json()) == 2
        assert [entry["entityId"] for entry in by_record.json()] == [order.id]

    def test_requires_permission(self, client, user_headers):
        response = client.get(f"{API}/audit-logs", headers=user_headers)

        assert response.status_code == 403
        assert response.json()["detail"] == "Missing required permissions: read_audit_logs"


class TestOrderTimelineApi:

    def test_search_and_tree(self, client, user_headers, make_order):
        order = make_order()

        found = client.get(f"{API}/order-timeline/search", params={"q": "Andinos"}, headers=user_headers)
        tree = client.get(f"{API}/order-timeline/order/{order.id}", headers=user_headers)

        assert found.json()["orders"][0]["entityType"] == "order"
        assert found.json()["workOrders"] == []
        body = tree.json()
        assert body["rootId"] == body["focusedId"] == order.id
        assert body["nodes"][0]["detailPath"] == f"/orders/{order.id}"
        assert body["edges"] == []

    def test_unknown_entity_type_is_422(self, client, user_headers, make_order):
        order = make_order()

        response = client.get(f"{API}/order-timeline/quote/{order.id}", headers=user_headers)

        assert response.status_code == 422

    def test_missing_document_is_404(self, client, user_headers):
        response = client.get(
            f"{API}/order-timeline/expense-order/00000000-0000-0000-0000-000000000000", headers=user_headers
        )

        assert response.status_code == 404
