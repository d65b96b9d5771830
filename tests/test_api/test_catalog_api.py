"""
Integration tests for catalog endpoints

areas, cargos, locations, clients, commercial-channels, expense-types
"""
API = "/api/v1"


class TestAreasAndCargosApi:

    def test_area_crud(self, client, admin_headers):
        created = client.post(f"{API}/areas", json={"name": "Impresión digital"}, headers=admin_headers)
        area_id = created.json()["id"]

        updated = client.put(f"{API}/areas/{area_id}", json={"description": "Gran formato"}, headers=admin_headers)
        detail = client.get(f"{API}/areas/{area_id}", headers=admin_headers)
        removed = client.delete(f"{API}/areas/{area_id}", headers=admin_headers)
        listed = client.get(f"{API}/areas", headers=admin_headers)
        listed_all = client.get(f"{API}/areas", params={"includeInactive": "true"}, headers=admin_headers)

        assert created.status_code == 201
        assert updated.json()["description"] == "Gran formato"
        assert detail.json()["usersCount"] == 0
        assert removed.status_code == 200
        assert area_id not in [a["id"] for a in listed.json()]
        assert area_id in [a["id"] for a in listed_all.json()]

    def test_cargos_by_area(self, client, admin_headers):
        area = client.post(f"{API}/areas", json={"name": "Corte"}, headers=admin_headers).json()
        cargo = client.post(
            f"{API}/cargos", json={"name": "Operario de corte", "areaId": area["id"]}, headers=admin_headers
        )

        by_area = client.get(f"{API}/cargos/area/{area['id']}", headers=admin_headers)

        assert cargo.status_code == 201
        assert cargo.json()["area"]["name"] == "Corte"
        assert [c["name"] for c in by_area.json()] == ["Operario de corte"]

    def test_area_name_length_is_validated(self, client, admin_headers):
        too_short = client.post(f"{API}/areas", json={"name": "A"}, headers=admin_headers)
        too_long = client.post(f"{API}/areas", json={"name": "A" * 101}, headers=admin_headers)
        at_limit = client.post(f"{API}/areas", json={"name": "A" * 100}, headers=admin_headers)

        assert too_short.status_code == 422
        assert too_long.status_code == 422
        assert at_limit.status_code == 201


class TestLocationsApi:

    def test_departments_and_cities(self, client, user_headers, bogota):
        department_id, city_id = bogota

        departments = client.get(f"{API}/locations/departments", headers=user_headers)
        cities = client.get(f"{API}/locations/departments/{department_id}/cities", headers=user_headers)
        city = client.get(f"{API}/locations/cities/{city_id}", headers=user_headers)

        assert departments.status_code == 200
        cundinamarca = next(d for d in departments.json() if d["id"] == department_id)
        assert cundinamarca["citiesCount"] == len(cities.json())
        assert city.json()["department"]["name"] == "Cundinamarca"

    def test_unknown_department(self, client, user_headers):
        response = client.get(
            f"{API}/locations/departments/00000000-0000-0000-0000-000000000000", headers=user_headers
        )

        assert response.status_code == 404


class TestClientsApi:

    def test_create_and_get(self, client, admin_headers, client_data):
        created = client.post(f"{API}/clients", json=client_data, headers=admin_headers)
        fetched = client.get(f"{API}/clients/{created.json()['id']}", headers=admin_headers)

        assert created.status_code == 201
        assert fetched.json()["personType"] == "EMPRESA"
        assert fetched.json()["city"]["name"] == "Bogotá"

    def test_invalid_email_is_422(self, client, admin_headers, client_data):
        client_data["email"] = "no-es-un-email"

        response = client.post(f"{API}/clients", json=client_data, headers=admin_headers)

        assert response.status_code == 422

    def test_special_condition_patch(self, client, admin_headers, sample_client):
        response = client.patch(
            f"{API}/clients/{sample_client.id}/special-condition",
            json={"specialCondition": "Solo contado"},
            headers=admin_headers,
        )

        assert response.json()["specialCondition"] == "Solo contado"

    def test_upload_csv(self, client, admin_headers):
        content = (
            "name,email,phone,personType,department,city\n"
            "Carlos Ruiz,carlos@correo.co,3209998877,NATURAL,Cundinamarca,Bogotá\n"
        ).encode("utf-8")

        response = client.post(
            f"{API}/clients/upload",
            files={"file": ("clientes.csv", content, "text/csv")},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json() == {"total": 1, "successful": 1, "failed": 0, "errors": []}

    def test_upload_csv_with_trailing_commas(self, client, admin_headers):
        content = (
            "name,email,phone,personType,department,city\n"
            "Juan Perez,juan@example.com,3001234567,NATURAL,Cundinamarca,Bogotá,\n"
        ).encode("utf-8")

        response = client.post(
            f"{API}/clients/upload",
            files={"file": ("clientes.csv", content, "text/csv")},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["successful"] == 1

    def test_upload_csv_over_1mb(self, client, admin_headers):
        content = b"name,email,phone,personType,department,city\n" + b"x" * (1024 * 1024)

        response = client.post(
            f"{API}/clients/upload",
            files={"file": ("clientes.csv", content, "text/csv")},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "El archivo no puede superar 1 MB"

    def test_special_condition_over_500_chars(self, client, admin_headers, sample_client):
        response = client.patch(
            f"{API}/clients/{sample_client.id}/special-condition",
            json={"specialCondition": "a" * 501},
            headers=admin_headers,
        )

        assert response.status_code == 422
        messages = [error["msg"] for error in response.json()["detail"]]
        assert any("La condición especial no puede exceder 500 caracteres" in m for m in messages)

    def test_upload_rejects_non_csv(self, client, admin_headers):
        response = client.post(
            f"{API}/clients/upload",
            files={"file": ("clientes.xlsx", b"binario", "application/octet-stream")},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "El archivo debe ser un CSV"


class TestCommercialChannelsApi:

    def test_crud(self, client, admin_headers):
        created = client.post(f"{API}/commercial-channels", json={"name": "Instagram"}, headers=admin_headers)
        channel_id = created.json()["id"]

        updated = client.put(
            f"{API}/commercial-channels/{channel_id}", json={"description": "Redes"}, headers=admin_headers
        )
        removed = client.delete(f"{API}/commercial-channels/{channel_id}", headers=admin_headers)

        assert created.status_code == 201
        assert updated.json()["description"] == "Redes"
        assert removed.status_code == 200
        assert client.get(f"{API}/commercial-channels/{channel_id}", headers=admin_headers).status_code == 404


class TestExpenseTypesApi:

    def test_types_and_subcategories(self, client, admin_headers):
        created = client.post(f"{API}/expense-types", json={"name": "Tecnología"}, headers=admin_headers)
        type_id = created.json()["id"]

        sub = client.post(
            f"{API}/expense-types/subcategories",
            json={"name": "Licencias", "expenseTypeId": type_id},
            headers=admin_headers,
        )
        filtered = client.get(
            f"{API}/expense-types/subcategories/all", params={"expenseTypeId": type_id}, headers=admin_headers
        )
        removed = client.delete(f"{API}/expense-types/subcategories/{sub.json()['id']}", headers=admin_headers)
        detail = client.get(f"{API}/expense-types/{type_id}", headers=admin_headers)

        assert created.status_code == 201
        assert sub.status_code == 201
        assert [s["name"] for s in filtered.json()] == ["Licencias"]
        assert removed.status_code == 204
        assert detail.json()["subcategories"] == []

    def test_delete_type_returns_204(self, client, admin_headers):
        created = client.post(f"{API}/expense-types", json={"name": "Viáticos"}, headers=admin_headers)

        response = client.delete(f"{API}/expense-types/{created.json()['id']}", headers=admin_headers)

        assert response.status_code == 204
