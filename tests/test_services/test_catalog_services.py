"""
Unit tests for catalog services

Áreas, cargos, clientes (incluida la carga CSV), canales comerciales,
tipos de gasto y numeración consecutiva.
"""
import pytest
from fastapi import HTTPException

from gestion.core.database import utcnow
from gestion.domain.client import CreateClientRequest, UpdateClientRequest
from gestion.domain.client import CreateCommercialChannelRequest
from gestion.domain.enums import ConsecutiveType
from gestion.domain.expense import CreateExpenseSubcategoryRequest, CreateExpenseTypeRequest
from gestion.domain.organization import CreateAreaRequest, CreateCargoRequest, UpdateAreaRequest
from gestion.services.area_service import AreaService
from gestion.services.cargo_service import CargoService
from gestion.services.client_service import ClientService
from gestion.services.commercial_channel_service import CommercialChannelService
from gestion.services.consecutive_service import ConsecutiveService, format_number
from gestion.services.expense_type_service import ExpenseTypeService


CSV_HEADER = "name,email,phone,personType,department,city,nit\n"


class TestAreaAndCargoServices:

    def test_area_names_are_unique(self, db):
        service = AreaService(db)
        service.create(CreateAreaRequest(name="Producción"))

        with pytest.raises(HTTPException) as exc:
            service.create(CreateAreaRequest(name="Producción"))

        assert exc.value.detail == 'Ya existe un área con el nombre "Producción"'

    def test_area_with_active_cargos_cannot_be_removed(self, db):
        # Arrange
        area = AreaService(db).create(CreateAreaRequest(name="Diseño"))
        CargoService(db).create(CreateCargoRequest(name="Diseñador", areaId=area.id))

        # Act
        with pytest.raises(HTTPException) as exc:
            AreaService(db).remove(area.id)

        # Assert
        assert exc.value.status_code == 400
        assert "1 cargo(s) activo(s)" in exc.value.detail

    def test_area_detail_lists_active_cargos(self, db):
        area = AreaService(db).create(CreateAreaRequest(name="Acabados"))
        cargos = CargoService(db)
        cargos.create(CreateCargoRequest(name="Troquelador", areaId=area.id))
        cargos.create(CreateCargoRequest(name="Laminador", areaId=area.id))

        detail = AreaService(db).find_one(area.id)
        [listed] = [item for item in AreaService(db).find_all() if item.id == area.id]

        assert [c.name for c in detail.cargos] == ["Laminador", "Troquelador"]
        assert listed.cargos_count == 2

    def test_cargo_requires_active_area(self, db):
        area = AreaService(db).create(CreateAreaRequest(name="Bodega"))
        AreaService(db).update(area.id, UpdateAreaRequest(isActive=False))

        with pytest.raises(HTTPException) as exc:
            CargoService(db).create(CreateCargoRequest(name="Bodeguero", areaId=area.id))

        assert exc.value.detail == "No se puede crear un cargo en un área inactiva"

    def test_inactive_areas_hidden_by_default(self, db):
        area = AreaService(db).create(CreateAreaRequest(name="Temporal"))
        AreaService(db).remove(area.id)

        assert area.id not in [a.id for a in AreaService(db).find_all()]
        assert area.id in [a.id for a in AreaService(db).find_all(include_inactive=True)]


class TestClientService:

    def test_empresa_requires_nit(self, db, client_data):
        client_data.pop("nit")

        with pytest.raises(HTTPException) as exc:
            ClientService(db).create(CreateClientRequest(**client_data))

        assert exc.value.detail == "El NIT es requerido para clientes de tipo EMPRESA"

    def test_natural_person_drops_nit(self, db, client_data):
        client_data["personType"] = "NATURAL"

        client = ClientService(db).create(CreateClientRequest(**client_data))

        assert client.nit is None

    def test_duplicate_email(self, db, sample_client, client_data):
        with pytest.raises(HTTPException) as exc:
            ClientService(db).create(CreateClientRequest(**client_data))

        assert exc.value.status_code == 400

    def test_city_must_belong_to_department(self, db, client_data):
        from gestion.models import Department

        other = db.query(Department).filter(Department.name != "Cundinamarca").first()
        client_data["departmentId"] = other.id

        with pytest.raises(HTTPException) as exc:
            ClientService(db).create(CreateClientRequest(**client_data))

        assert exc.value.detail == "La ciudad seleccionada no pertenece al departamento indicado"

    def test_switch_to_natural_clears_nit(self, db, sample_client):
        updated = ClientService(db).update(
            sample_client.id, UpdateClientRequest(personType="NATURAL", cedula="1020304050")
        )

        assert updated.person_type == "NATURAL"
        assert updated.nit is None

    def test_special_condition(self, db, sample_client):
        updated = ClientService(db).update_special_condition(sample_client.id, "Pago a 30 días")
        assert updated.special_condition == "Pago a 30 días"

        cleared = ClientService(db).update_special_condition(sample_client.id, "")
        assert cleared.special_condition is None

    def test_remove_is_soft_delete(self, db, sample_client):
        ClientService(db).remove(sample_client.id)

        assert ClientService(db).find_one(sample_client.id).is_active is False
        assert ClientService(db).find_all() == []


class TestClientCsvUpload:

    def test_valid_rows_are_created(self, db):
        content = (
            CSV_HEADER
            + "Ana Gómez,ana@correo.co,3001112233,NATURAL,,,\n"
            + "Litografía Sur,info@litosur.co,3104445566,EMPRESA,Cundinamarca,Bogotá,900555111\n"
        ).encode("utf-8")

        result = ClientService(db).upload_clients(content)

        assert result == {"total": 2, "successful": 2, "failed": 0, "errors": []}
        assert len(ClientService(db).find_all()) == 2

    def test_invalid_rows_are_reported(self, db, sample_client):
        content = (
            CSV_HEADER
            + f"Duplicado,{sample_client.email},3001112233,NATURAL,,,\n"
            + "Sin Nit,sinnit@correo.co,3001112233,EMPRESA,,,\n"
            + "Lejos,lejos@correo.co,3001112233,NATURAL,Atlántida,Ciudad,\n"
            + "Bueno,bueno@correo.co,3001112233,NATURAL,,,\n"
        ).encode("utf-8")

        result = ClientService(db).upload_clients(content)

        assert result["total"] == 4
        assert result["successful"] == 1
        assert result["failed"] == 3
        assert [e["row"] for e in result["errors"]] == [2, 3, 4]
        assert "ya existe" in result["errors"][0]["error"]
        assert "nit es requerido" in result["errors"][1]["error"]
        assert 'Departamento "Atlántida" no encontrado' in result["errors"][2]["error"]

    def test_duplicate_email_inside_csv(self, db):
        content = (
            CSV_HEADER
            + "Uno,repetido@correo.co,3001112233,NATURAL,,,\n"
            + "Dos,REPETIDO@correo.co,3001112233,NATURAL,,,\n"
        ).encode("utf-8")

        result = ClientService(db).upload_clients(content)

        assert result["successful"] == 1
        assert "duplicado dentro del CSV" in result["errors"][0]["error"]

    def test_trailing_comma_rows(self, db):
        # Exportaciones de hojas de cálculo dejan una coma al final de cada fila
        content = (
            "name,email,phone,personType,department,city\n"
            "Juan Perez,juan@example.com,3001234567,NATURAL,Cundinamarca,Bogotá,\n"
            "Sin Email,,3001234567,NATURAL,Cundinamarca,Bogotá,\n"
        ).encode("utf-8")

        result = ClientService(db).upload_clients(content)

        assert result["total"] == 2
        assert result["successful"] == 1
        assert [e["row"] for e in result["errors"]] == [3]
        created = ClientService(db).find_all()
        assert [c.email for c in created] == ["juan@example.com"]
        assert created[0].city_id is not None

    def test_short_rows_leave_optional_fields_empty(self, db):
        content = (
            "name,email,phone,personType,department,city,address\n"
            "Ana Gómez,ana@correo.co,3001112233,NATURAL,Cundinamarca,Bogotá\n"
        ).encode("utf-8")

        result = ClientService(db).upload_clients(content)

        assert result["successful"] == 1
        assert ClientService(db).find_all()[0].address is None

    def test_missing_headers(self, db):
        with pytest.raises(HTTPException) as exc:
            ClientService(db).upload_clients(b"name,email\nAna,ana@correo.co\n")

        assert exc.value.detail.startswith("Cabeceras faltantes en el CSV")

    def test_header_only_file(self, db):
        with pytest.raises(HTTPException) as exc:
            ClientService(db).upload_clients(CSV_HEADER.encode("utf-8"))

        assert exc.value.status_code == 400


class TestCommercialChannelService:

    def test_unique_name(self, db):
        service = CommercialChannelService(db)
        service.create(CreateCommercialChannelRequest(name="Tienda física"))

        with pytest.raises(HTTPException) as exc:
            service.create(CreateCommercialChannelRequest(name="Tienda física"))

        assert exc.value.detail == 'El canal comercial con el nombre "Tienda física" ya existe'

    def test_remove(self, db):
        service = CommercialChannelService(db)
        channel = service.create(CreateCommercialChannelRequest(name="WhatsApp"))

        service.remove(channel.id)

        with pytest.raises(HTTPException) as exc:
            service.find_one(channel.id)
        assert exc.value.status_code == 404


class TestExpenseTypeService:

    def test_seeded_types_include_subcategories(self, db):
        types = {t.name: t for t in ExpenseTypeService(db).find_all()}

        assert "Materiales" in types
        assert len(types["Materiales"].subcategories) == 3

    def test_subcategory_filter_by_type(self, db):
        service = ExpenseTypeService(db)
        expense_type = service.create(CreateExpenseTypeRequest(name="Publicidad"))
        service.create_subcategory(CreateExpenseSubcategoryRequest(name="Pauta digital", expenseTypeId=expense_type.id))

        subcategories = service.find_all_subcategories(expense_type.id)

        assert [s.name for s in subcategories] == ["Pauta digital"]

    def test_removed_subcategory_is_hidden(self, db):
        service = ExpenseTypeService(db)
        expense_type = service.create(CreateExpenseTypeRequest(name="Eventos"))
        subcategory = service.create_subcategory(
            CreateExpenseSubcategoryRequest(name="Ferias", expenseTypeId=expense_type.id)
        )

        service.remove_subcategory(subcategory.id)

        assert service.find_all_subcategories(expense_type.id) == []


class TestConsecutiveService:

    def test_numbers_are_sequential_per_type(self, db):
        service = ConsecutiveService(db)
        year = utcnow().year

        first = service.generate_number(ConsecutiveType.ORDER)
        second = service.generate_number(ConsecutiveType.ORDER)
        other = service.generate_number(ConsecutiveType.QUOTE)

        assert first == f"OP-{year}-0001"
        assert second == f"OP-{year}-0002"
        assert other == f"COT-{year}-0001"

    def test_counter_resets_on_new_year(self, db):
        from gestion.models import Consecutive

        service = ConsecutiveService(db)
        service.generate_number(ConsecutiveType.EXPENSE)
        consecutive = db.query(Consecutive).filter(Consecutive.type == "EXPENSE").one()
        consecutive.year = 2000
        consecutive.last_number = 57
        db.flush()

        number = service.generate_number(ConsecutiveType.EXPENSE)

        assert number == f"GAS-{utcnow().year}-0001"

    def test_format_number_pads(self):
        assert format_number("OT", 2026, 7) == "OT-2026-0007"
        assert format_number("OT", 2026, 12345) == "OT-2026-12345"
