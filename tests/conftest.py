"""
Pytest fixtures and configuration for Gestión backend tests

Cada test corre contra una base SQLite en memoria (StaticPool) con los
datos iniciales cargados: permisos, roles, usuarios y ubicaciones.

Author: TM3
Date: 2026-01-20
"""
import os

# Configuración antes de importar la aplicación
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["EDIT_PERMISSION_JOB_ENABLED"] = "false"
os.environ.setdefault("AWS_S3_BUCKET_NAME", "test-bucket")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "test")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "test")

from unittest.mock import MagicMock  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from gestion.core.auth import AuthenticatedUser, create_access_token, pwd_context  # noqa: E402
from gestion.core.database import Base, get_db  # noqa: E402
from gestion.main import app  # noqa: E402
from gestion.models import City, Department, User  # noqa: E402
from gestion.seed import seed  # noqa: E402

# bcrypt con el mínimo de rondas para que el seed sea rápido
pwd_context.update(bcrypt__rounds=4)


@pytest.fixture(scope="function")
def engine():
    """
    Engine SQLite en memoria compartido por todas las sesiones del test

    Scope: function (esquema nuevo por test)
    """
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db(session_factory):
    """Sesión con los datos iniciales cargados"""
    session = session_factory()
    seed(session)
    yield session
    session.close()


@pytest.fixture(scope="function")
def client(db, session_factory):
    """TestClient con get_db apuntando a la base de pruebas"""
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def _user(db, email: str) -> User:
    return db.query(User).filter(User.email == email).one()


def _as_authenticated(user: User) -> AuthenticatedUser:
    return AuthenticatedUser(
        id=user.id,
        email=user.email,
        role_id=user.role_id,
        role_name=user.role.name,
        permissions=user.permission_names,
    )


@pytest.fixture
def admin_user(db) -> User:
    return _user(db, "admin@example.com")


@pytest.fixture
def regular_user(db) -> User:
    return _user(db, "user@example.com")


@pytest.fixture
def manager_user(db) -> User:
    return _user(db, "manager@example.com")


@pytest.fixture
def admin(admin_user) -> AuthenticatedUser:
    """Administrador autenticado (para llamar servicios directamente)"""
    return _as_authenticated(admin_user)


@pytest.fixture
def user(regular_user) -> AuthenticatedUser:
    """Usuario operativo sin rol admin"""
    return _as_authenticated(regular_user)


@pytest.fixture
def admin_headers(admin_user):
    return {"Authorization": f"Bearer {create_access_token(admin_user)}"}


@pytest.fixture
def user_headers(regular_user):
    return {"Authorization": f"Bearer {create_access_token(regular_user)}"}


@pytest.fixture
def manager_headers(manager_user):
    return {"Authorization": f"Bearer {create_access_token(manager_user)}"}


@pytest.fixture
def bogota(db):
    """(department_id, city_id) de Cundinamarca / Bogotá"""
    department = db.query(Department).filter(Department.name == "Cundinamarca").one()
    city = db.query(City).filter(City.name == "Bogotá").one()
    return department.id, city.id


@pytest.fixture
def client_data(bogota):
    department_id, city_id = bogota
    return {
        "name": "Impresos Andinos SAS",
        "email": "compras@andinos.co",
        "phone": "3001234567",
        "departmentId": department_id,
        "cityId": city_id,
        "personType": "EMPRESA",
        "nit": "900123456",
    }


@pytest.fixture
def mock_s3():
    """Conector S3 falso: no toca la red"""
    s3 = MagicMock()
    s3.bucket_name = "test-bucket"
    s3.get_signed_url.return_value = "https://signed.example.com/file"
    s3.get_file.return_value = b"contenido"
    return s3


@pytest.fixture
def sample_client(db, client_data):
    """Cliente EMPRESA creado vía servicio"""
    from gestion.domain.client import CreateClientRequest
    from gestion.services.client_service import ClientService

    return ClientService(db).create(CreateClientRequest(**client_data))


@pytest.fixture
def make_order(db, sample_client, admin_user):
    """
    Factory de órdenes DRAFT. Por defecto un item de 2 x 50.000
    (subtotal 100.000, IVA 19.000, total 119.000)
    """
    from gestion.domain.order import CreateOrderRequest
    from gestion.services.order_service import OrderService

    def _make(items=None, **extra):
        payload = {
            "clientId": sample_client.id,
            "items": items or [{"description": "Tarjetas de presentación", "quantity": 2, "unitPrice": 50000}],
        }
        payload.update(extra)
        return OrderService(db, storage=MagicMock()).create(CreateOrderRequest(**payload), admin_user.id)

    return _make


@pytest.fixture
def production_area(db):
    """Área de producción activa"""
    from gestion.domain.organization import CreateProductionAreaRequest
    from gestion.services.production_area_service import ProductionAreaService

    return ProductionAreaService(db).create(CreateProductionAreaRequest(name="Impresión digital"))
