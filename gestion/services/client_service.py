"""
Client Service
CRUD de clientes y carga masiva desde CSV.

Author: TM3
Date: 2026-01-12
"""
import io
import logging
import re
from typing import Dict, List, Optional

import pandas as pd
from fastapi import HTTPException
from sqlalchemy.orm import Session

from gestion.domain.client import CreateClientRequest, UpdateClientRequest
from gestion.domain.enums import PersonType
from gestion.models import Client
from gestion.repositories import ClientRepository, LocationRepository

logger = logging.getLogger(__name__)


REQUIRED_HEADERS = ["name", "email", "phone", "personType", "department", "city"]
OPTIONAL_HEADERS = ["manager", "encargado", "landlinePhone", "address", "nit", "cedula"]

DEFAULT_DEPARTMENT = "Cundinamarca"
DEFAULT_CITY = "Bogotá"

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class ClientService:

    def __init__(self, db: Session):
        self.db = db
        self.repository = ClientRepository(db)
        self.locations = LocationRepository(db)

    def find_all(self, include_inactive: bool = False) -> List[Client]:
        return self.repository.find_all(include_inactive)

    def find_one(self, client_id: str) -> Client:
        client = self.repository.get_by_id(client_id)
        if not client:
            raise HTTPException(status_code=404, detail=f"Cliente con ID {client_id} no encontrado")
        return client

    def create(self, data: CreateClientRequest) -> Client:
        if self.repository.find_by_email(data.email):
            raise HTTPException(
                status_code=400,
                detail=f'Ya existe un cliente con el email "{data.email}"'
            )
        self._check_location(data.department_id, data.city_id)

        if data.person_type == PersonType.EMPRESA and not data.nit:
            raise HTTPException(
                status_code=400,
                detail="El NIT es requerido para clientes de tipo EMPRESA"
            )

        values = data.model_dump()
        values["person_type"] = data.person_type.value
        if data.person_type == PersonType.NATURAL:
            values["nit"] = None

        client = self.repository.create(Client(**values))
        self.db.commit()
        self.db.refresh(client)
        logger.info(f"Client created: {client.name} ({client.email})")
        return client

    def update(self, client_id: str, data: UpdateClientRequest) -> Client:
        client = self.find_one(client_id)
        values = data.model_dump(exclude_unset=True)

        if data.email and data.email.lower() != client.email.lower():
            if self.repository.find_by_email(data.email, exclude_id=client_id):
                raise HTTPException(
                    status_code=400,
                    detail=f'Ya existe un cliente con el email "{data.email}"'
                )

        if data.department_id or data.city_id:
            self._check_location(
                data.department_id or client.department_id,
                data.city_id or client.city_id,
            )

        person_type = data.person_type.value if data.person_type else client.person_type
        if person_type == PersonType.EMPRESA.value:
            nit = values["nit"] if "nit" in values else client.nit
            if not nit:
                raise HTTPException(
                    status_code=400,
                    detail="El NIT es requerido para clientes de tipo EMPRESA"
                )
        elif "nit" in values or data.person_type == PersonType.NATURAL:
            values["nit"] = None

        if data.person_type:
            values["person_type"] = data.person_type.value

        self.repository.update(client, values)
        self.db.commit()
        self.db.refresh(client)
        return client

    def update_special_condition(self, client_id: str, special_condition: Optional[str]) -> Client:
        client = self.find_one(client_id)
        client.special_condition = special_condition or None
        self.db.commit()
        self.db.refresh(client)
        return client

    def remove(self, client_id: str) -> dict:
        client = self.find_one(client_id)
        client.is_active = False
        self.db.commit()
        logger.info(f"Client deactivated: {client_id}")
        return {"message": f"Cliente con ID {client_id} eliminado correctamente"}

    def _check_location(self, department_id: str, city_id: str) -> None:
        if not self.locations.get_department(department_id):
            raise HTTPException(
                status_code=400,
                detail=f"Departamento con ID {department_id} no encontrado"
            )
        city = self.locations.get_city(city_id)
        if not city or city.department_id != department_id:
            raise HTTPException(
                status_code=400,
                detail="La ciudad seleccionada no pertenece al departamento indicado"
            )

    # ------------------------------------------------------------------
    # Carga masiva
    # ------------------------------------------------------------------

    def upload_clients(self, content: bytes) -> dict:
        """
        Carga clientes desde un CSV.

        Las filas inválidas se reportan en `errors` (la fila 1 es la cabecera)
        y las válidas se insertan en una sola transacción.

        Returns:
            {total, successful, failed, errors: [{row, error}]}
        """
        df = self._read_csv(content)

        missing = [h for h in REQUIRED_HEADERS if h not in df.columns]
        if missing:
            raise HTTPException(
                status_code=400,
                detail=f"Cabeceras faltantes en el CSV: {', '.join(missing)}"
            )

        existing_emails = self.repository.existing_emails(df["email"].tolist())
        seen_emails = set()
        department_cache: Dict[str, Optional[str]] = {}
        city_cache: Dict[str, Optional[str]] = {}

        errors = []
        valid_rows = []

        for row_number, (_, row) in enumerate(df.iterrows(), start=2):
            fields = {col: self._field(row, col) for col in REQUIRED_HEADERS + OPTIONAL_HEADERS}
            row_errors = self._validate_row(fields)

            email = fields["email"]
            if email:
                email_lower = email.lower()
                if email_lower in existing_emails:
                    row_errors.append(f'Email "{email}" ya existe en la base de datos')
                elif email_lower in seen_emails:
                    row_errors.append(f'Email "{email}" está duplicado dentro del CSV')
                seen_emails.add(email_lower)

            department_name = fields["department"] or DEFAULT_DEPARTMENT
            city_name = fields["city"] or DEFAULT_CITY

            department_key = department_name.lower()
            if department_key not in department_cache:
                department = self.locations.find_department_by_name(department_name)
                department_cache[department_key] = department.id if department else None
            department_id = department_cache[department_key]

            city_id = None
            if department_id is None:
                row_errors.append(f'Departamento "{department_name}" no encontrado')
            else:
                city_key = f"{department_id}:{city_name.lower()}"
                if city_key not in city_cache:
                    city = self.locations.find_city_by_name(city_name, department_id)
                    city_cache[city_key] = city.id if city else None
                city_id = city_cache[city_key]
                if city_id is None:
                    row_errors.append(
                        f'Ciudad "{city_name}" no encontrada en el departamento "{department_name}"'
                    )

            if row_errors:
                errors.append({"row": row_number, "error": "; ".join(row_errors)})
                continue

            person_type = fields["personType"]
            valid_rows.append(Client(
                name=fields["name"],
                email=email,
                phone=fields["phone"],
                person_type=person_type,
                department_id=department_id,
                city_id=city_id,
                nit=None if person_type == PersonType.NATURAL.value else fields["nit"],
                cedula=fields["cedula"],
                manager=fields["manager"],
                encargado=fields["encargado"],
                landline_phone=fields["landlinePhone"],
                address=fields["address"],
            ))

        if valid_rows:
            self.db.add_all(valid_rows)
            self.db.commit()

        logger.info(f"Client upload: {len(valid_rows)} created, {len(errors)} failed of {len(df)}")
        return {
            "total": len(df),
            "successful": len(valid_rows),
            "failed": len(errors),
            "errors": errors,
        }

    @staticmethod
    def _read_csv(content: bytes) -> pd.DataFrame:
        try:
            df = pd.read_csv(
                io.BytesIO(content),
                dtype=str,
                index_col=False,
                keep_default_na=False,
                encoding="utf-8-sig",
                skipinitialspace=True,
            )
        except pd.errors.EmptyDataError:
            df = pd.DataFrame()
        except (pd.errors.ParserError, UnicodeDecodeError) as e:
            raise HTTPException(status_code=400, detail=f"No se pudo leer el CSV: {e}")

        if df.empty:
            raise HTTPException(
                status_code=400,
                detail="El CSV debe tener al menos una fila de cabeceras y una fila de datos"
            )

        df.columns = [str(col).strip().strip("\"'") for col in df.columns]
        return df

    @staticmethod
    def _field(row: pd.Series, column: str) -> Optional[str]:
        if column not in row.index or pd.isna(row[column]):
            return None
        value = str(row[column]).strip().strip("\"'")
        return value or None

    @staticmethod
    def _validate_row(fields: Dict[str, Optional[str]]) -> List[str]:
        errors = []
        name = fields["name"]
        email = fields["email"]
        phone = fields["phone"]
        person_type = fields["personType"]
        nit = fields["nit"]
        cedula = fields["cedula"]

        if not name or not 2 <= len(name) <= 200:
            errors.append("name es requerido (2-200 caracteres)")
        if not email:
            errors.append("email es requerido")
        elif not EMAIL_PATTERN.match(email):
            errors.append("email tiene formato inválido")
        if not phone or not 10 <= len(phone) <= 20:
            errors.append("phone es requerido (10-20 caracteres)")
        if person_type not in (PersonType.NATURAL.value, PersonType.EMPRESA.value):
            errors.append("personType debe ser NATURAL o EMPRESA")

        if nit and not 5 <= len(nit) <= 20:
            errors.append("nit debe tener entre 5 y 20 caracteres")
        if cedula and not 6 <= len(cedula) <= 15:
            errors.append("cedula debe tener entre 6 y 15 caracteres")
        for column, limit in (("manager", 200), ("encargado", 200), ("landlinePhone", 20), ("address", 300)):
            value = fields[column]
            if value and len(value) > limit:
                errors.append(f"{column} no puede exceder {limit} caracteres")

        if person_type == PersonType.EMPRESA.value and not nit:
            errors.append("nit es requerido para clientes de tipo EMPRESA")
        return errors
