"""
Consecutive Service
Numeración de documentos por tipo y año: OP-2026-0001, OT-2026-0001, ...
"""
import logging

from sqlalchemy.orm import Session

from gestion.core.database import utcnow
from gestion.domain.enums import ConsecutiveType
from gestion.models import Consecutive
from gestion.repositories import ConsecutiveRepository

logger = logging.getLogger(__name__)


PREFIXES = {
    ConsecutiveType.ORDER: "OP",
    ConsecutiveType.PRODUCTION: "PROD",
    ConsecutiveType.EXPENSE: "GAS",
    ConsecutiveType.QUOTE: "COT",
    ConsecutiveType.WORK_ORDER: "OT",
}


def format_number(prefix: str, year: int, number: int) -> str:
    return f"{prefix}-{year}-{number:04d}"


class ConsecutiveService:

    def __init__(self, db: Session):
        self.db = db
        self.repository = ConsecutiveRepository(db)

    def generate_number(self, type_: ConsecutiveType) -> str:
        """
        Incrementa el contador del tipo y devuelve el número formateado.

        El contador se reinicia en 1 cuando cambia el año. No hace commit:
        el número queda reservado con la transacción del documento que lo usa.
        """
        prefix = PREFIXES[type_]
        year = utcnow().year

        consecutive = self.repository.find_for_update(type_.value)
        if consecutive is None:
            consecutive = self.repository.create(
                Consecutive(type=type_.value, prefix=prefix, year=year, last_number=0)
            )

        if consecutive.year != year:
            logger.info(f"Resetting consecutive {type_.value} for year {year}")
            consecutive.year = year
            consecutive.last_number = 0

        consecutive.last_number += 1
        consecutive.prefix = prefix
        self.db.flush()

        return format_number(prefix, year, consecutive.last_number)
