"""
Conexión a base de datos (SQLAlchemy)

PostgreSQL (psycopg2) en todos los entornos desplegados; SQLite se acepta
para desarrollo local y pruebas.

Author: TM3
Updated: 2026-01-20
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import create_engine, text
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker

from .config import settings

logger = logging.getLogger(__name__)


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,  # Verificar conexión antes de usar
        "pool_size": 10,
        "max_overflow": 20,
    }


# SQLAlchemy Engine
engine = create_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

# Session Factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base para modelos
Base = declarative_base()


def new_uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """UTC naive, igual en PostgreSQL y SQLite"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def get_db():
    """
    FastAPI dependency para obtener sesión de SQLAlchemy

    Usage:
        @router.get("/items")
        def read_items(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_database() -> bool:
    """Prueba de conectividad usada por /health"""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False
