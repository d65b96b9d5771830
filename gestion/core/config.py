"""
Configuración centralizada de la aplicación
"""
import json
import re
from enum import Enum
from typing import List, Optional

from pydantic_settings import BaseSettings


class Environment(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


_DURATION_UNITS = {"s": 1, "m": 60, "h": 3600, "d": 86400}


def parse_duration(value: str) -> int:
    """Convierte '15m', '7d', '3600' a segundos"""
    match = re.fullmatch(r"\s*(\d+)\s*([smhd]?)\s*", str(value))
    if not match:
        raise ValueError(f"Invalid duration: {value}")
    amount, unit = match.groups()
    return int(amount) * _DURATION_UNITS.get(unit or "s", 1)


class Settings(BaseSettings):
    """Configuración de la aplicación"""

    # API Settings
    API_TITLE: str = "Gestión Comercial API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "API para gestión de órdenes, OT, OG y clientes"
    API_HOST: str = "0.0.0.0"
    PORT: int = 3000
    NODE_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./gestion.db"

    # CORS - Can be string (comma-separated) or JSON array
    FRONTEND_URL: str = "http://localhost:5173"
    ALLOWED_ORIGINS: Optional[str] = None

    # JWT
    JWT_ACCESS_SECRET: str = "change-me-access"
    JWT_REFRESH_SECRET: str = "change-me-refresh"
    JWT_ACCESS_EXPIRATION: str = "15m"
    JWT_REFRESH_EXPIRATION: str = "7d"
    JWT_ALGORITHM: str = "HS256"

    # AWS S3
    AWS_ACCESS_KEY_ID: str = ""
    AWS_SECRET_ACCESS_KEY: str = ""
    AWS_REGION: str = "us-east-1"
    AWS_ENDPOINT: Optional[str] = None
    AWS_S3_BUCKET_NAME: str = ""
    AWS_S3_SIGNED_URL_EXPIRATION: int = 3600

    # Background jobs
    EDIT_PERMISSION_JOB_ENABLED: bool = True
    EDIT_PERMISSION_JOB_INTERVAL: int = 60

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into list"""
        if not self.ALLOWED_ORIGINS:
            return [self.FRONTEND_URL]

        # Try JSON parse first (for array format)
        try:
            origins = json.loads(self.ALLOWED_ORIGINS)
            if isinstance(origins, list):
                return origins
        except (json.JSONDecodeError, ValueError):
            pass

        # Fall back to comma-separated string
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    def get_environment(self) -> Environment:
        """NODE_ENV normalizado; cualquier valor desconocido es development"""
        try:
            return Environment((self.NODE_ENV or "").lower())
        except ValueError:
            return Environment.DEVELOPMENT

    def is_development(self) -> bool:
        return self.get_environment() == Environment.DEVELOPMENT

    def is_staging(self) -> bool:
        return self.get_environment() == Environment.STAGING

    def is_production(self) -> bool:
        return self.get_environment() == Environment.PRODUCTION

    @property
    def access_token_seconds(self) -> int:
        return parse_duration(self.JWT_ACCESS_EXPIRATION)

    @property
    def refresh_token_seconds(self) -> int:
        return parse_duration(self.JWT_REFRESH_EXPIRATION)

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
