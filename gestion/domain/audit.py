"""
Audit Log Domain Models

Author: TM3
Date: 2026-01-22
"""
from typing import List, Optional

from gestion.domain.auth import UserSummary
from gestion.domain.base import CamelModel, PageMeta
from gestion.domain.order import AuditLogResponse


class AuditLogEntry(AuditLogResponse):
    """Registro de auditoría con el usuario que hizo el cambio"""
    user: Optional[UserSummary] = None


class AuditLogPage(CamelModel):
    data: List[AuditLogEntry]
    meta: PageMeta
