"""
Audit Logs API endpoints
- Historial paginado con filtros
- Últimos cambios por usuario y por registro
"""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from gestion.core.auth import AuthenticatedUser, require_permissions
from gestion.core.database import get_db, naive_utc
from gestion.domain.audit import AuditLogEntry, AuditLogPage
from gestion.services.audit_service import AuditService


router = APIRouter()


@router.get("", response_model=AuditLogPage)
async def get_audit_logs(
    user_id: Optional[str] = Query(None, alias="userId"),
    action: Optional[str] = Query(None, description="CREATE, UPDATE o DELETE"),
    entity_type: Optional[str] = Query(None, alias="entityType"),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_audit_logs")),
):
    """
    Listar registros de auditoría, más recientes primero

    Returns:
        {"data": [...], "meta": {"total", "page", "limit", "totalPages"}}
    """
    return AuditService(db).find_all(
        user_id=user_id,
        action=action,
        entity_type=entity_type,
        start_date=naive_utc(start_date),
        end_date=naive_utc(end_date),
        page=page,
        limit=limit,
    )


@router.get("/user/{user_id}", response_model=List[AuditLogEntry])
async def get_user_audit_logs(
    user_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_audit_logs")),
):
    """Últimos 100 cambios hechos por el usuario"""
    return AuditService(db).find_by_user(user_id)


@router.get("/record/{record_id}", response_model=List[AuditLogEntry])
async def get_record_audit_logs(
    record_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_audit_logs")),
):
    """Últimos 100 cambios sobre el registro"""
    return AuditService(db).find_by_record(record_id)
