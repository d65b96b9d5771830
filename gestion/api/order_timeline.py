"""
Order Timeline API endpoints
- Búsqueda de OP, OT y OG por número o cliente
- Árbol de documentos relacionados
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from gestion.core.auth import AuthenticatedUser, require_permissions
from gestion.core.database import get_db
from gestion.domain.enums import TimelineEntityType
from gestion.domain.timeline import TimelineSearchResult, TimelineTree
from gestion.services.order_timeline_service import OrderTimelineService


router = APIRouter()


@router.get("/search", response_model=TimelineSearchResult)
async def search_documents(
    q: str = Query("", description="Número de documento o nombre del cliente"),
    limit: int = Query(20, ge=1, le=100, description="Máximo de resultados por tipo"),
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_orders")),
):
    return OrderTimelineService(db).search(q, limit)


@router.get("/{entity_type}/{entity_id}", response_model=TimelineTree)
async def get_order_tree(
    entity_type: TimelineEntityType,
    entity_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_orders")),
):
    """
    Árbol OP -> OT -> OG partiendo de cualquier documento

    Returns:
        {"nodes": [...], "edges": [...], "rootId", "focusedId"}
    """
    return OrderTimelineService(db).get_tree(entity_type, entity_id)
