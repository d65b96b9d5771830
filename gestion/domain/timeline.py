"""
Order Timeline Domain Models

Árbol de documentos relacionados: OP -> OT -> OG.

Author: TM3
Date: 2026-01-22
"""
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from gestion.domain.base import CamelModel
from gestion.domain.enums import TimelineEntityType


class TimelineNode(CamelModel):
    id: str
    type: str  # OP, OT, OG
    number: str
    status: str
    client_name: str
    total: Optional[float] = None
    detail_path: str
    created_at: Optional[datetime] = None
    # Solo OT en estado terminal (COMPLETED / CANCELLED)
    ended_at: Optional[datetime] = None
    created_by_name: Optional[str] = None
    pending_balance: Optional[float] = None
    advisor_name: Optional[str] = None
    designer_name: Optional[str] = None


class TimelineEdge(CamelModel):
    source: str
    target: str


class TimelineTree(CamelModel):
    nodes: List[TimelineNode] = Field(default_factory=list)
    edges: List[TimelineEdge] = Field(default_factory=list)
    root_id: str
    focused_id: str


class TimelineSearchItem(CamelModel):
    id: str
    type: str
    number: str
    status: str
    client_name: str
    entity_type: TimelineEntityType


class TimelineSearchResult(CamelModel):
    orders: List[TimelineSearchItem] = Field(default_factory=list)
    work_orders: List[TimelineSearchItem] = Field(default_factory=list)
    expense_orders: List[TimelineSearchItem] = Field(default_factory=list)
