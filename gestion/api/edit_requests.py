"""
Order edit requests API endpoints

Two routers:
- order_router: /api/v1/orders/{order_id}/edit-requests (por orden)
- global_router: /api/v1/order-edit-requests (bandeja de administradores)
"""
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gestion.core.auth import AuthenticatedUser, require_permissions
from gestion.core.database import get_db
from gestion.domain.requests import CreateEditRequest, EditRequestResponse, ReviewRequest
from gestion.services.edit_request_service import EditRequestService


order_router = APIRouter()
global_router = APIRouter()


# ============================================================================
# /orders/{order_id}/edit-requests
# ============================================================================

@order_router.post("", response_model=EditRequestResponse, status_code=201)
async def create_edit_request(
    order_id: str,
    data: Optional[CreateEditRequest] = None,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("create_orders")),
):
    """Solicitar permiso para editar una orden que ya no está en DRAFT"""
    return EditRequestService(db).create(order_id, user, data or CreateEditRequest())


@order_router.get("", response_model=List[EditRequestResponse])
async def get_order_edit_requests(
    order_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_orders")),
):
    return EditRequestService(db).find_by_order(order_id)


@order_router.get("/active-permission", response_model=Optional[EditRequestResponse])
async def get_active_permission(
    order_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_orders")),
):
    """Permiso vigente del usuario actual, o null si no tiene"""
    return EditRequestService(db).get_active_permission(order_id, user.id)


@order_router.get("/{request_id}", response_model=EditRequestResponse)
async def get_edit_request(
    order_id: str,
    request_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_orders")),
):
    return EditRequestService(db).find_one(order_id, request_id)


@order_router.put("/{request_id}/approve", response_model=EditRequestResponse)
async def approve_order_edit_request(
    order_id: str,
    request_id: str,
    data: Optional[ReviewRequest] = None,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("approve_orders")),
):
    return EditRequestService(db).approve(request_id, user, data or ReviewRequest(), order_id=order_id)


@order_router.put("/{request_id}/reject", response_model=EditRequestResponse)
async def reject_order_edit_request(
    order_id: str,
    request_id: str,
    data: Optional[ReviewRequest] = None,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("approve_orders")),
):
    return EditRequestService(db).reject(request_id, user, data or ReviewRequest(), order_id=order_id)


# ============================================================================
# /order-edit-requests
# ============================================================================

@global_router.get("/pending", response_model=List[EditRequestResponse])
async def get_pending_edit_requests(
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("approve_orders")),
):
    return EditRequestService(db).find_all_pending()


@global_router.put("/{request_id}/approve", response_model=EditRequestResponse)
async def approve_edit_request(
    request_id: str,
    data: Optional[ReviewRequest] = None,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("approve_orders")),
):
    return EditRequestService(db).approve(request_id, user, data or ReviewRequest())


@global_router.put("/{request_id}/reject", response_model=EditRequestResponse)
async def reject_edit_request(
    request_id: str,
    data: Optional[ReviewRequest] = None,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("approve_orders")),
):
    return EditRequestService(db).reject(request_id, user, data or ReviewRequest())
