"""
Order status change requests API endpoints
"""
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gestion.core.auth import AuthenticatedUser, require_permissions
from gestion.core.database import get_db
from gestion.domain.requests import CreateStatusChangeRequest, ReviewRequest, StatusChangeRequestResponse
from gestion.services.status_change_request_service import StatusChangeRequestService


router = APIRouter()


@router.post("", response_model=StatusChangeRequestResponse, status_code=201)
async def create_status_change_request(
    data: CreateStatusChangeRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("update_orders")),
):
    """Solicitar un cambio de estado que requiere autorización (p.ej. DELIVERED_ON_CREDIT)"""
    return StatusChangeRequestService(db).create(data, user)


@router.get("/pending", response_model=List[StatusChangeRequestResponse])
async def get_pending_requests(
    order_id: Optional[str] = None,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("approve_orders")),
):
    return StatusChangeRequestService(db).find_pending(order_id)


@router.put("/{request_id}/approve", response_model=StatusChangeRequestResponse)
async def approve_request(
    request_id: str,
    data: Optional[ReviewRequest] = None,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("approve_orders")),
):
    return StatusChangeRequestService(db).approve(request_id, user, data or ReviewRequest())


@router.put("/{request_id}/reject", response_model=StatusChangeRequestResponse)
async def reject_request(
    request_id: str,
    data: Optional[ReviewRequest] = None,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("approve_orders")),
):
    return StatusChangeRequestService(db).reject(request_id, user, data or ReviewRequest())


@router.get("/my-requests", response_model=List[StatusChangeRequestResponse])
async def get_my_requests(
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_orders")),
):
    return StatusChangeRequestService(db).find_by_user(user.id)


@router.get("/{request_id}", response_model=StatusChangeRequestResponse)
async def get_request(
    request_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_orders")),
):
    return StatusChangeRequestService(db).find_one(request_id)
