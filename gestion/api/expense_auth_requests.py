"""
Expense order authorization requests API endpoints
"""
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gestion.core.auth import AuthenticatedUser, require_permissions
from gestion.core.database import get_db
from gestion.domain.requests import CreateExpenseAuthRequest, ExpenseAuthRequestResponse, ReviewRequest
from gestion.services.expense_auth_request_service import ExpenseAuthRequestService


router = APIRouter()


@router.post("", response_model=ExpenseAuthRequestResponse, status_code=201)
async def create_auth_request(
    data: CreateExpenseAuthRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("update_expense_orders")),
):
    return ExpenseAuthRequestService(db).create(data, user)


@router.get("/pending", response_model=List[ExpenseAuthRequestResponse])
async def get_pending_auth_requests(
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("approve_expense_orders")),
):
    return ExpenseAuthRequestService(db).find_pending()


@router.get("/all", response_model=List[ExpenseAuthRequestResponse])
async def get_all_auth_requests(
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("approve_expense_orders")),
):
    return ExpenseAuthRequestService(db).find_all()


@router.get("/my", response_model=List[ExpenseAuthRequestResponse])
async def get_my_auth_requests(
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("update_expense_orders")),
):
    return ExpenseAuthRequestService(db).find_by_user(user.id)


@router.put("/{request_id}/approve", response_model=ExpenseAuthRequestResponse)
async def approve_auth_request(
    request_id: str,
    data: Optional[ReviewRequest] = None,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("approve_expense_orders")),
):
    return ExpenseAuthRequestService(db).approve(request_id, user, data or ReviewRequest())


@router.put("/{request_id}/reject", response_model=ExpenseAuthRequestResponse)
async def reject_auth_request(
    request_id: str,
    data: Optional[ReviewRequest] = None,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("approve_expense_orders")),
):
    return ExpenseAuthRequestService(db).reject(request_id, user, data or ReviewRequest())
