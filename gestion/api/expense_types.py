"""
Expense types & subcategories API endpoints
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from gestion.core.auth import AuthenticatedUser, require_permissions
from gestion.core.database import get_db
from gestion.domain.expense import (
    CreateExpenseSubcategoryRequest,
    CreateExpenseTypeRequest,
    ExpenseSubcategoryResponse,
    ExpenseTypeResponse,
    UpdateExpenseSubcategoryRequest,
    UpdateExpenseTypeRequest,
)
from gestion.services.expense_type_service import ExpenseTypeService


router = APIRouter()


@router.get("", response_model=List[ExpenseTypeResponse])
async def get_expense_types(
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_expense_types")),
):
    """Tipos de gasto activos con sus subcategorías activas"""
    return ExpenseTypeService(db).find_all()


# Subcategorías (antes de /{expense_type_id} para no colisionar)

@router.get("/subcategories/all", response_model=List[ExpenseSubcategoryResponse])
async def get_subcategories(
    expense_type_id: Optional[str] = Query(None, alias="expenseTypeId"),
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_expense_types")),
):
    return ExpenseTypeService(db).find_all_subcategories(expense_type_id)


@router.get("/subcategories/{subcategory_id}", response_model=ExpenseSubcategoryResponse)
async def get_subcategory(
    subcategory_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_expense_types")),
):
    return ExpenseTypeService(db).find_one_subcategory(subcategory_id)


@router.post("/subcategories", response_model=ExpenseSubcategoryResponse, status_code=201)
async def create_subcategory(
    data: CreateExpenseSubcategoryRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("create_expense_types")),
):
    return ExpenseTypeService(db).create_subcategory(data)


@router.patch("/subcategories/{subcategory_id}", response_model=ExpenseSubcategoryResponse)
async def update_subcategory(
    subcategory_id: str,
    data: UpdateExpenseSubcategoryRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("update_expense_types")),
):
    return ExpenseTypeService(db).update_subcategory(subcategory_id, data)


@router.delete("/subcategories/{subcategory_id}", status_code=204)
async def delete_subcategory(
    subcategory_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("delete_expense_types")),
):
    ExpenseTypeService(db).remove_subcategory(subcategory_id)


@router.get("/{expense_type_id}", response_model=ExpenseTypeResponse)
async def get_expense_type(
    expense_type_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_expense_types")),
):
    return ExpenseTypeService(db).find_one(expense_type_id)


@router.post("", response_model=ExpenseTypeResponse, status_code=201)
async def create_expense_type(
    data: CreateExpenseTypeRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("create_expense_types")),
):
    return ExpenseTypeService(db).create(data)


@router.patch("/{expense_type_id}", response_model=ExpenseTypeResponse)
async def update_expense_type(
    expense_type_id: str,
    data: UpdateExpenseTypeRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("update_expense_types")),
):
    return ExpenseTypeService(db).update(expense_type_id, data)


@router.delete("/{expense_type_id}", status_code=204)
async def delete_expense_type(
    expense_type_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("delete_expense_types")),
):
    ExpenseTypeService(db).remove(expense_type_id)
