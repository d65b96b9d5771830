"""
Expense Type Service
Tipos de gasto y sus subcategorías. La eliminación es lógica.
"""
import logging
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from gestion.domain.expense import (
    CreateExpenseSubcategoryRequest,
    CreateExpenseTypeRequest,
    ExpenseSubcategoryResponse,
    ExpenseTypeResponse,
    UpdateExpenseSubcategoryRequest,
    UpdateExpenseTypeRequest,
)
from gestion.models import ExpenseSubcategory, ExpenseType
from gestion.repositories import ExpenseSubcategoryRepository, ExpenseTypeRepository

logger = logging.getLogger(__name__)


class ExpenseTypeService:

    def __init__(self, db: Session):
        self.db = db
        self.repository = ExpenseTypeRepository(db)
        self.subcategories = ExpenseSubcategoryRepository(db)

    def _to_response(self, expense_type: ExpenseType) -> ExpenseTypeResponse:
        response = ExpenseTypeResponse.model_validate(expense_type)
        response.subcategories = [
            ExpenseSubcategoryResponse.model_validate(s)
            for s in expense_type.subcategories
            if s.is_active
        ]
        return response

    # ------------------------------------------------------------------
    # Tipos de gasto
    # ------------------------------------------------------------------

    def find_all(self) -> List[ExpenseTypeResponse]:
        return [self._to_response(t) for t in self.repository.find_active()]

    def get(self, expense_type_id: str) -> ExpenseType:
        expense_type = self.repository.get_by_id(expense_type_id)
        if not expense_type:
            raise HTTPException(
                status_code=404,
                detail=f"Tipo de gasto con id {expense_type_id} no encontrado"
            )
        return expense_type

    def find_one(self, expense_type_id: str) -> ExpenseTypeResponse:
        return self._to_response(self.get(expense_type_id))

    def create(self, data: CreateExpenseTypeRequest) -> ExpenseTypeResponse:
        self._ensure_unique_name(data.name)
        expense_type = self.repository.create(
            ExpenseType(name=data.name, description=data.description)
        )
        self.db.commit()
        self.db.refresh(expense_type)
        logger.info(f"Expense type created: {expense_type.name}")
        return self._to_response(expense_type)

    def update(self, expense_type_id: str, data: UpdateExpenseTypeRequest) -> ExpenseTypeResponse:
        expense_type = self.get(expense_type_id)
        values = data.model_dump(exclude_unset=True)
        if values.get("name") and values["name"] != expense_type.name:
            self._ensure_unique_name(values["name"], exclude_id=expense_type_id)

        self.repository.update(expense_type, values)
        self.db.commit()
        self.db.refresh(expense_type)
        return self._to_response(expense_type)

    def remove(self, expense_type_id: str) -> dict:
        expense_type = self.get(expense_type_id)
        expense_type.is_active = False
        self.db.commit()
        logger.info(f"Expense type deactivated: {expense_type.name}")
        return {"message": "Tipo de gasto eliminado correctamente"}

    def _ensure_unique_name(self, name: str, exclude_id: Optional[str] = None) -> None:
        if self.repository.find_by_name(name, exclude_id=exclude_id):
            raise HTTPException(
                status_code=400,
                detail=f'Ya existe un tipo de gasto con el nombre "{name}"'
            )

    # ------------------------------------------------------------------
    # Subcategorías
    # ------------------------------------------------------------------

    def find_all_subcategories(self, expense_type_id: Optional[str] = None) -> List[ExpenseSubcategory]:
        return self.subcategories.find_active(expense_type_id)

    def find_one_subcategory(self, subcategory_id: str) -> ExpenseSubcategory:
        subcategory = self.subcategories.get_by_id(subcategory_id)
        if not subcategory:
            raise HTTPException(
                status_code=404,
                detail=f"Subcategoría con id {subcategory_id} no encontrada"
            )
        return subcategory

    def create_subcategory(self, data: CreateExpenseSubcategoryRequest) -> ExpenseSubcategory:
        self.get(data.expense_type_id)
        subcategory = self.subcategories.create(
            ExpenseSubcategory(
                name=data.name,
                description=data.description,
                expense_type_id=data.expense_type_id,
            )
        )
        self.db.commit()
        self.db.refresh(subcategory)
        logger.info(f"Expense subcategory created: {subcategory.name}")
        return subcategory

    def update_subcategory(
        self, subcategory_id: str, data: UpdateExpenseSubcategoryRequest
    ) -> ExpenseSubcategory:
        subcategory = self.find_one_subcategory(subcategory_id)
        values = data.model_dump(exclude_unset=True)
        if values.get("expense_type_id"):
            self.get(values["expense_type_id"])

        self.subcategories.update(subcategory, values)
        self.db.commit()
        self.db.refresh(subcategory)
        return subcategory

    def remove_subcategory(self, subcategory_id: str) -> dict:
        subcategory = self.find_one_subcategory(subcategory_id)
        subcategory.is_active = False
        self.db.commit()
        return {"message": "Subcategoría eliminada correctamente"}
