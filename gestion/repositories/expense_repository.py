"""
Expense Repository

Tipos de gasto, subcategorías y órdenes de gasto (OG).
"""
from typing import List, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from gestion.models import ExpenseOrder, ExpenseSubcategory, ExpenseType, User
from gestion.repositories.base_repository import BaseRepository


class ExpenseTypeRepository(BaseRepository[ExpenseType]):

    def __init__(self, db: Session):
        super().__init__(db, ExpenseType)

    def find_active(self) -> List[ExpenseType]:
        return (
            self.db.query(ExpenseType)
            .filter(ExpenseType.is_active.is_(True))
            .order_by(ExpenseType.name.asc())
            .all()
        )

    def find_by_name(self, name: str, exclude_id: Optional[str] = None) -> Optional[ExpenseType]:
        query = self.db.query(ExpenseType).filter(func.lower(ExpenseType.name) == name.lower())
        if exclude_id:
            query = query.filter(ExpenseType.id != exclude_id)
        return query.first()


class ExpenseSubcategoryRepository(BaseRepository[ExpenseSubcategory]):

    def __init__(self, db: Session):
        super().__init__(db, ExpenseSubcategory)

    def find_active(self, expense_type_id: Optional[str] = None) -> List[ExpenseSubcategory]:
        query = self.db.query(ExpenseSubcategory).filter(ExpenseSubcategory.is_active.is_(True))
        if expense_type_id:
            query = query.filter(ExpenseSubcategory.expense_type_id == expense_type_id)
        return query.order_by(ExpenseSubcategory.name.asc()).all()

    def find_in_type(self, subcategory_id: str, expense_type_id: str) -> Optional[ExpenseSubcategory]:
        return (
            self.db.query(ExpenseSubcategory)
            .filter(
                ExpenseSubcategory.id == subcategory_id,
                ExpenseSubcategory.expense_type_id == expense_type_id,
            )
            .first()
        )


class ExpenseOrderRepository(BaseRepository[ExpenseOrder]):

    def __init__(self, db: Session):
        super().__init__(db, ExpenseOrder)

    def find_with_filters(
        self,
        status: Optional[str] = None,
        work_order_id: Optional[str] = None,
        expense_type_id: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[ExpenseOrder], int]:
        query = self.db.query(ExpenseOrder)
        if status:
            query = query.filter(ExpenseOrder.status == status)
        if work_order_id:
            query = query.filter(ExpenseOrder.work_order_id == work_order_id)
        if expense_type_id:
            query = query.filter(ExpenseOrder.expense_type_id == expense_type_id)
        if search:
            pattern = f"%{search.lower()}%"
            matching_users = select(User.id).where(
                or_(
                    func.lower(User.first_name).like(pattern),
                    func.lower(User.last_name).like(pattern),
                )
            )
            query = query.filter(
                or_(
                    func.lower(ExpenseOrder.og_number).like(pattern),
                    ExpenseOrder.authorized_to_id.in_(matching_users),
                    ExpenseOrder.created_by_id.in_(matching_users),
                )
            )

        total = query.count()
        expense_orders = (
            query.order_by(ExpenseOrder.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return expense_orders, total
