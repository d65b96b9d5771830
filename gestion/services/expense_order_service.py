"""
Expense Order Service
Órdenes de gasto (OG): creación, edición, ítems y flujo de estados.

Transiciones:
    DRAFT -> CREATED | AUTHORIZED
    CREATED -> AUTHORIZED | DRAFT
    AUTHORIZED -> PAID
    PAID (final)

Author: TM3
Date: 2026-01-16
"""
import logging
from decimal import Decimal
from typing import Iterable, List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from gestion.core.auth import AuthenticatedUser
from gestion.core.database import utcnow
from gestion.domain.base import page_of
from gestion.domain.enums import ConsecutiveType, ExpenseOrderStatus, PaymentMethod
from gestion.domain.expense import (
    CreateExpenseOrderRequest,
    ExpenseOrderItemInput,
    UpdateExpenseOrderRequest,
)
from gestion.models import ExpenseOrder, ExpenseOrderItem
from gestion.repositories import (
    ExpenseAuthRequestRepository,
    ExpenseOrderRepository,
    ExpenseSubcategoryRepository,
    UserRepository,
    WorkOrderRepository,
)
from gestion.services.consecutive_service import ConsecutiveService
from gestion.services.order_service import to_money
from gestion.services.production_area_service import ProductionAreaService

logger = logging.getLogger(__name__)


ALLOWED_TRANSITIONS = {
    ExpenseOrderStatus.DRAFT: [ExpenseOrderStatus.CREATED, ExpenseOrderStatus.AUTHORIZED],
    ExpenseOrderStatus.CREATED: [ExpenseOrderStatus.AUTHORIZED, ExpenseOrderStatus.DRAFT],
    ExpenseOrderStatus.AUTHORIZED: [ExpenseOrderStatus.PAID],
    ExpenseOrderStatus.PAID: [],
}

EDITABLE_STATUSES = (ExpenseOrderStatus.DRAFT.value, ExpenseOrderStatus.CREATED.value)

PRODUCTION_AREAS_REQUIRE_WORK_ORDER = (
    "Las áreas de producción en los ítems solo se permiten cuando la OG está asociada a una OT"
)


class ExpenseOrderService:

    def __init__(self, db: Session):
        self.db = db
        self.repository = ExpenseOrderRepository(db)
        self.subcategories = ExpenseSubcategoryRepository(db)
        self.work_orders = WorkOrderRepository(db)
        self.users = UserRepository(db)
        self.auth_requests = ExpenseAuthRequestRepository(db)
        self.consecutives = ConsecutiveService(db)
        self.production_areas = ProductionAreaService(db)

    def create(self, data: CreateExpenseOrderRequest, user_id: str) -> ExpenseOrder:
        if data.work_order_id:
            self._check_work_order(data.work_order_id)
        self._check_production_areas(data.items, data.work_order_id)
        self._check_subcategory(data.expense_type_id, data.expense_subcategory_id)
        self._check_user(data.authorized_to_id)
        if data.responsible_id:
            self._check_user(data.responsible_id)

        expense_order = ExpenseOrder(
            og_number=self.consecutives.generate_number(ConsecutiveType.EXPENSE),
            expense_type_id=data.expense_type_id,
            expense_subcategory_id=data.expense_subcategory_id,
            work_order_id=data.work_order_id,
            authorized_to_id=data.authorized_to_id,
            responsible_id=data.responsible_id,
            created_by_id=user_id,
            observations=data.observations,
            area_or_machine=data.area_or_machine,
            status=ExpenseOrderStatus.DRAFT.value,
        )
        for index, item in enumerate(data.items):
            expense_order.items.append(self._build_item(item, index))
        self._recalculate_total(expense_order)

        self.repository.create(expense_order)
        self.db.commit()
        self.db.refresh(expense_order)
        logger.info(f"Expense order created: {expense_order.og_number} (total {expense_order.total})")
        return expense_order

    def find_all(
        self,
        status: Optional[ExpenseOrderStatus] = None,
        work_order_id: Optional[str] = None,
        expense_type_id: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> dict:
        expense_orders, total = self.repository.find_with_filters(
            status=status.value if status else None,
            work_order_id=work_order_id,
            expense_type_id=expense_type_id,
            search=search,
            page=page,
            limit=limit,
        )
        return page_of(expense_orders, total, page, limit)

    def find_one(self, expense_order_id: str) -> ExpenseOrder:
        expense_order = self.repository.get_by_id(expense_order_id)
        if not expense_order:
            raise HTTPException(status_code=404, detail=f"OG con id {expense_order_id} no encontrada")
        return expense_order

    def update(self, expense_order_id: str, data: UpdateExpenseOrderRequest) -> ExpenseOrder:
        expense_order = self.find_one(expense_order_id)
        if expense_order.status not in EDITABLE_STATUSES:
            raise HTTPException(
                status_code=400,
                detail=(
                    f"No se puede modificar una OG en estado {expense_order.status}. "
                    "Solo se permite editar en estados DRAFT o CREATED."
                )
            )

        values = data.model_dump(exclude_unset=True, exclude={"items"})

        if data.work_order_id:
            self._check_work_order(data.work_order_id)
        work_order_id = values["work_order_id"] if "work_order_id" in values else expense_order.work_order_id

        if data.items:
            self._check_production_areas(data.items, work_order_id)

        if data.expense_type_id or data.expense_subcategory_id:
            self._check_subcategory(
                data.expense_type_id or expense_order.expense_type_id,
                data.expense_subcategory_id or expense_order.expense_subcategory_id,
            )
        if data.authorized_to_id:
            self._check_user(data.authorized_to_id)
        if data.responsible_id:
            self._check_user(data.responsible_id)

        self.repository.update(expense_order, values)

        if data.items:
            expense_order.items.clear()
            for index, item in enumerate(data.items):
                quantity = item.quantity if item.quantity is not None else Decimal("1")
                unit_price = item.unit_price if item.unit_price is not None else Decimal("0")
                expense_order.items.append(ExpenseOrderItem(
                    quantity=quantity,
                    name=item.name,
                    description=item.description,
                    supplier_id=item.supplier_id,
                    unit_price=to_money(unit_price),
                    total=to_money(quantity * unit_price),
                    payment_method=(item.payment_method or PaymentMethod.CASH).value,
                    receipt_file_id=item.receipt_file_id,
                    production_area_ids=list(item.production_area_ids or []),
                    sort_order=index,
                ))
            self._recalculate_total(expense_order)

        self.db.commit()
        self.db.refresh(expense_order)
        return expense_order

    def add_items(self, expense_order_id: str, items: List[ExpenseOrderItemInput]) -> ExpenseOrder:
        expense_order = self.find_one(expense_order_id)
        if expense_order.status not in EDITABLE_STATUSES:
            raise HTTPException(
                status_code=400,
                detail=(
                    f"No se puede agregar ítems a una OG en estado {expense_order.status}. "
                    "Solo se permite en estados DRAFT o CREATED."
                )
            )
        self._check_production_areas(items, expense_order.work_order_id)

        next_sort = len(expense_order.items)
        for offset, item in enumerate(items):
            expense_order.items.append(self._build_item(item, next_sort + offset))
        self._recalculate_total(expense_order)

        self.db.commit()
        self.db.refresh(expense_order)
        return expense_order

    def update_status(
        self, expense_order_id: str, status: ExpenseOrderStatus, user: AuthenticatedUser
    ) -> ExpenseOrder:
        expense_order = self.find_one(expense_order_id)
        current = ExpenseOrderStatus(expense_order.status)
        allowed = ALLOWED_TRANSITIONS[current]

        if status not in allowed:
            allowed_text = ", ".join(s.value for s in allowed) or "ninguna"
            raise HTTPException(
                status_code=400,
                detail=(
                    f"No se puede cambiar el estado de {current.value} a {status.value}. "
                    f"Transiciones permitidas: {allowed_text}"
                )
            )

        if status == ExpenseOrderStatus.AUTHORIZED:
            if user.is_admin:
                authorized_by_id = user.id
            else:
                approved = self.auth_requests.find_latest_approved(expense_order.id, user.id)
                if not approved:
                    raise HTTPException(
                        status_code=403,
                        detail=(
                            "Autorizar una OG requiere aprobación de un administrador. "
                            "Por favor, cree una solicitud de autorización."
                        )
                    )
                authorized_by_id = approved.reviewed_by_id
            expense_order.authorized_by_id = authorized_by_id
            expense_order.authorized_at = utcnow()

        if status == ExpenseOrderStatus.PAID and "approve_expense_orders" not in user.permissions:
            raise HTTPException(
                status_code=403,
                detail='Solo usuarios con permiso "approve_expense_orders" pueden marcar una OG como PAID'
            )

        expense_order.status = status.value
        self.db.commit()
        self.db.refresh(expense_order)
        logger.info(f"Expense order {expense_order.og_number}: {current.value} -> {status.value}")
        return expense_order

    def remove(self, expense_order_id: str) -> dict:
        expense_order = self.find_one(expense_order_id)
        if expense_order.status != ExpenseOrderStatus.DRAFT.value:
            raise HTTPException(
                status_code=400,
                detail=f"Solo se pueden eliminar OGs en estado DRAFT. Estado actual: {expense_order.status}"
            )

        self.repository.delete(expense_order)
        self.db.commit()
        logger.info(f"Expense order deleted: {expense_order.og_number}")
        return {"message": "OG eliminada correctamente"}

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _build_item(data: ExpenseOrderItemInput, sort_order: int) -> ExpenseOrderItem:
        return ExpenseOrderItem(
            quantity=data.quantity,
            name=data.name,
            description=data.description,
            supplier_id=data.supplier_id,
            unit_price=to_money(data.unit_price),
            total=to_money(data.quantity * data.unit_price),
            payment_method=data.payment_method.value,
            receipt_file_id=data.receipt_file_id,
            production_area_ids=list(data.production_area_ids or []),
            sort_order=sort_order,
        )

    @staticmethod
    def _recalculate_total(expense_order: ExpenseOrder) -> None:
        expense_order.total = sum((to_money(item.total) for item in expense_order.items), Decimal("0"))

    def _check_production_areas(self, items: Iterable, work_order_id: Optional[str]) -> None:
        area_ids = [area_id for item in items for area_id in (item.production_area_ids or [])]
        if area_ids and not work_order_id:
            raise HTTPException(status_code=400, detail=PRODUCTION_AREAS_REQUIRE_WORK_ORDER)
        self.production_areas.ensure_exist(area_ids)

    def _check_work_order(self, work_order_id: str) -> None:
        if not self.work_orders.get_by_id(work_order_id):
            raise HTTPException(status_code=404, detail=f"OT con id {work_order_id} no encontrada")

    def _check_subcategory(self, expense_type_id: str, subcategory_id: str) -> None:
        if not self.subcategories.find_in_type(subcategory_id, expense_type_id):
            raise HTTPException(
                status_code=400,
                detail="La subcategoría no pertenece al tipo de gasto indicado"
            )

    def _check_user(self, user_id: str) -> None:
        if not self.users.get_by_id(user_id):
            raise HTTPException(status_code=404, detail=f"Usuario con id {user_id} no encontrado")
