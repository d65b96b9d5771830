"""
Tests for expense orders (OG), their authorization requests and work orders (OT)
"""
import uuid
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from fastapi import HTTPException

from gestion.core.database import utcnow
from gestion.domain.enums import ExpenseOrderStatus, NotificationType, OrderStatus, WorkOrderStatus
from gestion.domain.expense import CreateExpenseOrderRequest, UpdateExpenseOrderRequest
from gestion.domain.requests import CreateExpenseAuthRequest, ReviewRequest
from gestion.domain.work_order import CreateWorkOrderRequest, WorkOrderSupplyInput
from gestion.models import ExpenseSubcategory, ExpenseType, Notification
from gestion.services.expense_auth_request_service import ExpenseAuthRequestService
from gestion.services.expense_order_service import (
    PRODUCTION_AREAS_REQUIRE_WORK_ORDER,
    ExpenseOrderService,
)
from gestion.services.order_service import OrderService
from gestion.services.work_order_service import WorkOrderService


@pytest.fixture
def expense_category(db):
    """(expense_type_id, subcategory_id) de Materiales / Materia prima"""
    expense_type = db.query(ExpenseType).filter(ExpenseType.name == "Materiales").one()
    subcategory = db.query(ExpenseSubcategory).filter(ExpenseSubcategory.name == "Materia prima").one()
    return expense_type.id, subcategory.id


@pytest.fixture
def make_expense_order(db, expense_category, admin_user):
    expense_type_id, subcategory_id = expense_category

    def _make(**extra):
        payload = {
            "expenseTypeId": expense_type_id,
            "expenseSubcategoryId": subcategory_id,
            "authorizedToId": admin_user.id,
            "items": [
                {"quantity": 3, "name": "Resma carta", "unitPrice": 15000, "paymentMethod": "CASH"},
                {"quantity": 1, "name": "Tinta", "unitPrice": 80000, "paymentMethod": "TRANSFER"},
            ],
        }
        payload.update(extra)
        return ExpenseOrderService(db).create(CreateExpenseOrderRequest(**payload), admin_user.id)

    return _make


@pytest.fixture
def work_order(db, make_order, admin, admin_user):
    order = make_order()
    OrderService(db, storage=MagicMock()).update_status(order.id, OrderStatus.CONFIRMED, admin)
    return WorkOrderService(db).create(
        CreateWorkOrderRequest(orderId=order.id, items=[{"orderItemId": order.items[0].id}]),
        admin_user.id,
    )


class TestExpenseOrderService:

    def test_create_sums_items(self, make_expense_order):
        expense_order = make_expense_order()

        assert expense_order.status == ExpenseOrderStatus.DRAFT.value
        assert expense_order.total == Decimal("125000.00")
        assert expense_order.og_number == f"GAS-{utcnow().year}-0001"

    def test_subcategory_must_belong_to_type(self, db, make_expense_order):
        other_type = db.query(ExpenseType).filter(ExpenseType.name == "Transporte").one()

        with pytest.raises(HTTPException) as exc:
            make_expense_order(expenseTypeId=other_type.id)

        assert exc.value.status_code == 400

    def test_production_areas_need_work_order(self, make_expense_order):
        items = [{
            "quantity": 1,
            "name": "Laminado",
            "unitPrice": 1000,
            "paymentMethod": "CASH",
            "productionAreaIds": [str(uuid.uuid4())],
        }]

        with pytest.raises(HTTPException) as exc:
            make_expense_order(items=items)

        assert exc.value.detail == PRODUCTION_AREAS_REQUIRE_WORK_ORDER

    def test_production_areas_allowed_with_work_order(self, make_expense_order, work_order, production_area):
        items = [{
            "quantity": 1,
            "name": "Laminado",
            "unitPrice": 1000,
            "paymentMethod": "CASH",
            "productionAreaIds": [production_area.id],
        }]

        expense_order = make_expense_order(items=items, workOrderId=work_order.id)

        assert expense_order.work_order_id == work_order.id
        assert expense_order.items[0].production_area_ids == [production_area.id]

    def test_unknown_production_area_is_rejected(self, make_expense_order, work_order):
        missing = str(uuid.uuid4())
        items = [{
            "quantity": 1,
            "name": "Laminado",
            "unitPrice": 1000,
            "paymentMethod": "CASH",
            "productionAreaIds": [missing],
        }]

        with pytest.raises(HTTPException) as exc:
            make_expense_order(items=items, workOrderId=work_order.id)

        assert exc.value.status_code == 400
        assert exc.value.detail == f"Áreas de producción no encontradas: {missing}"

    def test_update_replaces_items_with_defaults(self, db, make_expense_order):
        expense_order = make_expense_order()

        updated = ExpenseOrderService(db).update(
            expense_order.id, UpdateExpenseOrderRequest(items=[{"name": "Sin precio"}])
        )

        assert len(updated.items) == 1
        assert updated.items[0].payment_method == "CASH"
        assert updated.total == Decimal("0.00")

    def test_invalid_transition(self, db, make_expense_order, admin):
        expense_order = make_expense_order()

        with pytest.raises(HTTPException) as exc:
            ExpenseOrderService(db).update_status(expense_order.id, ExpenseOrderStatus.PAID, admin)

        assert exc.value.detail == (
            "No se puede cambiar el estado de DRAFT a PAID. Transiciones permitidas: CREATED, AUTHORIZED"
        )

    def test_admin_authorizes_directly(self, db, make_expense_order, admin):
        expense_order = make_expense_order()

        authorized = ExpenseOrderService(db).update_status(expense_order.id, ExpenseOrderStatus.AUTHORIZED, admin)

        assert authorized.authorized_by_id == admin.id
        assert authorized.authorized_at is not None

    def test_user_needs_approved_request_to_authorize(self, db, make_expense_order, user):
        expense_order = make_expense_order()

        with pytest.raises(HTTPException) as exc:
            ExpenseOrderService(db).update_status(expense_order.id, ExpenseOrderStatus.AUTHORIZED, user)

        assert exc.value.status_code == 403

    def test_user_without_permission_cannot_mark_paid(self, db, make_expense_order, admin, user):
        service = ExpenseOrderService(db)
        expense_order = make_expense_order()
        service.update_status(expense_order.id, ExpenseOrderStatus.AUTHORIZED, admin)

        with pytest.raises(HTTPException) as exc:
            service.update_status(expense_order.id, ExpenseOrderStatus.PAID, user)

        assert exc.value.status_code == 403

    def test_paid_is_final(self, db, make_expense_order, admin):
        service = ExpenseOrderService(db)
        expense_order = make_expense_order()
        service.update_status(expense_order.id, ExpenseOrderStatus.AUTHORIZED, admin)
        service.update_status(expense_order.id, ExpenseOrderStatus.PAID, admin)

        with pytest.raises(HTTPException) as exc:
            service.update_status(expense_order.id, ExpenseOrderStatus.DRAFT, admin)

        assert exc.value.detail.endswith("Transiciones permitidas: ninguna")

    def test_only_draft_can_be_deleted(self, db, make_expense_order, admin):
        service = ExpenseOrderService(db)
        expense_order = make_expense_order()
        service.update_status(expense_order.id, ExpenseOrderStatus.CREATED, admin)

        with pytest.raises(HTTPException) as exc:
            service.remove(expense_order.id)

        assert exc.value.status_code == 400


class TestExpenseAuthRequests:

    def test_approved_request_lets_user_authorize(self, db, make_expense_order, user, admin):
        # Arrange
        expense_order = make_expense_order()
        service = ExpenseAuthRequestService(db)
        request = service.create(CreateExpenseAuthRequest(expenseOrderId=expense_order.id, reason="Urgente"), user)

        # Act
        service.approve(request.id, admin, ReviewRequest())
        authorized = ExpenseOrderService(db).update_status(expense_order.id, ExpenseOrderStatus.AUTHORIZED, user)

        # Assert
        assert authorized.status == ExpenseOrderStatus.AUTHORIZED.value
        assert authorized.authorized_by_id == admin.id

    def test_admins_are_notified(self, db, make_expense_order, user, admin):
        expense_order = make_expense_order()

        ExpenseAuthRequestService(db).create(CreateExpenseAuthRequest(expenseOrderId=expense_order.id), user)

        pending = db.query(Notification).filter(
            Notification.user_id == admin.id,
            Notification.type == NotificationType.EXPENSE_AUTH_REQUEST_PENDING.value,
        ).count()
        assert pending == 1

    def test_duplicate_pending_request(self, db, make_expense_order, user):
        expense_order = make_expense_order()
        service = ExpenseAuthRequestService(db)
        service.create(CreateExpenseAuthRequest(expenseOrderId=expense_order.id), user)

        with pytest.raises(HTTPException) as exc:
            service.create(CreateExpenseAuthRequest(expenseOrderId=expense_order.id), user)

        assert exc.value.status_code == 400

    def test_rejected_request_does_not_authorize(self, db, make_expense_order, user, admin):
        expense_order = make_expense_order()
        service = ExpenseAuthRequestService(db)
        request = service.create(CreateExpenseAuthRequest(expenseOrderId=expense_order.id), user)
        service.reject(request.id, admin, ReviewRequest(reviewNotes="Presupuesto agotado"))

        with pytest.raises(HTTPException) as exc:
            ExpenseOrderService(db).update_status(expense_order.id, ExpenseOrderStatus.AUTHORIZED, user)

        assert exc.value.status_code == 403
        assert service.find_pending() == []
        assert len(service.find_all()) == 1


class TestWorkOrderService:

    def test_create_copies_item_description(self, work_order):
        assert work_order.status == WorkOrderStatus.DRAFT.value
        assert work_order.work_order_number == f"OT-{utcnow().year}-0001"
        assert work_order.items[0].product_description == "Tarjetas de presentación"

    def test_draft_order_cannot_have_work_order(self, db, make_order, admin_user):
        order = make_order()

        with pytest.raises(HTTPException) as exc:
            WorkOrderService(db).create(
                CreateWorkOrderRequest(orderId=order.id, items=[{"orderItemId": order.items[0].id}]),
                admin_user.id,
            )

        assert exc.value.status_code == 400

    def test_single_active_work_order_per_order(self, db, work_order, admin_user):
        with pytest.raises(HTTPException) as exc:
            WorkOrderService(db).create(
                CreateWorkOrderRequest(
                    orderId=work_order.order_id,
                    items=[{"orderItemId": work_order.items[0].order_item_id}],
                ),
                admin_user.id,
            )

        assert exc.value.status_code == 400

    def test_cancelled_work_order_frees_the_order(self, db, work_order, admin_user):
        service = WorkOrderService(db)
        service.update_status(work_order.id, WorkOrderStatus.CANCELLED)

        replacement = service.create(
            CreateWorkOrderRequest(
                orderId=work_order.order_id,
                items=[{"orderItemId": work_order.items[0].order_item_id}],
            ),
            admin_user.id,
        )

        assert replacement.work_order_number.endswith("-0002")

    def test_status_flow(self, db, work_order):
        service = WorkOrderService(db)

        service.update_status(work_order.id, WorkOrderStatus.CONFIRMED)
        with pytest.raises(HTTPException):
            service.update_status(work_order.id, WorkOrderStatus.COMPLETED)

    def test_supplies(self, db, work_order):
        service = WorkOrderService(db)
        item = work_order.items[0]

        supply = service.add_supply(
            work_order.id, item.id, WorkOrderSupplyInput(supplyId=str(uuid.uuid4()), quantity=2)
        )
        service.remove_supply(work_order.id, item.id, supply.id)

        db.refresh(item)
        assert item.supplies == []
