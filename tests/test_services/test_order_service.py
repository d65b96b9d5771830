"""
Unit tests for OrderService

Totales, reglas de estado, pagos, descuentos y comprobantes.

Author: TM3
Date: 2026-01-21
"""
from decimal import Decimal
from datetime import datetime, timedelta
from unittest.mock import MagicMock

import pytest
from fastapi import HTTPException

from gestion.core.database import utcnow
from gestion.domain.enums import OrderStatus
from gestion.domain.order import (
    AddOrderItemRequest,
    ApplyDiscountRequest,
    CreatePaymentRequest,
    UpdateOrderItemRequest,
    UpdateOrderRequest,
)
from gestion.domain.storage import FileResponse
from gestion.services.order_service import OrderService


def _confirm(db, order, admin):
    return OrderService(db, storage=MagicMock()).update_status(order.id, OrderStatus.CONFIRMED, admin)


class TestOrderCreation:
    """Creación de órdenes y cálculo de totales"""

    def test_create_computes_totals_with_tax(self, make_order):
        """subtotal + 19% IVA"""
        # Act
        order = make_order()

        # Assert
        assert order.status == OrderStatus.DRAFT.value
        assert order.subtotal == Decimal("100000.00")
        assert order.tax == Decimal("19000.00")
        assert order.total == Decimal("119000.00")
        assert order.balance == Decimal("119000.00")
        assert order.items[0].sort_order == 1

    def test_create_assigns_consecutive_numbers(self, make_order):
        year = utcnow().year

        first = make_order()
        second = make_order()

        assert first.order_number == f"OP-{year}-0001"
        assert second.order_number == f"OP-{year}-0002"

    def test_create_with_initial_payment_reduces_balance(self, make_order):
        order = make_order(initialPayment={"amount": 19000, "paymentMethod": "CASH"})

        assert order.paid_amount == Decimal("19000.00")
        assert order.balance == Decimal("100000.00")
        assert len(order.payments) == 1

    def test_create_rejects_initial_payment_above_total(self, make_order):
        with pytest.raises(HTTPException) as exc:
            make_order(initialPayment={"amount": 200000, "paymentMethod": "TRANSFER"})

        assert exc.value.status_code == 400
        assert exc.value.detail == "Initial payment cannot exceed order total"

    def test_create_requires_items(self, db, sample_client, admin_user):
        from gestion.domain.order import CreateOrderRequest

        with pytest.raises(HTTPException) as exc:
            OrderService(db, storage=MagicMock()).create(
                CreateOrderRequest(clientId=sample_client.id, items=[]), admin_user.id
            )

        assert exc.value.detail == "Order must have at least one item"

    def test_create_writes_audit_log(self, db, make_order):
        order = make_order()

        logs = OrderService(db, storage=MagicMock()).find_audit_logs(order.id)

        assert [log.action for log in logs] == ["CREATE"]


class TestOrderItems:
    """Items: solo en DRAFT"""

    def test_add_item_recalculates(self, db, make_order):
        order = make_order()
        service = OrderService(db, storage=MagicMock())

        updated = service.add_item(order.id, AddOrderItemRequest(description="Volantes", quantity=10, unitPrice=1000))

        assert len(updated.items) == 2
        assert updated.subtotal == Decimal("110000.00")
        assert updated.total == Decimal("130900.00")
        assert max(item.sort_order for item in updated.items) == 2

    def test_update_item_quantity(self, db, make_order):
        order = make_order()
        item_id = order.items[0].id

        updated = OrderService(db, storage=MagicMock()).update_item(
            order.id, item_id, UpdateOrderItemRequest(quantity=1)
        )

        assert updated.subtotal == Decimal("50000.00")
        assert updated.total == Decimal("59500.00")

    def test_cannot_remove_last_item(self, db, make_order):
        order = make_order()

        with pytest.raises(HTTPException) as exc:
            OrderService(db, storage=MagicMock()).remove_item(order.id, order.items[0].id)

        assert exc.value.status_code == 400
        assert exc.value.detail == "Order must have at least one item"

    def test_unknown_item_is_404(self, db, make_order):
        order = make_order()

        with pytest.raises(HTTPException) as exc:
            OrderService(db, storage=MagicMock()).update_item(
                order.id, "00000000-0000-0000-0000-000000000000", UpdateOrderItemRequest(quantity=1)
            )

        assert exc.value.status_code == 404
        assert exc.value.detail == "Item not found in this order"

    def test_production_areas_must_exist(self, db, make_order, production_area):
        missing = "00000000-0000-0000-0000-000000000000"
        items = [{"description": "Pendones", "quantity": 1, "unitPrice": 90000, "productionAreaIds": [production_area.id]}]
        order = make_order(items=items)

        with pytest.raises(HTTPException) as created:
            make_order(items=[{**items[0], "productionAreaIds": [missing]}])
        with pytest.raises(HTTPException) as updated:
            OrderService(db, storage=MagicMock()).update_item(
                order.id, order.items[0].id, UpdateOrderItemRequest(productionAreaIds=[missing])
            )

        assert order.items[0].production_area_ids == [production_area.id]
        assert created.value.status_code == 400
        assert updated.value.detail == f"Áreas de producción no encontradas: {missing}"

    def test_items_locked_after_confirmation(self, db, make_order, admin):
        order = _confirm(db, make_order(), admin)

        with pytest.raises(HTTPException) as exc:
            OrderService(db, storage=MagicMock()).add_item(
                order.id, AddOrderItemRequest(description="Extra", quantity=1, unitPrice=10)
            )

        assert exc.value.status_code == 400


class TestOrderUpdate:

    def test_update_reconciles_items(self, db, make_order, admin):
        order = make_order(items=[
            {"description": "A", "quantity": 1, "unitPrice": 100},
            {"description": "B", "quantity": 1, "unitPrice": 200},
        ])
        keep = next(item for item in order.items if item.description == "A")

        updated = OrderService(db, storage=MagicMock()).update(
            order.id,
            UpdateOrderRequest(items=[
                {"id": keep.id, "description": "A", "quantity": 3, "unitPrice": 100},
                {"description": "C", "quantity": 1, "unitPrice": 50},
            ]),
            admin,
        )

        descriptions = sorted(item.description for item in updated.items)
        assert descriptions == ["A", "C"]
        assert updated.subtotal == Decimal("350.00")

    def test_postponing_delivery_requires_reason(self, db, make_order, admin):
        initial = datetime(2026, 3, 1, 12, 0)
        order = make_order(deliveryDate=initial.isoformat())

        with pytest.raises(HTTPException) as exc:
            OrderService(db, storage=MagicMock()).update(
                order.id, UpdateOrderRequest(deliveryDate=initial + timedelta(days=5)), admin
            )

        assert exc.value.detail == "Debe proporcionar una razón para posponer la fecha de entrega"

    def test_postponing_delivery_keeps_history(self, db, make_order, admin):
        initial = datetime(2026, 3, 1, 12, 0)
        order = make_order(deliveryDate=initial.isoformat())

        updated = OrderService(db, storage=MagicMock()).update(
            order.id,
            UpdateOrderRequest(deliveryDate=initial + timedelta(days=5), deliveryDateReason="Falta papel"),
            admin,
        )

        assert updated.previous_delivery_date == initial
        assert updated.delivery_date_reason == "Falta papel"
        assert updated.delivery_date_changed_by == admin.id

    def test_non_admin_needs_edit_permission_after_draft(self, db, make_order, admin, user):
        order = _confirm(db, make_order(), admin)

        with pytest.raises(HTTPException) as exc:
            OrderService(db, storage=MagicMock()).update(order.id, UpdateOrderRequest(notes="cambio"), user)

        assert exc.value.status_code == 403


class TestOrderStatus:

    def test_cannot_revert_to_draft(self, db, make_order, admin):
        order = _confirm(db, make_order(), admin)

        with pytest.raises(HTTPException) as exc:
            OrderService(db, storage=MagicMock()).update_status(order.id, OrderStatus.DRAFT, admin)

        assert exc.value.status_code == 400

    def test_paid_requires_zero_balance(self, db, make_order, admin):
        order = _confirm(db, make_order(), admin)

        with pytest.raises(HTTPException) as exc:
            OrderService(db, storage=MagicMock()).update_status(order.id, OrderStatus.PAID, admin)

        assert exc.value.status_code == 400
        assert exc.value.detail.startswith("No se puede cambiar al estado PAGADA con saldo pendiente")

    def test_delivered_on_credit_needs_approval_for_users(self, db, make_order, admin, user):
        order = _confirm(db, make_order(), admin)

        with pytest.raises(HTTPException) as exc:
            OrderService(db, storage=MagicMock()).update_status(order.id, OrderStatus.DELIVERED_ON_CREDIT, user)

        assert exc.value.status_code == 403

    def test_status_change_is_audited(self, db, make_order, admin):
        order = _confirm(db, make_order(), admin)

        logs = OrderService(db, storage=MagicMock()).find_audit_logs(order.id)

        assert len(logs) == 2
        assert {log.action for log in logs} == {"CREATE", "UPDATE"}

    def test_only_draft_orders_can_be_deleted(self, db, make_order, admin):
        order = _confirm(db, make_order(), admin)

        with pytest.raises(HTTPException) as exc:
            OrderService(db, storage=MagicMock()).remove(order.id, admin.id)

        assert exc.value.detail == "Only DRAFT orders can be deleted"


class TestOrderPayments:

    def test_payment_requires_confirmed_order(self, db, make_order, admin):
        order = make_order()

        with pytest.raises(HTTPException) as exc:
            OrderService(db, storage=MagicMock()).add_payment(
                order.id, CreatePaymentRequest(amount=1000, paymentMethod="CASH"), admin.id
            )

        assert exc.value.detail == "Payments can only be added to CONFIRMED or later status orders"

    def test_payment_cannot_exceed_balance(self, db, make_order, admin):
        order = _confirm(db, make_order(), admin)

        with pytest.raises(HTTPException) as exc:
            OrderService(db, storage=MagicMock()).add_payment(
                order.id, CreatePaymentRequest(amount=200000, paymentMethod="CASH"), admin.id
            )

        assert exc.value.detail == "Payment amount (200000.00) cannot exceed order balance (119000.00)"

    def test_full_payment_allows_paid(self, db, make_order, admin):
        order = _confirm(db, make_order(), admin)
        service = OrderService(db, storage=MagicMock())

        service.add_payment(order.id, CreatePaymentRequest(amount=119000, paymentMethod="TRANSFER"), admin.id)
        paid = service.update_status(order.id, OrderStatus.PAID, admin)

        assert paid.balance == Decimal("0.00")
        assert paid.status == OrderStatus.PAID.value


class TestOrderDiscounts:

    def test_discount_reduces_total(self, db, make_order, admin):
        order = _confirm(db, make_order(), admin)
        service = OrderService(db, storage=MagicMock())

        discount = service.apply_discount(order.id, ApplyDiscountRequest(amount=9000, reason="Cliente frecuente"), admin.id)
        refreshed = service.find_one(order.id)

        assert discount.amount == Decimal("9000.00")
        assert refreshed.total == Decimal("110000.00")
        assert refreshed.balance == Decimal("110000.00")

    def test_discount_cannot_exceed_subtotal_plus_tax(self, db, make_order, admin):
        order = _confirm(db, make_order(), admin)

        with pytest.raises(HTTPException) as exc:
            OrderService(db, storage=MagicMock()).apply_discount(
                order.id, ApplyDiscountRequest(amount=119001, reason="Error"), admin.id
            )

        assert exc.value.status_code == 400

    def test_remove_discount_restores_total(self, db, make_order, admin):
        order = _confirm(db, make_order(), admin)
        service = OrderService(db, storage=MagicMock())
        discount = service.apply_discount(order.id, ApplyDiscountRequest(amount=1000, reason="Promo"), admin.id)

        restored = service.remove_discount(order.id, discount.id)

        assert restored.total == Decimal("119000.00")
        assert restored.discounts == []


class TestPaymentReceipts:

    def _payment(self, db, make_order, admin):
        order = _confirm(db, make_order(), admin)
        payment = OrderService(db, storage=MagicMock()).add_payment(
            order.id, CreatePaymentRequest(amount=1000, paymentMethod="CASH"), admin.id
        )
        return order, payment

    def test_upload_receipt_links_file(self, db, make_order, admin):
        # Arrange
        order, payment = self._payment(db, make_order, admin)
        storage = MagicMock()
        storage.upload_file.return_value = FileResponse(
            id="file-1",
            original_name="recibo.pdf",
            file_name="123-recibo.pdf",
            mime_type="application/pdf",
            size=3,
            s3_key="development/payment/x/123-recibo.pdf",
            s3_bucket="test-bucket",
        )

        # Act
        result = OrderService(db, storage=storage).upload_payment_receipt(
            order.id, payment.id, b"pdf", "recibo.pdf", "application/pdf", admin.id
        )

        # Assert
        assert result["message"] == "Receipt uploaded successfully"
        storage.upload_file.assert_called_once()
        assert storage.upload_file.call_args.kwargs["entity_type"] == "payment"
        db.refresh(payment)
        assert payment.receipt_file_id == "file-1"

    def test_delete_receipt_without_file(self, db, make_order, admin):
        order, payment = self._payment(db, make_order, admin)

        with pytest.raises(HTTPException) as exc:
            OrderService(db, storage=MagicMock()).delete_payment_receipt(order.id, payment.id)

        assert exc.value.detail == "Payment does not have a receipt"
