"""
Order Service
Órdenes de pedido (OP): creación, edición, estados, items, pagos,
comprobantes y descuentos.

Todos los cambios de montos pasan por `recalculate_totals`.

Author: TM3
Date: 2026-01-14
"""
import logging
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from gestion.core.auth import AuthenticatedUser
from gestion.core.database import naive_utc, utcnow
from gestion.domain.base import page_of
from gestion.domain.enums import ConsecutiveType, OrderStatus
from gestion.domain.order import (
    AddOrderItemRequest,
    ApplyDiscountRequest,
    CreateOrderItem,
    CreateOrderRequest,
    CreatePaymentRequest,
    InitialPayment,
    UpdateOrderItemRequest,
    UpdateOrderRequest,
)
from gestion.domain.storage import FileResponse
from gestion.models import AuditLog, Order, OrderDiscount, OrderItem, Payment
from gestion.repositories import (
    ClientRepository,
    CommercialChannelRepository,
    OrderEditRequestRepository,
    OrderRepository,
    StatusChangeRequestRepository,
)
from gestion.services.audit_service import AuditService, snapshot_order
from gestion.services.consecutive_service import ConsecutiveService
from gestion.services.production_area_service import ProductionAreaService
from gestion.services.storage_service import StorageService

logger = logging.getLogger(__name__)


DEFAULT_TAX_RATE = Decimal("0.19")

# Estados en los que se registran pagos y descuentos
PAYABLE_STATUSES = (
    OrderStatus.CONFIRMED.value,
    OrderStatus.IN_PRODUCTION.value,
    OrderStatus.READY.value,
    OrderStatus.DELIVERED.value,
    OrderStatus.WARRANTY.value,
)


def to_money(value) -> Decimal:
    return Decimal(str(value or 0)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def recalculate_totals(order: Order) -> Order:
    """
    subtotal = Σ items, tax = subtotal × tax_rate,
    total = subtotal + tax − descuentos, balance = total − pagos
    """
    subtotal = sum((to_money(item.total) for item in order.items), Decimal("0"))
    tax_rate = Decimal(str(order.tax_rate if order.tax_rate is not None else DEFAULT_TAX_RATE))
    tax = to_money(subtotal * tax_rate)
    discount_amount = sum((to_money(d.amount) for d in order.discounts), Decimal("0"))
    total = subtotal + tax - discount_amount
    paid_amount = sum((to_money(p.amount) for p in order.payments), Decimal("0"))

    order.subtotal = subtotal
    order.tax = tax
    order.discount_amount = discount_amount
    order.total = total
    order.paid_amount = paid_amount
    order.balance = total - paid_amount
    return order


class OrderService:

    def __init__(self, db: Session, storage: StorageService = None):
        self.db = db
        self.repository = OrderRepository(db)
        self.clients = ClientRepository(db)
        self.channels = CommercialChannelRepository(db)
        self.edit_requests = OrderEditRequestRepository(db)
        self.status_requests = StatusChangeRequestRepository(db)
        self.consecutives = ConsecutiveService(db)
        self.audit = AuditService(db)
        self.storage = storage or StorageService(db)
        self.production_areas = ProductionAreaService(db)

    # ------------------------------------------------------------------
    # Consultas
    # ------------------------------------------------------------------

    def find_all(
        self,
        status: Optional[OrderStatus] = None,
        client_id: Optional[str] = None,
        order_date_from: Optional[datetime] = None,
        order_date_to: Optional[datetime] = None,
        page: int = 1,
        limit: int = 20,
    ) -> dict:
        orders, total = self.repository.find_with_filters(
            status=status.value if status else None,
            client_id=client_id,
            order_date_from=naive_utc(order_date_from),
            order_date_to=naive_utc(order_date_to),
            page=page,
            limit=limit,
        )
        return page_of(orders, total, page, limit)

    def find_one(self, order_id: str) -> Order:
        order = self.repository.get_by_id(order_id)
        if not order:
            raise HTTPException(status_code=404, detail=f"Order with ID {order_id} not found")
        return order

    def find_audit_logs(self, order_id: str) -> List[AuditLog]:
        self.find_one(order_id)
        return self.audit.find_by_order(order_id)

    # ------------------------------------------------------------------
    # Crear / editar / eliminar
    # ------------------------------------------------------------------

    def create(self, data: CreateOrderRequest, user_id: str) -> Order:
        if not data.items:
            raise HTTPException(status_code=400, detail="Order must have at least one item")
        self._check_references(data.client_id, data.commercial_channel_id)
        self._check_production_areas(data.items)

        order = Order(
            order_number=self.consecutives.generate_number(ConsecutiveType.ORDER),
            client_id=data.client_id,
            commercial_channel_id=data.commercial_channel_id,
            created_by_id=user_id,
            order_date=utcnow(),
            delivery_date=naive_utc(data.delivery_date),
            status=OrderStatus.DRAFT.value,
            tax_rate=DEFAULT_TAX_RATE,
            notes=data.notes,
        )
        for index, item in enumerate(data.items, start=1):
            order.items.append(self._build_item(item, index))

        recalculate_totals(order)

        if data.initial_payment:
            if to_money(data.initial_payment.amount) > order.total:
                raise HTTPException(status_code=400, detail="Initial payment cannot exceed order total")
            order.payments.append(self._build_initial_payment(data.initial_payment, user_id))
            recalculate_totals(order)

        self.repository.create(order)
        self.audit.log_order_change("CREATE", order.id, None, snapshot_order(order), user_id)
        self.db.commit()
        self.db.refresh(order)
        logger.info(f"Order created: {order.order_number} (total {order.total})")
        return order

    def ensure_can_edit(self, order: Order, user: AuthenticatedUser) -> None:
        """DRAFT, administradores o permiso de edición vigente"""
        if order.status == OrderStatus.DRAFT.value or user.is_admin:
            return
        if self.edit_requests.find_active_permission(order.id, user.id, utcnow()):
            return
        raise HTTPException(
            status_code=403,
            detail="No tienes permiso para editar esta orden. Solicita permiso al administrador."
        )

    def update(self, order_id: str, data: UpdateOrderRequest, user: AuthenticatedUser) -> Order:
        order = self.find_one(order_id)
        self.ensure_can_edit(order, user)
        old_values = snapshot_order(order)

        if data.client_id or data.commercial_channel_id:
            self._check_references(data.client_id, data.commercial_channel_id)
            if data.client_id:
                order.client_id = data.client_id
            if data.commercial_channel_id:
                order.commercial_channel_id = data.commercial_channel_id

        if data.delivery_date:
            self._change_delivery_date(order, naive_utc(data.delivery_date), data.delivery_date_reason, user.id)

        if "notes" in data.model_fields_set:
            order.notes = data.notes

        if data.items is not None:
            self._check_production_areas(data.items)
            self._reconcile_items(order, data.items)

        if data.initial_payment:
            self._apply_initial_payment(order, data.initial_payment, user.id)

        recalculate_totals(order)
        self.db.flush()
        self.audit.log_order_change("UPDATE", order.id, old_values, snapshot_order(order), user.id)
        self.db.commit()
        self.db.refresh(order)
        logger.info(f"Order updated: {order.order_number}")
        return order

    def update_status(self, order_id: str, status: OrderStatus, user: AuthenticatedUser) -> Order:
        order = self.find_one(order_id)

        if status == OrderStatus.DRAFT and order.status != OrderStatus.DRAFT.value:
            raise HTTPException(
                status_code=400,
                detail=(
                    "No se puede revertir el estado de la orden a BORRADOR. "
                    "Por favor, use el flujo de solicitud de edición para modificar la orden."
                )
            )

        if status in (OrderStatus.PAID, OrderStatus.DELIVERED) and to_money(order.balance) > 0:
            label = "PAGADA" if status == OrderStatus.PAID else "ENTREGADA"
            raise HTTPException(
                status_code=400,
                detail=(
                    f"No se puede cambiar al estado {label} con saldo pendiente. "
                    f"Saldo actual: ${to_money(order.balance)}. "
                    "Use el estado DELIVERED_ON_CREDIT (Entregado a Crédito) o complete los pagos primero."
                )
            )

        if status == OrderStatus.DELIVERED_ON_CREDIT and not user.is_admin:
            if not self.status_requests.find_approved_for(order.id, user.id, status.value):
                raise HTTPException(
                    status_code=403,
                    detail=(
                        "Este cambio de estado requiere autorización de un administrador. "
                        "Razón: Entregar a crédito requiere aprobación administrativa. "
                        "Por favor, cree una solicitud de cambio de estado."
                    )
                )

        if order.status == status.value:
            return order

        old_values = snapshot_order(order)
        order.status = status.value
        self.db.flush()
        self.audit.log_order_change("UPDATE", order.id, old_values, snapshot_order(order), user.id)
        self.db.commit()
        self.db.refresh(order)
        logger.info(f"Order {order.order_number} status: {old_values['status']} -> {status.value}")
        return order

    def remove(self, order_id: str, user_id: Optional[str] = None) -> dict:
        order = self.find_one(order_id)
        if order.status != OrderStatus.DRAFT.value:
            raise HTTPException(status_code=400, detail="Only DRAFT orders can be deleted")

        old_values = snapshot_order(order)
        self.repository.delete(order)
        self.audit.log_order_change("DELETE", order_id, old_values, None, user_id)
        self.db.commit()
        logger.info(f"Order deleted: {old_values['order_number']}")
        return {"message": "Order deleted successfully"}

    # ------------------------------------------------------------------
    # Items (solo DRAFT)
    # ------------------------------------------------------------------

    def add_item(self, order_id: str, data: AddOrderItemRequest) -> Order:
        order = self._draft_order(order_id, "Items can only be added to DRAFT orders")
        self._check_production_areas([data])
        next_sort = max((item.sort_order for item in order.items), default=0) + 1
        order.items.append(self._build_item(data, next_sort))
        return self._save_totals(order)

    def update_item(self, order_id: str, item_id: str, data: UpdateOrderItemRequest) -> Order:
        order = self._draft_order(order_id, "Items can only be modified in DRAFT orders")
        item = self._get_item(order_id, item_id)

        values = data.model_dump(exclude_unset=True)
        self.production_areas.ensure_exist(values.get("production_area_ids"))
        for key, value in values.items():
            setattr(item, key, value)
        if "quantity" in values or "unit_price" in values:
            item.total = to_money(Decimal(str(item.quantity)) * Decimal(str(item.unit_price)))

        return self._save_totals(order)

    def remove_item(self, order_id: str, item_id: str) -> Order:
        order = self._draft_order(order_id, "Items can only be removed from DRAFT orders")
        item = self._get_item(order_id, item_id)
        if len(order.items) <= 1:
            raise HTTPException(status_code=400, detail="Order must have at least one item")

        order.items.remove(item)
        return self._save_totals(order)

    # ------------------------------------------------------------------
    # Pagos
    # ------------------------------------------------------------------

    def find_payments(self, order_id: str) -> List[Payment]:
        self.find_one(order_id)
        return self.repository.find_payments(order_id)

    def add_payment(self, order_id: str, data: CreatePaymentRequest, user_id: str) -> Payment:
        order = self.find_one(order_id)
        if order.status not in PAYABLE_STATUSES:
            raise HTTPException(
                status_code=400,
                detail="Payments can only be added to CONFIRMED or later status orders"
            )

        amount = to_money(data.amount)
        if amount > to_money(order.balance):
            raise HTTPException(
                status_code=400,
                detail=f"Payment amount ({amount}) cannot exceed order balance ({to_money(order.balance)})"
            )

        payment = Payment(
            amount=amount,
            payment_method=data.payment_method.value,
            payment_date=naive_utc(data.payment_date) or utcnow(),
            reference=data.reference,
            notes=data.notes,
            receipt_file_id=data.receipt_file_id,
            received_by_id=user_id,
        )
        order.payments.append(payment)
        self._save_totals(order)
        self.db.refresh(payment)
        logger.info(f"Payment of {amount} registered on order {order.order_number}")
        return payment

    def upload_payment_receipt(
        self,
        order_id: str,
        payment_id: str,
        content: bytes,
        original_name: str,
        mime_type: str,
        user_id: str,
    ) -> dict:
        self.find_one(order_id)
        payment = self._get_payment(order_id, payment_id)

        if payment.receipt_file_id:
            self.storage.delete_file(payment.receipt_file_id, user_id)

        uploaded: FileResponse = self.storage.upload_file(
            content,
            original_name,
            mime_type,
            entity_type="payment",
            entity_id=payment_id,
            user_id=user_id,
        )
        payment.receipt_file_id = uploaded.id
        self.db.commit()
        return {"message": "Receipt uploaded successfully", "file": uploaded}

    def delete_payment_receipt(self, order_id: str, payment_id: str) -> dict:
        self.find_one(order_id)
        payment = self._get_payment(order_id, payment_id)
        if not payment.receipt_file_id:
            raise HTTPException(status_code=400, detail="Payment does not have a receipt")

        file_id = payment.receipt_file_id
        payment.receipt_file_id = None
        self.db.flush()
        self.storage.hard_delete_file(file_id)
        return {"message": "Receipt deleted successfully"}

    # ------------------------------------------------------------------
    # Descuentos
    # ------------------------------------------------------------------

    def find_discounts(self, order_id: str) -> List[OrderDiscount]:
        self.find_one(order_id)
        return self.repository.find_discounts(order_id)

    def apply_discount(self, order_id: str, data: ApplyDiscountRequest, user_id: str) -> OrderDiscount:
        order = self.find_one(order_id)
        if order.status not in PAYABLE_STATUSES:
            raise HTTPException(
                status_code=400,
                detail="Los descuentos solo pueden aplicarse a órdenes CONFIRMADAS o en estado posterior"
            )

        amount = to_money(data.amount)
        new_discount_amount = to_money(order.discount_amount) + amount
        base_total = to_money(order.subtotal) + to_money(order.tax)
        if new_discount_amount > base_total:
            raise HTTPException(
                status_code=400,
                detail=(
                    f"El descuento total ({new_discount_amount}) no puede exceder "
                    f"el subtotal + impuestos ({base_total})"
                )
            )

        discount = OrderDiscount(
            amount=amount,
            reason=data.reason,
            applied_by_id=user_id,
            applied_at=utcnow(),
        )
        order.discounts.append(discount)
        self._save_totals(order)
        self.db.refresh(discount)
        logger.info(f"Discount of {amount} applied to order {order.order_number}")
        return discount

    def remove_discount(self, order_id: str, discount_id: str) -> Order:
        order = self.find_one(order_id)
        if order.status not in PAYABLE_STATUSES:
            raise HTTPException(
                status_code=400,
                detail="Los descuentos solo pueden eliminarse de órdenes CONFIRMADAS o en estado posterior"
            )

        discount = self.repository.find_discount(order_id, discount_id)
        if not discount:
            raise HTTPException(
                status_code=404,
                detail=f"Descuento {discount_id} no encontrado para la orden {order_id}"
            )

        order.discounts.remove(discount)
        return self._save_totals(order)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _save_totals(self, order: Order) -> Order:
        recalculate_totals(order)
        self.db.commit()
        self.db.refresh(order)
        return order

    def _draft_order(self, order_id: str, message: str) -> Order:
        order = self.find_one(order_id)
        if order.status != OrderStatus.DRAFT.value:
            raise HTTPException(status_code=400, detail=message)
        return order

    def _get_item(self, order_id: str, item_id: str) -> OrderItem:
        item = self.repository.find_item(order_id, item_id)
        if not item:
            raise HTTPException(status_code=404, detail="Item not found in this order")
        return item

    def _get_payment(self, order_id: str, payment_id: str) -> Payment:
        payment = self.repository.find_payment(order_id, payment_id)
        if not payment:
            raise HTTPException(
                status_code=404,
                detail=f"Payment {payment_id} not found for order {order_id}"
            )
        return payment

    def _check_references(self, client_id: Optional[str], channel_id: Optional[str]) -> None:
        if client_id and not self.clients.get_by_id(client_id):
            raise HTTPException(status_code=404, detail=f"Cliente con ID {client_id} no encontrado")
        if channel_id and not self.channels.get_by_id(channel_id):
            raise HTTPException(
                status_code=404,
                detail=f"Canal comercial con ID {channel_id} no encontrado"
            )

    def _check_production_areas(self, items) -> None:
        self.production_areas.ensure_exist(
            area_id for item in items for area_id in (item.production_area_ids or [])
        )

    @staticmethod
    def _build_item(data, sort_order: int) -> OrderItem:
        return OrderItem(
            product_id=data.product_id,
            description=data.description,
            quantity=data.quantity,
            unit_price=to_money(data.unit_price),
            total=to_money(data.quantity * data.unit_price),
            specifications=data.specifications,
            production_area_ids=list(data.production_area_ids or []),
            sort_order=sort_order,
        )

    @staticmethod
    def _build_initial_payment(data: InitialPayment, user_id: str) -> Payment:
        return Payment(
            amount=to_money(data.amount),
            payment_method=data.payment_method.value,
            payment_date=utcnow(),
            reference=data.reference,
            notes=data.notes,
            received_by_id=user_id,
        )

    def _change_delivery_date(
        self, order: Order, new_date: datetime, reason: Optional[str], user_id: str
    ) -> None:
        current = order.delivery_date
        postpones = current is not None and new_date > current

        if postpones and not (reason and reason.strip()):
            raise HTTPException(
                status_code=400,
                detail="Debe proporcionar una razón para posponer la fecha de entrega"
            )

        if current is not None and new_date != current:
            order.previous_delivery_date = current
            order.delivery_date_changed_at = utcnow()
            order.delivery_date_changed_by = user_id
            if postpones:
                order.delivery_date_reason = reason
        order.delivery_date = new_date

    def _reconcile_items(self, order: Order, items: List[CreateOrderItem]) -> None:
        """Actualiza por id, crea los nuevos y elimina los que no vienen"""
        if not items:
            raise HTTPException(status_code=400, detail="Order must have at least one item")

        current = {item.id: item for item in order.items}
        keep_ids = {item.id for item in items if item.id and item.id in current}

        for existing in list(order.items):
            if existing.id not in keep_ids:
                order.items.remove(existing)

        next_sort = len(order.items)
        for data in items:
            if data.id and data.id in current:
                item = current[data.id]
                item.description = data.description
                item.quantity = data.quantity
                item.unit_price = to_money(data.unit_price)
                item.total = to_money(data.quantity * data.unit_price)
                item.specifications = data.specifications
                if data.product_id:
                    item.product_id = data.product_id
                if "production_area_ids" in data.model_fields_set:
                    item.production_area_ids = list(data.production_area_ids)
            else:
                next_sort += 1
                order.items.append(self._build_item(data, next_sort))

    def _apply_initial_payment(self, order: Order, data: InitialPayment, user_id: str) -> None:
        first_payment = self.repository.find_first_payment(order.id)
        if first_payment is None:
            order.payments.append(self._build_initial_payment(data, user_id))
            return

        first_payment.amount = to_money(data.amount)
        first_payment.payment_method = data.payment_method.value
        first_payment.reference = data.reference
        first_payment.notes = data.notes
        first_payment.received_by_id = user_id
