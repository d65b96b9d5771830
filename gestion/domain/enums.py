"""
Estados y catálogos fijos del sistema
"""
from enum import Enum


class OrderStatus(str, Enum):
    DRAFT = "DRAFT"
    CONFIRMED = "CONFIRMED"
    IN_PRODUCTION = "IN_PRODUCTION"
    READY = "READY"
    DELIVERED = "DELIVERED"
    DELIVERED_ON_CREDIT = "DELIVERED_ON_CREDIT"
    PAID = "PAID"
    WARRANTY = "WARRANTY"
    CANCELLED = "CANCELLED"


class PaymentMethod(str, Enum):
    CASH = "CASH"
    TRANSFER = "TRANSFER"
    CARD = "CARD"
    CHECK = "CHECK"
    CREDIT = "CREDIT"
    OTHER = "OTHER"


class WorkOrderStatus(str, Enum):
    DRAFT = "DRAFT"
    CONFIRMED = "CONFIRMED"
    IN_PRODUCTION = "IN_PRODUCTION"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class ExpenseOrderStatus(str, Enum):
    DRAFT = "DRAFT"
    CREATED = "CREATED"
    AUTHORIZED = "AUTHORIZED"
    PAID = "PAID"


class EditRequestStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    EXPIRED = "EXPIRED"


class PersonType(str, Enum):
    NATURAL = "NATURAL"
    EMPRESA = "EMPRESA"


class ConsecutiveType(str, Enum):
    ORDER = "ORDER"
    PRODUCTION = "PRODUCTION"
    EXPENSE = "EXPENSE"
    QUOTE = "QUOTE"
    WORK_ORDER = "WORK_ORDER"


class NotificationType(str, Enum):
    EDIT_REQUEST_PENDING = "EDIT_REQUEST_PENDING"
    EDIT_REQUEST_APPROVED = "EDIT_REQUEST_APPROVED"
    EDIT_REQUEST_REJECTED = "EDIT_REQUEST_REJECTED"
    EDIT_PERMISSION_EXPIRING = "EDIT_PERMISSION_EXPIRING"
    EDIT_PERMISSION_EXPIRED = "EDIT_PERMISSION_EXPIRED"
    STATUS_CHANGE_REQUEST_PENDING = "STATUS_CHANGE_REQUEST_PENDING"
    STATUS_CHANGE_REQUEST_APPROVED = "STATUS_CHANGE_REQUEST_APPROVED"
    STATUS_CHANGE_REQUEST_REJECTED = "STATUS_CHANGE_REQUEST_REJECTED"
    EXPENSE_AUTH_REQUEST_PENDING = "EXPENSE_AUTH_REQUEST_PENDING"
    EXPENSE_AUTH_REQUEST_APPROVED = "EXPENSE_AUTH_REQUEST_APPROVED"
    EXPENSE_AUTH_REQUEST_REJECTED = "EXPENSE_AUTH_REQUEST_REJECTED"


class TimelineEntityType(str, Enum):
    ORDER = "order"
    WORK_ORDER = "work-order"
    EXPENSE_ORDER = "expense-order"
