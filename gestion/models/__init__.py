"""
Modelos de base de datos
"""
from .user import Permission, Role, User, role_permissions
from .organization import Area, Cargo, ProductionArea
from .client import Department, City, Client, CommercialChannel
from .file import File
from .order import Consecutive, Order, OrderItem, Payment, OrderDiscount, AuditLog
from .work_order import WorkOrder, WorkOrderItem, WorkOrderItemSupply
from .expense import ExpenseType, ExpenseSubcategory, ExpenseOrder, ExpenseOrderItem
from .requests import OrderEditRequest, OrderStatusChangeRequest, ExpenseOrderAuthRequest
from .notification import Notification

__all__ = [
    "Permission",
    "Role",
    "User",
    "role_permissions",
    "Area",
    "Cargo",
    "ProductionArea",
    "Department",
    "City",
    "Client",
    "CommercialChannel",
    "File",
    "Consecutive",
    "Order",
    "OrderItem",
    "Payment",
    "OrderDiscount",
    "AuditLog",
    "WorkOrder",
    "WorkOrderItem",
    "WorkOrderItemSupply",
    "ExpenseType",
    "ExpenseSubcategory",
    "ExpenseOrder",
    "ExpenseOrderItem",
    "OrderEditRequest",
    "OrderStatusChangeRequest",
    "ExpenseOrderAuthRequest",
    "Notification",
]
