"""
Repository Layer - Data Access

This layer handles all database queries over SQLAlchemy sessions.
Repositories flush; services own the transaction and commit.

Author: TM3
Date: 2026-01-14
"""
from gestion.repositories.base_repository import BaseRepository
from gestion.repositories.user_repository import UserRepository, RoleRepository, PermissionRepository
from gestion.repositories.organization_repository import (
    AreaRepository,
    CargoRepository,
    ProductionAreaRepository,
)
from gestion.repositories.client_repository import (
    ClientRepository,
    LocationRepository,
    CommercialChannelRepository,
)
from gestion.repositories.order_repository import OrderRepository, ConsecutiveRepository, AuditLogRepository
from gestion.repositories.request_repository import (
    OrderEditRequestRepository,
    StatusChangeRequestRepository,
    ExpenseAuthRequestRepository,
)
from gestion.repositories.work_order_repository import WorkOrderRepository
from gestion.repositories.expense_repository import (
    ExpenseTypeRepository,
    ExpenseSubcategoryRepository,
    ExpenseOrderRepository,
)
from gestion.repositories.file_repository import FileRepository
from gestion.repositories.notification_repository import NotificationRepository
from gestion.repositories.timeline_repository import TimelineRepository

__all__ = [
    'BaseRepository',
    'UserRepository',
    'RoleRepository',
    'PermissionRepository',
    'AreaRepository',
    'CargoRepository',
    'ProductionAreaRepository',
    'ClientRepository',
    'LocationRepository',
    'CommercialChannelRepository',
    'OrderRepository',
    'ConsecutiveRepository',
    'AuditLogRepository',
    'OrderEditRequestRepository',
    'StatusChangeRequestRepository',
    'ExpenseAuthRequestRepository',
    'WorkOrderRepository',
    'ExpenseTypeRepository',
    'ExpenseSubcategoryRepository',
    'ExpenseOrderRepository',
    'FileRepository',
    'NotificationRepository',
    'TimelineRepository',
]
