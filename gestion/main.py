"""
Gestión Comercial - Backend API
Órdenes de pedido, órdenes de trabajo, órdenes de gasto, clientes y archivos
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)

from gestion.api import (  # noqa: E402
    areas,
    audit_logs,
    auth,
    cargos,
    clients,
    commercial_channels,
    edit_requests,
    expense_auth_requests,
    expense_orders,
    expense_types,
    locations,
    notifications,
    order_timeline,
    orders,
    permissions,
    production_areas,
    roles,
    status_change_requests,
    storage,
    users,
    work_orders,
)
from gestion.core.config import settings  # noqa: E402
from gestion.core.database import SessionLocal, check_database  # noqa: E402
from gestion.services.edit_request_service import (  # noqa: E402
    expire_permissions,
    notify_expiring_permissions,
)

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


def run_edit_permission_jobs() -> None:
    """Expira permisos vencidos y avisa los que están por vencer"""
    db = SessionLocal()
    try:
        notify_expiring_permissions(db)
        expire_permissions(db)
    except Exception as e:
        db.rollback()
        logger.error(f"Edit permission job failed: {e}")
    finally:
        db.close()


async def edit_permission_loop(interval: int) -> None:
    while True:
        await asyncio.to_thread(run_edit_permission_jobs)
        await asyncio.sleep(interval)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan - startup and shutdown"""
    job_task = None
    if settings.EDIT_PERMISSION_JOB_ENABLED:
        logger.info(
            f"Starting edit permission job (every {settings.EDIT_PERMISSION_JOB_INTERVAL}s)"
        )
        job_task = asyncio.create_task(edit_permission_loop(settings.EDIT_PERMISSION_JOB_INTERVAL))

    yield

    if job_task:
        job_task.cancel()
        try:
            await job_task
        except asyncio.CancelledError:
            pass
        logger.info("Edit permission job stopped")


# Crear aplicación FastAPI
app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description=settings.API_DESCRIPTION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(auth.router, prefix=f"{API_PREFIX}/auth", tags=["Auth"])
app.include_router(users.router, prefix=f"{API_PREFIX}/users", tags=["Users"])
app.include_router(roles.router, prefix=f"{API_PREFIX}/roles", tags=["Roles"])
app.include_router(permissions.router, prefix=f"{API_PREFIX}/permissions", tags=["Permissions"])
app.include_router(areas.router, prefix=f"{API_PREFIX}/areas", tags=["Areas"])
app.include_router(cargos.router, prefix=f"{API_PREFIX}/cargos", tags=["Cargos"])
app.include_router(
    production_areas.router, prefix=f"{API_PREFIX}/production-areas", tags=["Production Areas"]
)
app.include_router(locations.router, prefix=f"{API_PREFIX}/locations", tags=["Locations"])
app.include_router(clients.router, prefix=f"{API_PREFIX}/clients", tags=["Clients"])
app.include_router(
    commercial_channels.router,
    prefix=f"{API_PREFIX}/commercial-channels",
    tags=["Commercial Channels"],
)

# Edit requests por orden antes que /orders/{order_id}
app.include_router(
    edit_requests.order_router,
    prefix=f"{API_PREFIX}/orders/{{order_id}}/edit-requests",
    tags=["Order Edit Requests"],
)
app.include_router(orders.router, prefix=f"{API_PREFIX}/orders", tags=["Orders"])
app.include_router(
    edit_requests.global_router,
    prefix=f"{API_PREFIX}/order-edit-requests",
    tags=["Order Edit Requests"],
)
app.include_router(
    status_change_requests.router,
    prefix=f"{API_PREFIX}/order-status-change-requests",
    tags=["Order Status Change Requests"],
)
app.include_router(work_orders.router, prefix=f"{API_PREFIX}/work-orders", tags=["Work Orders"])
app.include_router(expense_types.router, prefix=f"{API_PREFIX}/expense-types", tags=["Expense Types"])
app.include_router(expense_orders.router, prefix=f"{API_PREFIX}/expense-orders", tags=["Expense Orders"])
app.include_router(
    expense_auth_requests.router,
    prefix=f"{API_PREFIX}/expense-order-auth-requests",
    tags=["Expense Order Auth Requests"],
)
app.include_router(notifications.router, prefix=f"{API_PREFIX}/notifications", tags=["Notifications"])
app.include_router(storage.router, prefix=f"{API_PREFIX}/storage", tags=["Storage"])
app.include_router(audit_logs.router, prefix=f"{API_PREFIX}/audit-logs", tags=["Audit Logs"])
app.include_router(order_timeline.router, prefix=f"{API_PREFIX}/order-timeline", tags=["Order Timeline"])


@app.get("/")
async def root():
    """Endpoint raíz - Verificación de estado de la API"""
    return {
        "message": settings.API_TITLE,
        "status": "online",
        "version": settings.API_VERSION,
        "environment": settings.get_environment().value,
    }


@app.get("/health")
async def health():
    """Health check endpoint para monitoreo - tests database connectivity"""
    db_ok = check_database()
    return {
        "status": "healthy" if db_ok else "degraded",
        "version": settings.API_VERSION,
        "database": "connected" if db_ok else "disconnected",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("gestion.main:app", host=settings.API_HOST, port=settings.PORT, reload=settings.is_development())
