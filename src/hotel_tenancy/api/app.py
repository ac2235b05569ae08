"""hotel-tenancy FastAPI application.

The lifespan builds the connection manager, tenant directory, reconciler
and scheduler, stores them on ``app.state`` and tears them down on exit.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from ..config.settings import HotelTenancySettings, get_settings
from ..features.billing.routers.billing_router import router as billing_router
from ..features.billing.services.reconciler import BillingReconciler
from ..features.database.repositories.connection_manager import ConnectionManager
from ..features.database.utils.connection_factory import PoolFactory
from ..features.scheduler.services.reconciliation_scheduler import ReconciliationScheduler
from ..features.tenants.services.tenant_directory import TenantDirectory
from .exception_handlers import register_exception_handlers
from .ops_router import router as ops_router

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[HotelTenancySettings] = None,
    pool_factory: Optional[PoolFactory] = None,
) -> FastAPI:
    """Create the hotel-tenancy API.

    Args:
        settings: Settings to use instead of the environment
        pool_factory: Pool factory for the connection manager (defaults to asyncpg)
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        connection_manager = ConnectionManager(settings, pool_factory=pool_factory)
        directory = TenantDirectory(connection_manager, settings=settings)
        reconciler = BillingReconciler()
        scheduler = ReconciliationScheduler(
            connection_manager, directory, reconciler=reconciler, settings=settings
        )

        app.state.settings = settings
        app.state.connection_manager = connection_manager
        app.state.directory = directory
        app.state.reconciler = reconciler
        app.state.scheduler = scheduler

        if settings.scheduler_enabled:
            scheduler.start()
        logger.info(f"{settings.app_name} {settings.app_version} started ({settings.environment})")

        try:
            yield
        finally:
            await scheduler.stop()
            await connection_manager.close_all()
            logger.info(f"{settings.app_name} stopped")

    app = FastAPI(
        title="Hotel Tenancy API",
        version=settings.app_version,
        description="Multi-tenant hotel billing reconciliation service",
        debug=settings.debug,
        lifespan=lifespan,
    )

    register_exception_handlers(app, is_production=settings.is_production)
    app.include_router(billing_router)
    app.include_router(ops_router)

    @app.get("/health")
    async def health():
        return {"status": "ok", "version": settings.app_version}

    return app
