"""Operations endpoints: connections, directory cache and scheduler."""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request, status

from ..features.database.repositories.connection_manager import ConnectionManager
from ..features.scheduler.services.reconciliation_scheduler import ReconciliationScheduler
from ..features.tenants.services.tenant_directory import TenantDirectory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ops", tags=["Operations"])


def get_connection_manager(request: Request) -> ConnectionManager:
    return request.app.state.connection_manager


def get_directory(request: Request) -> TenantDirectory:
    return request.app.state.directory


def get_scheduler(request: Request) -> ReconciliationScheduler:
    return request.app.state.scheduler


@router.get("/connections")
async def connection_stats(
    connections: ConnectionManager = Depends(get_connection_manager),
) -> Dict[str, Any]:
    """Open registry and tenant connections."""
    return connections.stats().to_dict()


@router.get("/directory")
async def directory_stats(directory: TenantDirectory = Depends(get_directory)) -> Dict[str, Any]:
    return directory.cache_stats()


@router.delete("/directory/{tenant_id}")
async def invalidate_directory_entry(
    tenant_id: str,
    directory: TenantDirectory = Depends(get_directory),
) -> Dict[str, Any]:
    """Drop one hotel from the directory cache."""
    return {"tenant_id": tenant_id, "invalidated": directory.invalidate(tenant_id)}


@router.delete("/directory")
async def clear_directory(directory: TenantDirectory = Depends(get_directory)) -> Dict[str, Any]:
    return {"cleared": directory.clear()}


@router.get("/scheduler")
async def scheduler_status(
    scheduler: ReconciliationScheduler = Depends(get_scheduler),
) -> Dict[str, Any]:
    """Task states, last runs and job health."""
    return scheduler.status()


@router.post("/scheduler/start")
async def start_scheduler(
    scheduler: ReconciliationScheduler = Depends(get_scheduler),
) -> Dict[str, Any]:
    scheduler.start()
    return {"is_running": scheduler.is_running}


@router.post("/scheduler/stop")
async def stop_scheduler(
    scheduler: ReconciliationScheduler = Depends(get_scheduler),
) -> Dict[str, Any]:
    await scheduler.stop()
    return {"is_running": scheduler.is_running}


@router.post("/reconciliation")
async def trigger_reconciliation(
    scheduler: ReconciliationScheduler = Depends(get_scheduler),
) -> Dict[str, Any]:
    """Run the hourly reconciliation pass now and return its report."""
    report = await scheduler.trigger_manual_reconciliation()
    if report is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Billing reconciliation is already running",
        )
    return report.to_dict()
