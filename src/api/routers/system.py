"""Operational endpoints: ``/health`` and ``/info``."""

from typing import Annotated, Any, cast

from fastapi import APIRouter, Depends
from loguru import logger

from src.api.schemas.system import AppInfo, HealthStatus
from src.core.config import Settings, get_settings
from src.infrastructure.database.session import check_database_connection, get_engine

router = APIRouter(tags=["system"])


def _log_pool_usage() -> None:
    pool = cast("Any", get_engine().pool)
    logger.bind(
        metric_type="db.pool.health",
        checked_out=pool.checkedout(),
        size=pool.size(),
        overflow=pool.overflow(),
    ).info("Database pool health check")


@router.get("/health", response_model=HealthStatus)
async def health() -> HealthStatus:
    """Report liveness and whether the database answers.

    An unreachable database reports ``degraded`` with status 200.
    """
    reachable, error_msg = await check_database_connection()
    if reachable:
        _log_pool_usage()
    else:
        logger.warning("Database health check failed: {}", error_msg)
    return HealthStatus(status="healthy" if reachable else "degraded", database=reachable)


@router.get("/info", response_model=AppInfo)
async def info(settings: Annotated[Settings, Depends(get_settings)]) -> AppInfo:
    """Name, version, environment and debug flag of the running service."""
    return AppInfo(
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
        debug=settings.debug,
    )
