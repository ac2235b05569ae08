"""Asyncpg pool factory.

The connection manager never calls asyncpg directly; it goes through a
pool factory so the pool source can be swapped in tests.
"""

import logging
from typing import Awaitable, Optional, Protocol

import asyncpg

from ....config.settings import HotelTenancySettings

logger = logging.getLogger(__name__)


class PoolFactory(Protocol):
    """Callable that opens a pool on ``dsn``, optionally overriding the database."""

    def __call__(self, dsn: str, database: Optional[str] = None) -> Awaitable[asyncpg.Pool]:
        ...


class AsyncpgPoolFactory:
    """Open asyncpg pools with the configured sizes and timeouts."""

    def __init__(self, settings: HotelTenancySettings):
        self._options = settings.pool_options()

    async def __call__(self, dsn: str, database: Optional[str] = None) -> asyncpg.Pool:
        kwargs = dict(self._options)
        if database:
            kwargs["database"] = database
        pool = await asyncpg.create_pool(dsn=dsn, **kwargs)
        logger.info(
            f"Created connection pool for {database or 'registry'}: "
            f"min={kwargs['min_size']}, max={kwargs['max_size']}"
        )
        return pool
