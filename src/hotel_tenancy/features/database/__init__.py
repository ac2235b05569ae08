"""Database feature.

- entities/: tenant connection handles and stats
- repositories/: the connection manager
- utils/: pool factory
"""

from .entities import ConnectionStats, TenantConnectionHandle
from .repositories import ConnectionManager
from .utils import AsyncpgPoolFactory, PoolFactory

__all__ = [
    "AsyncpgPoolFactory",
    "ConnectionManager",
    "ConnectionStats",
    "PoolFactory",
    "TenantConnectionHandle",
]
