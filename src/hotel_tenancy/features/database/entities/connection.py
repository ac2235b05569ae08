"""Connection entities owned by the connection manager."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from ...hotel.repositories.models import TenantModels


@dataclass
class TenantConnectionHandle:
    """An open tenant database pool plus its bound repositories."""

    tenant_id: str
    database_name: str
    pool: Any
    models: TenantModels
    opened_at: datetime

    @property
    def is_live(self) -> bool:
        """Usable until the pool starts closing."""
        return not self.pool.is_closing()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tenant_id": self.tenant_id,
            "database_name": self.database_name,
            "opened_at": self.opened_at.isoformat(),
            "is_live": self.is_live,
        }


@dataclass
class ConnectionStats:
    """Snapshot of the connection manager."""

    main_connected: bool = False
    main_connected_at: Optional[datetime] = None
    tenant_connections: List[TenantConnectionHandle] = field(default_factory=list)
    opening: int = 0

    @property
    def open_tenant_count(self) -> int:
        return len(self.tenant_connections)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "main_connected": self.main_connected,
            "main_connected_at": self.main_connected_at.isoformat() if self.main_connected_at else None,
            "open_tenant_count": self.open_tenant_count,
            "opening": self.opening,
            "tenants": [handle.to_dict() for handle in self.tenant_connections],
        }
