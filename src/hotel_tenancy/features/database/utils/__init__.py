"""Database utilities."""

from .connection_factory import AsyncpgPoolFactory, PoolFactory

__all__ = ["AsyncpgPoolFactory", "PoolFactory"]
