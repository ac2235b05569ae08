"""HTTP surface."""

from .app import create_app
from .exception_handlers import register_exception_handlers

__all__ = ["create_app", "register_exception_handlers"]
