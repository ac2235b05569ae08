"""
Exception handlers for the hotel-tenancy API.

Package exceptions render as ``{"error": {code, message, details, type}}``
with the status code from the HTTP mapping.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ..core.exceptions import HotelTenancyError, create_error_response, get_http_status_code

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI, is_production: bool = True) -> None:
    """Register exception handlers for the application."""

    @app.exception_handler(HotelTenancyError)
    async def hotel_tenancy_exception_handler(request: Request, exc: HotelTenancyError):
        status_code = get_http_status_code(exc)
        if status_code >= 500:
            logger.error(f"{exc.__class__.__name__} on {request.url.path}: {exc.message}")
        return JSONResponse(status_code=status_code, content=create_error_response(exc))

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        message = "An unexpected error occurred" if is_production else str(exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": message,
                    "details": {},
                    "type": exc.__class__.__name__,
                }
            },
        )
