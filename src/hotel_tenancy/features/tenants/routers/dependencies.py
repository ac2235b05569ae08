"""FastAPI dependencies for tenant-scoped routes."""

import logging

from fastapi import Request

from ....core.exceptions import MainDomainError
from ..services.tenant_directory import TenantContext, TenantDirectory

logger = logging.getLogger(__name__)

TENANT_OVERRIDE_HEADER = "x-tenant-subdomain"
FORWARDED_HOST_HEADER = "x-forwarded-host"


def get_tenant_directory(request: Request) -> TenantDirectory:
    return request.app.state.directory


async def get_tenant_context(request: Request) -> TenantContext:
    """Resolve the hotel for the current request.

    Main domain -> 403, unknown or inactive hotel -> 404, unreachable
    database -> 503 (rendered by the package exception handlers).
    """
    directory = get_tenant_directory(request)
    headers = request.headers
    context = await directory.resolve_request(
        headers.get("host"),
        forwarded_host=headers.get(FORWARDED_HOST_HEADER),
        override=headers.get(TENANT_OVERRIDE_HEADER),
    )
    if context is None:
        raise MainDomainError()

    request.state.tenant = context.tenant
    return context
