"""
phoenix/modules/stubs.py

Router factory for resources whose mount points and auth gate exist but whose
handlers are not built yet. Every verb on the root and any subpath answers
501 behind the token guard, so clients see an explicit contract instead of 404.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from phoenix.auth_context import AuthContext, require_auth_context
from phoenix.errors import NotImplementedApi
from phoenix.logging_config import get_logger

_logger = get_logger(__name__)

STUB_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


def stub_router(prefix: str, resource: str) -> APIRouter:
    router = APIRouter(
        prefix=prefix,
        tags=[resource.lower()],
        dependencies=[Depends(require_auth_context)],
    )

    def not_implemented(request: Request, auth: AuthContext = Depends(require_auth_context)):
        _logger.info(
            "stub.called",
            resource=resource,
            method=request.method,
            path=request.url.path,
            user_id=auth.user_id,
        )
        raise NotImplementedApi(f"{resource} routes are not implemented")

    # "/{subpath:path}" also matches the bare trailing slash
    for path in ("", "/{subpath:path}"):
        router.add_api_route(
            path,
            not_implemented,
            methods=STUB_METHODS,
            name=f"{resource.lower()}_not_implemented",
            include_in_schema=False,
        )

    return router
