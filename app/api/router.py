from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from fastapi import APIRouter, Depends


# Shared default error responses for all routers; every body is {status, message, errorCode}
DEFAULT_ERROR_RESPONSES: Dict[int, Dict[str, Any]] = {
    400: {"description": "Validation failed or lifecycle rule violated"},
    401: {"description": "Authentication required"},
    403: {"description": "Access denied"},
    404: {"description": "Not Found"},
    409: {"description": "Conflict with current resource state"},
    500: {"description": "Internal Server Error"},
}


def create_router(
    *,
    name: Optional[str] = None,
    dependencies: Optional[Sequence[Depends]] = None,
    default_responses: Optional[Dict[int, Dict[str, Any]]] = None,
    extra_responses: Optional[Dict[int, Dict[str, Any]]] = None,
) -> APIRouter:
    """Create a pre-configured APIRouter with standardized defaults.

    Args:
        name: Optional logical name for the router; useful for debugging.
        dependencies: Optional dependencies applied to all routes in the router.
        default_responses: Optional map to override default error responses.
        extra_responses: Optional responses merged on top of the defaults.

    Returns:
        Configured APIRouter instance.
    """
    responses = dict(default_responses or DEFAULT_ERROR_RESPONSES)
    if extra_responses:
        responses.update(extra_responses)
    router = APIRouter(
        dependencies=list(dependencies) if dependencies else None,
        responses=responses,
    )
    if name:
        setattr(router, "name", name)
    return router
