"""Request-scoped principal resolution and role guards."""

from typing import Callable, Optional

from fastapi import Depends, Request

from app.api.dependencies.services import get_auth_service, get_correlation_id
from app.core.config import settings
from app.core.security import Principal
from app.services.auth_services import AuthService
from app.services.exceptions import ForbiddenError, UnauthorizedError


def _session_token(request: Request) -> Optional[str]:
	"""Session cookie first, then an `Authorization: Bearer` header."""
	token = request.cookies.get(settings.SESSION_COOKIE_NAME)
	if token:
		return token
	auth_header = request.headers.get("authorization") or ""
	if auth_header.lower().startswith("bearer "):
		return auth_header[7:].strip() or None
	return None


def get_optional_principal(
	request: Request,
	auth_service: AuthService = Depends(get_auth_service),
) -> Optional[Principal]:
	principal = auth_service.resolve_principal(_session_token(request))
	if principal:
		request.state.user_id = principal.id
	return principal


def get_current_principal(
	principal: Optional[Principal] = Depends(get_optional_principal),
	correlation_id: Optional[str] = Depends(get_correlation_id),
) -> Principal:
	if principal is None:
		raise UnauthorizedError(correlation_id=correlation_id)
	return principal


def require_roles(*roles: str) -> Callable[..., Principal]:
	"""Dependency factory: the current principal must hold one of `roles`."""
	allowed = tuple(roles)

	def _guard(
		principal: Principal = Depends(get_current_principal),
		correlation_id: Optional[str] = Depends(get_correlation_id),
	) -> Principal:
		if principal.role not in allowed:
			raise ForbiddenError(
				f"Access denied. Required role: {' or '.join(allowed)}",
				correlation_id=correlation_id,
				details={"required_roles": list(allowed), "role": principal.role},
			)
		return principal

	return _guard
