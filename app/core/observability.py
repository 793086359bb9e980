from __future__ import annotations

import logging
import time
import uuid
from random import random
from typing import Callable, Optional, Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.background import BackgroundTask

from app.core.config import settings
from app.db.session import SessionLocal
from app.repositories.request_log import RequestLogRepository

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


def generate_correlation_id(existing: Optional[str]) -> str:
	if existing and existing.strip():
		return existing.strip()[:64]
	return str(uuid.uuid4())


class RequestLoggingMiddleware(BaseHTTPMiddleware):
	"""Tags every request with a correlation ID and records it in request_logs."""

	async def dispatch(self, request: Request, call_next: Callable[[Request], Any]) -> Response:
		correlation_id = generate_correlation_id(request.headers.get(CORRELATION_HEADER))
		setattr(request.state, "correlation_id", correlation_id)

		start_ns = time.monotonic_ns()
		try:
			response = await call_next(request)
		except Exception:
			duration_ms = int((time.monotonic_ns() - start_ns) / 1_000_000)
			logger.exception(
				"Unhandled error while serving request",
				extra={"correlation_id": correlation_id, "method": request.method, "path": request.url.path, "duration_ms": duration_ms},
			)
			raise

		duration_ms = int((time.monotonic_ns() - start_ns) / 1_000_000)
		response.headers[CORRELATION_HEADER] = correlation_id
		logger.info(
			"%s %s -> %s",
			request.method,
			request.url.path,
			response.status_code,
			extra={"correlation_id": correlation_id, "status_code": response.status_code, "duration_ms": duration_ms},
		)

		if settings.ENABLE_REQUEST_LOGGING and _sampled_in():
			payload = _build_inbound_payload(request, correlation_id, response.status_code, duration_ms)
			response.background = _chain_background(response.background, BackgroundTask(_insert_inbound, payload))
		return response


def _sampled_in() -> bool:
	rate = float(settings.LOG_SAMPLE_RATE)
	return rate >= 1.0 or random() <= rate


def _chain_background(existing: Optional[BackgroundTask], task: BackgroundTask) -> BackgroundTask:
	if existing is None:
		return task

	async def run_both() -> None:
		await existing()
		await task()

	return BackgroundTask(run_both)


def _route_template(raw_path: str, route_path: Optional[str]) -> Optional[str]:
	"""Full template for `raw_path`, whether `route_path` is absolute or relative to its router prefix.

	Only the trailing segments belong to the route; whatever precedes them in
	`raw_path` is the mount prefix and carries no parameters.
	"""
	if route_path is None:
		return None
	route_parts = [part for part in route_path.split("/") if part]
	raw_parts = [part for part in raw_path.split("/") if part]
	if not route_parts:
		return raw_path
	if len(route_parts) > len(raw_parts):
		return route_path
	prefix = raw_parts[: len(raw_parts) - len(route_parts)]
	return "/" + "/".join(prefix + route_parts)


def _build_inbound_payload(request: Request, correlation_id: str, status_code: int, duration_ms: int) -> dict:
	# Route template and name are unavailable for 404s and early errors
	route = request.scope.get("route")
	path_template = _route_template(request.url.path, getattr(route, "path", None))
	endpoint = request.scope.get("endpoint")
	route_name = getattr(endpoint, "__name__", None) if endpoint is not None else None

	xff = request.headers.get("x-forwarded-for")
	client_ip = (xff.split(",")[0].strip() if xff else (request.client.host if request.client else None))

	auth_header = request.headers.get("authorization") or ""
	if auth_header.lower().startswith("bearer "):
		auth_type = "bearer"
	elif request.cookies.get(settings.SESSION_COOKIE_NAME):
		auth_type = "cookie"
	else:
		auth_type = "none"

	return {
		"correlation_id": correlation_id,
		"connection_type": "http",
		"method": request.method,
		"raw_path": request.url.path,
		"path_template": path_template or request.url.path,
		"route_name": route_name,
		"status_code": status_code,
		"duration_ms": duration_ms,
		"client_ip": client_ip,
		"user_agent": (request.headers.get("user-agent") or "")[:256],
		"auth_type": auth_type,
		"user_id": getattr(request.state, "user_id", None),
	}


def _insert_inbound(payload: dict) -> None:
	db = SessionLocal()
	try:
		RequestLogRepository(db).insert_inbound(payload)
	except Exception:
		db.rollback()
		logger.warning("Failed to persist inbound request log", exc_info=True, extra={"correlation_id": payload.get("correlation_id")})
	finally:
		db.close()


def log_outbound_call(provider: str, target: str, operation: str, correlation_id: Optional[str], call: Callable[[], Any]) -> Any:
	"""Execute an outbound call and record its duration and outcome.

	Args:
		provider: External provider name (e.g., razorpay)
		target: Target entity (e.g., endpoint or resource)
		operation: Operation name
		correlation_id: Correlation ID for linkage
		call: Callable that performs the operation

	Returns:
		Result of `call()`
	"""
	if not settings.ENABLE_OUTBOUND_LOGGING:
		return call()

	start_ns = time.monotonic_ns()
	error_code: Optional[str] = None
	try:
		return call()
	except Exception as e:
		error_code = type(e).__name__
		raise
	finally:
		duration_ms = int((time.monotonic_ns() - start_ns) / 1_000_000)
		payload = {
			"correlation_id": correlation_id or str(uuid.uuid4()),
			"connection_type": "http",
			"provider": provider,
			"target": target,
			"operation": operation,
			"duration_ms": duration_ms,
			"error_code": error_code,
		}
		_insert_outbound(payload)


def _insert_outbound(payload: dict) -> None:
	db = SessionLocal()
	try:
		RequestLogRepository(db).insert_outbound(payload)
	except Exception:
		db.rollback()
		logger.warning("Failed to persist outbound call log", exc_info=True, extra={"correlation_id": payload.get("correlation_id")})
	finally:
		db.close()
