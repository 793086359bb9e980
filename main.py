# main.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.observability import RequestLoggingMiddleware
from app.api.endpoints import application, auth, health, job, message, payment, user
from app.services.exceptions import ServiceError
# Import all models to ensure relationships are properly resolved
from app.db import base  # noqa: F401

logging.basicConfig(
	level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
	format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger("app")

app = FastAPI(title="Daily-wage labor marketplace API")

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
	CORSMiddleware,
	allow_origins=settings.allowed_origins,
	allow_credentials=True,
	allow_methods=["*"],
	allow_headers=["*"],
	expose_headers=["X-Correlation-ID"],
)


def _correlation_id(request: Request):
	return getattr(request.state, "correlation_id", None)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
	if exc.correlation_id is None:
		exc.correlation_id = _correlation_id(request)
	log = logger.error if exc.http_status >= 500 else logger.warning
	log(
		str(exc),
		extra={
			"correlation_id": exc.correlation_id,
			"error_code": exc.error_code,
			"category": exc.category.value,
			"severity": exc.severity.value,
		},
	)
	return JSONResponse(
		status_code=int(exc.http_status),
		content=exc.to_dict(include_sensitive=not settings.is_production),
	)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
	errors = []
	for err in exc.errors():
		loc = [str(part) for part in err.get("loc", ())]
		# Drop the leading "body"/"query"/"path" segment
		path = ".".join(loc[1:]) if len(loc) > 1 else ".".join(loc)
		errors.append({"path": path, "message": err.get("msg", "Invalid value")})
	return JSONResponse(
		status_code=400,
		content={
			"status": "error",
			"message": "Validation failed",
			"errorCode": "VALIDATION_ERROR",
			"errors": errors,
		},
	)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
	return JSONResponse(
		status_code=exc.status_code,
		content={
			"status": "error",
			"message": exc.detail if isinstance(exc.detail, str) else "Request failed",
			"errorCode": f"HTTP_{exc.status_code}",
		},
		headers=getattr(exc, "headers", None),
	)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
	logger.exception("Unhandled error", extra={"correlation_id": _correlation_id(request)})
	message = "Internal server error" if settings.is_production else str(exc) or "Internal server error"
	return JSONResponse(
		status_code=500,
		content={"status": "error", "message": message, "errorCode": "INTERNAL_ERROR"},
	)


app.include_router(health.router, prefix="/api", tags=["health"])
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(user.router, prefix="/api/users", tags=["users"])
app.include_router(job.router, prefix="/api/jobs", tags=["jobs"])
app.include_router(application.router, prefix="/api/applications", tags=["applications"])
app.include_router(application.worker_router, prefix="/api/workers", tags=["applications"])
app.include_router(message.router, prefix="/api/messages", tags=["messages"])
app.include_router(payment.router, prefix="/api/payments", tags=["payments"])
