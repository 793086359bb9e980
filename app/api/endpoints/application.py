from typing import List

from fastapi import Depends, status
from app.api.router import create_router
from sqlalchemy.orm import Session
from app.api.dependencies.auth import require_roles
from app.api.dependencies.database import get_db
from app.api.dependencies.services import get_application_service
from app.core.security import Principal
from app.services.application_services import ApplicationService
from app.schemas.application import ApplicationCreate, ApplicationDetail, ApplicationRead, ApplicationStatusUpdate


router = create_router(name="application")
worker_router = create_router(name="worker")


@router.post("", response_model=ApplicationRead, status_code=status.HTTP_201_CREATED)
def apply_for_job(
	application_in: ApplicationCreate,
	db: Session = Depends(get_db),
	principal: Principal = Depends(require_roles("worker")),
	application_service: ApplicationService = Depends(get_application_service),
):
	return application_service.apply(application_in, principal, db)


@router.patch("/{application_id}/status", response_model=ApplicationRead)
def update_application_status(
	application_id: str,
	body: ApplicationStatusUpdate,
	db: Session = Depends(get_db),
	principal: Principal = Depends(require_roles("employer", "worker", "admin")),
	application_service: ApplicationService = Depends(get_application_service),
):
	"""Employers accept or reject; the applying worker withdraws.

	After an accept the job has moved to in_progress; fetch it again for the
	new state.
	"""
	return application_service.update_status(application_id, body.status, principal, db)


@worker_router.get("/{worker_id}/applications", response_model=List[ApplicationDetail])
def list_worker_applications(
	worker_id: str,
	principal: Principal = Depends(require_roles("worker", "admin")),
	application_service: ApplicationService = Depends(get_application_service),
):
	return application_service.list_for_worker(worker_id, principal)
