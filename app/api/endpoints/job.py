from typing import List, Optional

from fastapi import Depends, Query, status
from app.api.router import create_router
from sqlalchemy.orm import Session
from app.api.dependencies.auth import require_roles
from app.api.dependencies.database import get_db
from app.api.dependencies.services import get_application_service, get_job_service
from app.core.security import Principal
from app.services.application_services import ApplicationService
from app.services.job_services import JobService
from app.schemas.application import ApplicationDetail
from app.schemas.job import JobAssign, JobCreate, JobRead, JobStatus, JobStatusUpdate


router = create_router(name="job")

employer_only = require_roles("employer")


@router.get("", response_model=List[JobRead])
def list_jobs(
	work_type: Optional[str] = Query(default=None, alias="workType"),
	location: Optional[str] = Query(default=None),
	status: JobStatus = Query(default=JobStatus.OPEN),
	job_service: JobService = Depends(get_job_service),
):
	return job_service.list_jobs(work_type=work_type, location=location, status=status)


@router.get("/{job_id}", response_model=JobRead)
def get_job(job_id: str, job_service: JobService = Depends(get_job_service)):
	return job_service.get_job(job_id)


@router.post("", response_model=JobRead, status_code=status.HTTP_201_CREATED)
def create_job(
	job_in: JobCreate,
	db: Session = Depends(get_db),
	principal: Principal = Depends(employer_only),
	job_service: JobService = Depends(get_job_service),
):
	return job_service.create_job(job_in, principal, db)


@router.patch("/{job_id}/status", response_model=JobRead)
def update_job_status(
	job_id: str,
	body: JobStatusUpdate,
	db: Session = Depends(get_db),
	principal: Principal = Depends(employer_only),
	job_service: JobService = Depends(get_job_service),
):
	return job_service.update_status(job_id, body.status, principal, db)


@router.post("/{job_id}/assign", response_model=JobRead)
def assign_worker(
	job_id: str,
	body: JobAssign,
	db: Session = Depends(get_db),
	principal: Principal = Depends(employer_only),
	job_service: JobService = Depends(get_job_service),
):
	return job_service.assign_worker(job_id, body.worker_id, principal, db)


@router.post("/{job_id}/complete", response_model=JobRead)
def complete_job(
	job_id: str,
	db: Session = Depends(get_db),
	principal: Principal = Depends(employer_only),
	job_service: JobService = Depends(get_job_service),
):
	return job_service.complete_job(job_id, principal, db)


@router.get("/{job_id}/applications", response_model=List[ApplicationDetail])
def list_job_applications(
	job_id: str,
	principal: Principal = Depends(require_roles("employer", "admin")),
	application_service: ApplicationService = Depends(get_application_service),
):
	return application_service.list_for_job(job_id, principal)
