"""Job application lifecycle, including the compound accept operation."""

from __future__ import annotations

from typing import Optional, List

from sqlalchemy.orm import Session

from app.core.security import Principal
from app.services.base import BaseService
from app.services.exceptions import (
	ApplicationNotFoundError,
	BusinessRuleError,
	DuplicateApplicationError,
	ForbiddenError,
	InvalidApplicationTransitionError,
	InvalidJobTransitionError,
	JobAlreadyAssignedError,
	JobNotFoundError,
	UserNotFoundError,
)
from app.services.lifecycle import required_application_status
from app.repositories.job import JobRepository
from app.repositories.job_application import JobApplicationRepository
from app.repositories.user import UserRepository
from app.db.models.job import Job
from app.db.models.job_application import JobApplication
from app.schemas.application import ApplicationCreate, ApplicationStatus
from app.schemas.job import JobStatus
from app.schemas.user import UserRole


class ApplicationService(BaseService):
	"""Arbitrates the two writers of an application: the worker owns its
	content and may withdraw it; the job's employer accepts or rejects it.

	Accepting is one transaction: the job is claimed with a conditional
	`open -> in_progress` update first, so of two concurrent accepts on the
	same job exactly one sees an affected row and the other gets a conflict.
	"""

	def __init__(
		self,
		application_repo: JobApplicationRepository,
		job_repo: JobRepository,
		user_repo: UserRepository,
		auto_reject_competing: bool = False,
		correlation_id: Optional[str] = None,
	):
		super().__init__(correlation_id)
		self._set_repositories(application_repo=application_repo, job_repo=job_repo, user_repo=user_repo)
		self.auto_reject_competing = auto_reject_competing

	def apply(self, application_in: ApplicationCreate, actor: Principal, db: Session) -> JobApplication:
		if application_in.worker_id != actor.id and not actor.is_admin:
			raise ForbiddenError("Workers can only apply on their own behalf", correlation_id=self.correlation_id)

		def op() -> JobApplication:
			job = self._get_job(application_in.job_id)
			worker = self.user_repo.get_by_id(application_in.worker_id)
			if not worker:
				raise UserNotFoundError(application_in.worker_id, correlation_id=self.correlation_id)
			if worker.role != UserRole.WORKER.value:
				raise ForbiddenError("Only workers can apply for jobs", correlation_id=self.correlation_id)
			if job.status != JobStatus.OPEN.value:
				raise InvalidJobTransitionError(job.id, JobStatus.OPEN.value, correlation_id=self.correlation_id)
			if self.application_repo.get_active_for_worker_and_job(worker.id, job.id):
				raise DuplicateApplicationError(job.id, worker.id, correlation_id=self.correlation_id)
			return self.application_repo.create({
				"job_id": job.id,
				"worker_id": worker.id,
				"status": ApplicationStatus.PENDING.value,
				"message": application_in.message,
			})

		application = self.run_in_transaction(db, op, name="apply")
		self.log_operation("apply", application_id=application.id, job_id=application.job_id, worker_id=application.worker_id)
		return application

	def list_for_job(self, job_id: str, actor: Principal) -> List[JobApplication]:
		job = self._get_job(job_id)
		if job.employer_id != actor.id and not actor.is_admin:
			raise ForbiddenError("Only the job owner can view its applications", correlation_id=self.correlation_id)
		return self.application_repo.get_for_job(job.id)

	def list_for_worker(self, worker_id: str, actor: Principal) -> List[JobApplication]:
		if worker_id != actor.id and not actor.is_admin:
			raise ForbiddenError("Workers can only view their own applications", correlation_id=self.correlation_id)
		return self.application_repo.get_for_worker(worker_id)

	def update_status(
		self,
		application_id: str,
		status: ApplicationStatus,
		actor: Principal,
		db: Session,
	) -> JobApplication:
		application = self.application_repo.get_by_id(application_id)
		if not application:
			raise ApplicationNotFoundError(application_id, correlation_id=self.correlation_id)
		job = self._get_job(application.job_id)

		if status == ApplicationStatus.PENDING:
			raise BusinessRuleError(
				"An application cannot return to 'pending'",
				error_code="INVALID_APPLICATION_TRANSITION",
				correlation_id=self.correlation_id,
			)
		if status == ApplicationStatus.WITHDRAWN:
			if application.worker_id != actor.id and not actor.is_admin:
				raise ForbiddenError("Only the applicant can withdraw an application", correlation_id=self.correlation_id)
		elif job.employer_id != actor.id and not actor.is_admin:
			raise ForbiddenError("Only the job owner can accept or reject applications", correlation_id=self.correlation_id)

		if status == ApplicationStatus.ACCEPTED:
			return self._accept(application, job, db)
		return self._close(application, status, db)

	def _accept(self, application: JobApplication, job: Job, db: Session) -> JobApplication:
		application_id = application.id
		job_id = job.id
		worker_id = application.worker_id

		def op() -> JobApplication:
			if not self.job_repo.assign_worker(job_id, worker_id, self.now()):
				raise JobAlreadyAssignedError(job_id, correlation_id=self.correlation_id)
			expected = required_application_status(ApplicationStatus.ACCEPTED)
			if not self.application_repo.transition_status(application_id, expected.value, ApplicationStatus.ACCEPTED.value):
				raise InvalidApplicationTransitionError(
					application_id, expected.value, ApplicationStatus.ACCEPTED.value, correlation_id=self.correlation_id
				)
			if self.auto_reject_competing:
				rejected = self.application_repo.reject_pending_for_job(job_id, exclude_id=application_id)
				self.log_operation("auto_reject_competing", job_id=job_id, rejected=rejected)
			return self.application_repo.refresh_by_id(application_id)

		accepted = self.run_in_transaction(db, op, name="accept_application")
		self.log_operation("accept_application", application_id=application_id, job_id=job_id, worker_id=worker_id)
		return accepted

	def _close(self, application: JobApplication, status: ApplicationStatus, db: Session) -> JobApplication:
		application_id = application.id
		expected = required_application_status(status)

		def op() -> JobApplication:
			if not self.application_repo.transition_status(application_id, expected.value, status.value):
				raise InvalidApplicationTransitionError(
					application_id, expected.value, status.value, correlation_id=self.correlation_id
				)
			return self.application_repo.refresh_by_id(application_id)

		updated = self.run_in_transaction(db, op, name=f"application_{status.value}")
		self.log_operation("update_application_status", application_id=application_id, status=status.value)
		return updated

	def _get_job(self, job_id: str) -> Job:
		job = self.job_repo.get_by_id(job_id)
		if not job:
			raise JobNotFoundError(job_id, correlation_id=self.correlation_id)
		return job
