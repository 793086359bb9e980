from __future__ import annotations

from typing import Optional, List, Dict, Any

from sqlalchemy.orm import Session

from app.core.security import Principal
from app.services.base import BaseService
from app.services.exceptions import (
	BusinessRuleError,
	ForbiddenError,
	InvalidJobTransitionError,
	JobNotFoundError,
	UserNotFoundError,
	ValidationError,
)
from app.services.lifecycle import required_job_status
from app.repositories.job import JobRepository
from app.repositories.user import UserRepository
from app.db.models.job import Job
from app.schemas.job import JobCreate, JobStatus
from app.schemas.user import UserRole


class JobService(BaseService):
	"""Job postings and every job status transition except payment settlement."""

	def __init__(self, job_repo: JobRepository, user_repo: UserRepository, correlation_id: Optional[str] = None):
		super().__init__(correlation_id)
		self._set_repositories(job_repo=job_repo, user_repo=user_repo)

	def list_jobs(
		self,
		work_type: Optional[str] = None,
		location: Optional[str] = None,
		status: Optional[JobStatus] = None,
	) -> List[Job]:
		return self.job_repo.search(
			work_type=work_type,
			location=location,
			status=status.value if status else None,
		)

	def get_job(self, job_id: str) -> Job:
		job = self.job_repo.get_by_id(job_id)
		if not job:
			raise JobNotFoundError(job_id, correlation_id=self.correlation_id)
		return job

	def create_job(self, job_in: JobCreate, actor: Principal, db: Session) -> Job:
		def op() -> Job:
			data: Dict[str, Any] = job_in.model_dump()
			data["wage_type"] = job_in.wage_type.value
			return self.job_repo.create(data, employer_id=actor.id, status=JobStatus.OPEN.value)

		job = self.run_in_transaction(db, op, name="create_job")
		self.log_operation("create_job", job_id=job.id, employer_id=actor.id)
		return job

	def assign_worker(self, job_id: str, worker_id: str, actor: Principal, db: Session) -> Job:
		"""Direct assignment, bypassing applications: open -> in_progress."""
		def op() -> Job:
			job = self._get_owned(job_id, actor)
			worker = self.user_repo.get_by_id(worker_id)
			if not worker:
				raise UserNotFoundError(worker_id, correlation_id=self.correlation_id)
			if worker.role != UserRole.WORKER.value:
				raise ValidationError(
					field="workerId",
					message="assigned user must have the worker role",
					correlation_id=self.correlation_id,
				)
			if not self.job_repo.assign_worker(job.id, worker.id, self.now()):
				raise InvalidJobTransitionError(
					job.id, JobStatus.OPEN.value, JobStatus.IN_PROGRESS.value, correlation_id=self.correlation_id
				)
			return self.job_repo.refresh_by_id(job.id)

		job = self.run_in_transaction(db, op, name="assign_worker")
		self.log_operation("assign_worker", job_id=job_id, worker_id=worker_id)
		return job

	def complete_job(self, job_id: str, actor: Principal, db: Session) -> Job:
		"""Employer marks the work done: in_progress -> awaiting_payment."""
		return self._transition(job_id, JobStatus.AWAITING_PAYMENT, actor, db, completed_at=self.now())

	def cancel_job(self, job_id: str, actor: Principal, db: Session) -> Job:
		return self._transition(job_id, JobStatus.CANCELLED, actor, db)

	def mark_settled(self, job_id: str, actor: Principal, db: Session) -> Job:
		"""Settled outside the gateway: awaiting_payment -> completed."""
		return self._transition(job_id, JobStatus.COMPLETED, actor, db)

	def update_status(self, job_id: str, status: JobStatus, actor: Principal, db: Session) -> Job:
		if status == JobStatus.IN_PROGRESS:
			raise BusinessRuleError(
				"A job moves to 'in_progress' only by assigning a worker or accepting an application",
				error_code="ASSIGNMENT_REQUIRED",
				correlation_id=self.correlation_id,
			)
		if status == JobStatus.PAID:
			raise BusinessRuleError(
				"A job moves to 'paid' only through payment verification",
				error_code="PAYMENT_REQUIRED",
				correlation_id=self.correlation_id,
			)
		if status == JobStatus.OPEN:
			raise BusinessRuleError(
				"A job cannot return to 'open'",
				error_code="INVALID_JOB_TRANSITION",
				correlation_id=self.correlation_id,
			)
		handlers = {
			JobStatus.AWAITING_PAYMENT: self.complete_job,
			JobStatus.CANCELLED: self.cancel_job,
			JobStatus.COMPLETED: self.mark_settled,
		}
		return handlers[status](job_id, actor, db)

	def _transition(self, job_id: str, target: JobStatus, actor: Principal, db: Session, **fields: Any) -> Job:
		expected = required_job_status(target)

		def op() -> Job:
			job = self._get_owned(job_id, actor)
			if not self.job_repo.transition_status(job.id, expected.value, target.value, **fields):
				raise InvalidJobTransitionError(
					job.id, expected.value, target.value, correlation_id=self.correlation_id
				)
			return self.job_repo.refresh_by_id(job.id)

		job = self.run_in_transaction(db, op, name=f"transition_to_{target.value}")
		self.log_operation("transition", job_id=job_id, from_status=expected.value, to_status=target.value)
		return job

	def _get_owned(self, job_id: str, actor: Principal) -> Job:
		job = self.get_job(job_id)
		if job.employer_id != actor.id and not actor.is_admin:
			raise ForbiddenError("Only the employer who posted this job can change it", correlation_id=self.correlation_id)
		return job
