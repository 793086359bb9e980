"""Job application repository."""

from typing import Optional, List

from sqlalchemy.orm import Session, joinedload

from app.repositories.base import BaseRepository
from app.db.models.job_application import JobApplication

ACTIVE_STATUSES = ("pending", "accepted")


class JobApplicationRepository(BaseRepository[JobApplication]):
	"""Repository for JobApplication entity operations."""

	def __init__(self, db: Session, correlation_id: Optional[str] = None):
		super().__init__(db, JobApplication, correlation_id)

	def get_for_job(self, job_id: str) -> List[JobApplication]:
		results = (
			self.db.query(self.model)
			.options(joinedload(self.model.job), joinedload(self.model.worker))
			.filter(self.model.job_id == job_id)
			.order_by(self.model.created_at.desc())
			.all()
		)
		self._log_operation("get_for_job", job_id=job_id, count=len(results))
		return results

	def get_for_worker(self, worker_id: str) -> List[JobApplication]:
		results = (
			self.db.query(self.model)
			.options(joinedload(self.model.job), joinedload(self.model.worker))
			.filter(self.model.worker_id == worker_id)
			.order_by(self.model.created_at.desc())
			.all()
		)
		self._log_operation("get_for_worker", worker_id=worker_id, count=len(results))
		return results

	def get_active_for_worker_and_job(self, worker_id: str, job_id: str) -> Optional[JobApplication]:
		result = self.db.query(self.model).filter(
			self.model.worker_id == worker_id,
			self.model.job_id == job_id,
			self.model.status.in_(ACTIVE_STATUSES),
		).first()
		self._log_operation("get_active_for_worker_and_job", worker_id=worker_id, job_id=job_id, found=result is not None)
		return result

	def transition_status(self, application_id: str, from_status: str, to_status: str) -> bool:
		rowcount = self.conditional_update(
			[self.model.id == application_id, self.model.status == from_status],
			{"status": to_status},
		)
		return rowcount == 1

	def reject_pending_for_job(self, job_id: str, exclude_id: str) -> int:
		"""Reject every other pending application on the job; returns how many changed."""
		rowcount = self.conditional_update(
			[
				self.model.job_id == job_id,
				self.model.id != exclude_id,
				self.model.status == "pending",
			],
			{"status": "rejected"},
		)
		self._log_operation("reject_pending_for_job", job_id=job_id, rejected=rowcount)
		return rowcount
