"""Job repository for job-related database operations."""

from datetime import datetime
from typing import Optional, List, Any

from sqlalchemy.orm import Session

from app.repositories.base import BaseRepository
from app.db.models.job import Job


class JobRepository(BaseRepository[Job]):
	"""Repository for Job entity operations."""

	def __init__(self, db: Session, correlation_id: Optional[str] = None):
		super().__init__(db, Job, correlation_id)

	def search(
		self,
		work_type: Optional[str] = None,
		location: Optional[str] = None,
		status: Optional[str] = None,
		skip: int = 0,
		limit: int = 100,
	) -> List[Job]:
		"""Filtered listing, newest first. Location is a case-insensitive substring match."""
		query = self.db.query(self.model)
		if status:
			query = query.filter(self.model.status == status)
		if work_type:
			query = query.filter(self.model.work_type == work_type)
		if location:
			query = query.filter(self.model.location.ilike(f"%{location}%"))
		results = query.order_by(self.model.created_at.desc()).offset(skip).limit(limit).all()
		self._log_operation("search", work_type=work_type, location=location, status=status, count=len(results))
		return results

	def transition_status(self, job_id: str, from_status: str, to_status: str, **fields: Any) -> bool:
		"""Move a job from `from_status` to `to_status` in one conditional UPDATE.

		Returns False when the job is missing or no longer in `from_status`.
		"""
		values = {"status": to_status, **fields}
		rowcount = self.conditional_update(
			[self.model.id == job_id, self.model.status == from_status],
			values,
		)
		self._log_operation("transition_status", job_id=job_id, from_status=from_status, to_status=to_status, applied=rowcount == 1)
		return rowcount == 1

	def assign_worker(self, job_id: str, worker_id: str, started_at: datetime) -> bool:
		"""open -> in_progress with the worker attached; exactly one caller can win."""
		rowcount = self.conditional_update(
			[
				self.model.id == job_id,
				self.model.status == "open",
				self.model.assigned_worker_id.is_(None),
			],
			{"status": "in_progress", "assigned_worker_id": worker_id, "started_at": started_at},
		)
		self._log_operation("assign_worker", job_id=job_id, worker_id=worker_id, applied=rowcount == 1)
		return rowcount == 1
