from sqlalchemy import Column, ForeignKey, Integer, String, Text, DateTime, JSON, Index
from sqlalchemy.orm import relationship
from app.db.base_class import AuditMixin, Base, UUIDPrimaryKeyMixin


class Job(Base, UUIDPrimaryKeyMixin, AuditMixin):
	__tablename__ = "jobs"
	__table_args__ = (
		Index("ix_jobs_status_created_at", "status", "created_at"),
		Index("ix_jobs_work_type_status", "work_type", "status"),
	)

	employer_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
	title = Column(String(200), nullable=False)
	description = Column(Text, nullable=False)
	work_type = Column(String(50), nullable=False, index=True)  # mason, electrician, plumber, ...
	location = Column(String, nullable=False)
	location_lat = Column(String(32), nullable=True)
	location_lng = Column(String(32), nullable=True)
	wage_type = Column(String(16), nullable=False, default="daily")  # daily, hourly, fixed
	wage = Column(Integer, nullable=False)
	headcount = Column(Integer, nullable=False, default=1)
	skills = Column(JSON, nullable=True)
	status = Column(String(32), nullable=False, default="open", index=True)  # see app.services.lifecycle
	assigned_worker_id = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)
	started_at = Column(DateTime(timezone=True), nullable=True)
	completed_at = Column(DateTime(timezone=True), nullable=True)

	employer = relationship("User", back_populates="posted_jobs", foreign_keys=[employer_id])
	assigned_worker = relationship("User", foreign_keys=[assigned_worker_id])
	applications = relationship("JobApplication", back_populates="job")
	payment = relationship("Payment", back_populates="job", uselist=False)
