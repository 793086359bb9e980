from sqlalchemy import Column, ForeignKey, String, Text, Index
from sqlalchemy.orm import relationship
from app.db.base_class import AuditMixin, Base, UUIDPrimaryKeyMixin


class JobApplication(Base, UUIDPrimaryKeyMixin, AuditMixin):
	__tablename__ = "job_applications"
	__table_args__ = (
		Index("ix_job_applications_job_status", "job_id", "status"),
	)

	job_id = Column(String(36), ForeignKey("jobs.id"), nullable=False, index=True)
	worker_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
	status = Column(String(16), nullable=False, default="pending")  # pending, accepted, rejected, withdrawn
	message = Column(Text, nullable=True)

	job = relationship("Job", back_populates="applications")
	worker = relationship("User", back_populates="applications")
