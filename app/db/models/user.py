from sqlalchemy import Column, String, JSON
from sqlalchemy.orm import relationship
from app.db.base_class import AuditMixin, Base, UUIDPrimaryKeyMixin

class User(Base, UUIDPrimaryKeyMixin, AuditMixin):
	__tablename__ = "users"

	username = Column(String(50), unique=True, index=True, nullable=False)
	hashed_password = Column(String, nullable=False)
	role = Column(String(16), nullable=False, default="worker", index=True)  # worker, employer, ngo, admin
	full_name = Column(String(200), nullable=True)
	phone = Column(String(15), nullable=True)
	language = Column(String(8), nullable=True, default="en")
	location = Column(String, nullable=True)
	skills = Column(JSON, nullable=True)
	national_id = Column(String(32), nullable=True)

	posted_jobs = relationship("Job", back_populates="employer", foreign_keys="Job.employer_id")
	applications = relationship("JobApplication", back_populates="worker")
