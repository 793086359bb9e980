from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from .job import JobRead
from .mixin import CamelModel, TimestampModel
from .user import UserPublic


class ApplicationStatus(str, Enum):
	PENDING = "pending"
	ACCEPTED = "accepted"
	REJECTED = "rejected"
	WITHDRAWN = "withdrawn"


class ApplicationCreate(CamelModel):
	job_id: str = Field(..., min_length=1)
	worker_id: str = Field(..., min_length=1)
	message: Optional[str] = Field(default=None, max_length=2000)


class ApplicationStatusUpdate(CamelModel):
	status: ApplicationStatus

	@field_validator("status")
	@classmethod
	def not_pending(cls, v: ApplicationStatus) -> ApplicationStatus:
		if v == ApplicationStatus.PENDING:
			raise ValueError("Status must be one of: accepted, rejected, withdrawn")
		return v


class ApplicationRead(TimestampModel):
	id: str
	job_id: str
	worker_id: str
	status: ApplicationStatus
	message: Optional[str] = None


class ApplicationDetail(ApplicationRead):
	job: Optional[JobRead] = None
	worker: Optional[UserPublic] = None
