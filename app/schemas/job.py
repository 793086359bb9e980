from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator

from .mixin import CamelModel, TimestampModel


class JobStatus(str, Enum):
	OPEN = "open"
	IN_PROGRESS = "in_progress"
	AWAITING_PAYMENT = "awaiting_payment"
	PAID = "paid"
	COMPLETED = "completed"
	CANCELLED = "cancelled"


class WageType(str, Enum):
	DAILY = "daily"
	HOURLY = "hourly"
	FIXED = "fixed"


class JobCreate(CamelModel):
	title: str = Field(..., min_length=1, max_length=200)
	description: str = Field(..., min_length=1)
	work_type: str = Field(..., min_length=1, max_length=50)
	location: str = Field(..., min_length=1)
	location_lat: Optional[str] = Field(default=None, max_length=32)
	location_lng: Optional[str] = Field(default=None, max_length=32)
	wage_type: WageType = WageType.DAILY
	wage: int = Field(..., gt=0)
	headcount: int = Field(default=1, ge=1)
	skills: Optional[List[str]] = None

	@field_validator("title", "work_type", "location")
	@classmethod
	def not_blank(cls, v: str) -> str:
		if not v.strip():
			raise ValueError("must not be blank")
		return v.strip()


class JobRead(TimestampModel):
	id: str
	employer_id: str
	title: str
	description: str
	work_type: str
	location: str
	location_lat: Optional[str] = None
	location_lng: Optional[str] = None
	wage_type: WageType
	wage: int
	headcount: int
	skills: Optional[List[str]] = None
	status: JobStatus
	assigned_worker_id: Optional[str] = None
	started_at: Optional[datetime] = None
	completed_at: Optional[datetime] = None


class JobStatusUpdate(CamelModel):
	status: JobStatus


class JobAssign(CamelModel):
	worker_id: str = Field(..., min_length=1)
