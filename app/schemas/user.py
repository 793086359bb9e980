from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator

from .mixin import CamelModel, TimestampModel


class UserRole(str, Enum):
	WORKER = "worker"
	EMPLOYER = "employer"
	NGO = "ngo"
	ADMIN = "admin"


# Admin accounts are provisioned out of band
REGISTERABLE_ROLES = (UserRole.WORKER, UserRole.EMPLOYER, UserRole.NGO)


class UserBase(CamelModel):
	full_name: str = Field(..., min_length=1, max_length=200)
	phone: str = Field(..., min_length=10, max_length=15)
	language: Optional[str] = Field(default="en", max_length=8)
	location: Optional[str] = None
	skills: Optional[List[str]] = None


class UserCreate(UserBase):
	username: str = Field(..., min_length=3, max_length=50)
	password: str = Field(..., min_length=6, max_length=100)
	role: UserRole
	national_id: Optional[str] = Field(default=None, max_length=32)

	@field_validator("username")
	@classmethod
	def strip_username(cls, v: str) -> str:
		v = v.strip()
		if len(v) < 3:
			raise ValueError("Username must be at least 3 characters")
		return v

	@field_validator("role")
	@classmethod
	def role_is_registerable(cls, v: UserRole) -> UserRole:
		if v not in REGISTERABLE_ROLES:
			raise ValueError("Role must be one of: worker, employer, ngo")
		return v


class UserUpdate(CamelModel):
	full_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
	phone: Optional[str] = Field(default=None, min_length=10, max_length=15)
	language: Optional[str] = Field(default=None, max_length=8)
	location: Optional[str] = None
	skills: Optional[List[str]] = None


class UserSummary(CamelModel):
	id: str
	username: str
	role: UserRole


class UserPublic(UserSummary):
	full_name: Optional[str] = None
	location: Optional[str] = None
	skills: Optional[List[str]] = None


class UserRead(TimestampModel):
	id: str
	username: str
	role: UserRole
	full_name: Optional[str] = None
	phone: Optional[str] = None
	language: Optional[str] = None
	location: Optional[str] = None
	skills: Optional[List[str]] = None
