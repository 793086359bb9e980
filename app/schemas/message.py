from typing import Optional

from pydantic import Field

from .mixin import CamelModel, TimestampModel


class MessageCreate(CamelModel):
	sender_id: str = Field(..., min_length=1)
	receiver_id: str = Field(..., min_length=1)
	job_id: Optional[str] = None
	content: str = Field(..., min_length=1, max_length=5000)


class MessageRead(TimestampModel):
	id: str
	sender_id: str
	receiver_id: str
	job_id: Optional[str] = None
	content: str
	is_read: bool


class MarkReadResponse(CamelModel):
	success: bool = True
