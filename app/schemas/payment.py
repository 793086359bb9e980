from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from .mixin import CamelModel, TimestampModel


class PaymentStatus(str, Enum):
	PENDING = "pending"
	PROCESSING = "processing"
	COMPLETED = "completed"
	FAILED = "failed"
	REFUNDED = "refunded"


class CreateOrderRequest(CamelModel):
	job_id: str = Field(..., min_length=1)


class CreateOrderResponse(CamelModel):
	order_id: str
	amount: int
	currency: str
	key_id: str


class VerifyPaymentRequest(CamelModel):
	razorpay_order_id: str = Field(..., min_length=1)
	razorpay_payment_id: str = Field(..., min_length=1)
	razorpay_signature: str = Field(..., min_length=1)


class VerifyPaymentResponse(CamelModel):
	success: bool
	message: str


class PaymentFailureRequest(CamelModel):
	razorpay_order_id: str = Field(..., min_length=1)
	reason: Optional[str] = Field(default=None, max_length=500)


class PaymentRead(TimestampModel):
	id: str
	job_id: str
	employer_id: str
	worker_id: str
	amount: int
	currency: str
	status: PaymentStatus
	payment_method: Optional[str] = None
	razorpay_order_id: Optional[str] = None
	razorpay_payment_id: Optional[str] = None
	failure_reason: Optional[str] = None
	paid_at: Optional[datetime] = None
