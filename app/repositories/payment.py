"""Payment repository."""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from app.repositories.base import BaseRepository
from app.db.models.payment import Payment

OPEN_STATUSES = ("pending", "processing")


class PaymentRepository(BaseRepository[Payment]):
	"""Repository for Payment entity operations.

	A job owns at most one payment row (unique job_id); a new gateway order
	for the same job re-issues that row instead of adding another.
	"""

	def __init__(self, db: Session, correlation_id: Optional[str] = None):
		super().__init__(db, Payment, correlation_id)

	def get_by_job(self, job_id: str) -> Optional[Payment]:
		result = self.db.query(self.model).filter(self.model.job_id == job_id).first()
		self._log_operation("get_by_job", job_id=job_id, found=result is not None)
		return result

	def get_by_order_id(self, order_id: str) -> Optional[Payment]:
		result = self.db.query(self.model).filter(self.model.razorpay_order_id == order_id).first()
		self._log_operation("get_by_order_id", order_id=order_id, found=result is not None)
		return result

	def complete(self, payment_pk: str, order_id: str, gateway_payment_id: str, signature: str, paid_at: datetime) -> bool:
		"""Settle the row only while it still points at `order_id`; a re-issued row is left alone."""
		rowcount = self.conditional_update(
			[
				self.model.id == payment_pk,
				self.model.razorpay_order_id == order_id,
				self.model.status.in_(OPEN_STATUSES),
			],
			{
				"status": "completed",
				"razorpay_payment_id": gateway_payment_id,
				"razorpay_signature": signature,
				"paid_at": paid_at,
			},
		)
		return rowcount == 1

	def mark_failed(self, payment_pk: str, reason: Optional[str]) -> bool:
		rowcount = self.conditional_update(
			[self.model.id == payment_pk, self.model.status.in_(OPEN_STATUSES)],
			{"status": "failed", "failure_reason": reason},
		)
		return rowcount == 1

	def reissue(self, payment_pk: str, order_id: str, amount: int, currency: str) -> bool:
		"""Point a non-completed payment at a fresh gateway order."""
		rowcount = self.conditional_update(
			[self.model.id == payment_pk, self.model.status != "completed"],
			{
				"razorpay_order_id": order_id,
				"amount": amount,
				"currency": currency,
				"status": "pending",
				"razorpay_payment_id": None,
				"razorpay_signature": None,
				"failure_reason": None,
				"paid_at": None,
			},
		)
		self._log_operation("reissue", payment_id=payment_pk, order_id=order_id, applied=rowcount == 1)
		return rowcount == 1
