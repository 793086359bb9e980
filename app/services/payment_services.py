"""Payment settlement: gateway orders, callback verification, reconciliation."""

from __future__ import annotations

from typing import Optional, Dict, Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.observability import log_outbound_call
from app.core.security import Principal
from app.services.base import BaseService
from app.services.exceptions import (
	BusinessRuleError,
	ConflictError,
	ExternalServiceError,
	ForbiddenError,
	InvalidJobTransitionError,
	JobNotFoundError,
	PaymentNotFoundError,
	SignatureVerificationError,
)
from app.repositories.job import JobRepository
from app.repositories.payment import PaymentRepository
from app.razorpay.client import GatewayError, GatewayOrder, PaymentGateway
from app.razorpay.signature import verify_signature
from app.db.models.job import Job
from app.db.models.payment import Payment
from app.schemas.job import JobStatus, WageType
from app.schemas.payment import PaymentStatus


class PaymentService(BaseService):
	"""Bridges a job awaiting payment to the gateway and reconciles the result.

	One payment row per job: creating an order again re-issues the existing
	row unless it is already completed. Verifying an order that is already
	completed with the same gateway payment id is a successful no-op.
	"""

	def __init__(
		self,
		job_repo: JobRepository,
		payment_repo: PaymentRepository,
		gateway: PaymentGateway,
		currency: str = "INR",
		wage_multiplier: int = 3,
		correlation_id: Optional[str] = None,
	):
		super().__init__(correlation_id)
		self._set_repositories(job_repo=job_repo, payment_repo=payment_repo)
		self.gateway = gateway
		self.currency = currency
		self.wage_multiplier = wage_multiplier

	def compute_amount(self, job: Job) -> int:
		multiplier = 1 if job.wage_type == WageType.FIXED.value else self.wage_multiplier
		return job.wage * job.headcount * multiplier

	def create_order(self, job_id: str, actor: Principal, db: Session) -> Dict[str, Any]:
		job = self._get_job(job_id)
		if job.employer_id != actor.id and not actor.is_admin:
			raise ForbiddenError("Only the job owner can pay for this job", correlation_id=self.correlation_id)
		if job.status != JobStatus.AWAITING_PAYMENT.value:
			raise InvalidJobTransitionError(
				job.id, JobStatus.AWAITING_PAYMENT.value, JobStatus.PAID.value, correlation_id=self.correlation_id
			)
		existing = self.payment_repo.get_by_job(job.id)
		if existing and existing.status == PaymentStatus.COMPLETED.value:
			raise BusinessRuleError(
				"Payment for this job is already completed",
				error_code="PAYMENT_ALREADY_COMPLETED",
				correlation_id=self.correlation_id,
			)

		amount = self.compute_amount(job)
		job_pk = job.id
		employer_id = job.employer_id
		worker_id = job.assigned_worker_id
		order = self._create_gateway_order(amount, receipt=f"job_{job_pk}")

		def op() -> Payment:
			payment = self.payment_repo.get_by_job(job_pk)
			if payment is None:
				return self.payment_repo.create({
					"job_id": job_pk,
					"employer_id": employer_id,
					"worker_id": worker_id,
					"amount": order.amount,
					"currency": order.currency,
					"status": PaymentStatus.PENDING.value,
					"payment_method": "razorpay",
					"razorpay_order_id": order.id,
				})
			if not self.payment_repo.reissue(payment.id, order.id, order.amount, order.currency):
				raise BusinessRuleError(
					"Payment for this job is already completed",
					error_code="PAYMENT_ALREADY_COMPLETED",
					correlation_id=self.correlation_id,
				)
			return self.payment_repo.refresh_by_id(payment.id)

		try:
			payment = self.run_in_transaction(db, op, name="create_payment_order")
		except IntegrityError as e:
			# Lost the race to insert this job's payment row
			raise ConflictError(
				"A payment order for this job is already being created",
				error_code="PAYMENT_ORDER_CONFLICT",
				correlation_id=self.correlation_id,
			) from e
		self.log_operation("create_order", job_id=job_pk, payment_id=payment.id, order_id=order.id, amount=order.amount)
		return {
			"order_id": order.id,
			"amount": order.amount,
			"currency": order.currency,
			"key_id": self.gateway.key_id,
		}

	def verify_payment(
		self,
		order_id: str,
		gateway_payment_id: str,
		signature: str,
		actor: Principal,
		db: Session,
	) -> Dict[str, Any]:
		if not self.gateway.enabled:
			raise ExternalServiceError("Payment gateway", "not configured", correlation_id=self.correlation_id)

		payment = self.payment_repo.get_by_order_id(order_id)
		if not payment:
			raise PaymentNotFoundError(order_id, correlation_id=self.correlation_id)
		if payment.employer_id != actor.id and not actor.is_admin:
			raise ForbiddenError("Only the job owner can verify this payment", correlation_id=self.correlation_id)

		if not verify_signature(self.gateway.key_secret, order_id, gateway_payment_id, signature):
			self.log_operation("verify_payment_rejected", order_id=order_id, reason="signature_mismatch")
			raise SignatureVerificationError(order_id, correlation_id=self.correlation_id)

		if payment.status == PaymentStatus.COMPLETED.value:
			if payment.razorpay_payment_id == gateway_payment_id:
				self.log_operation("verify_payment_repeat", order_id=order_id)
				return {"success": True, "message": "Payment already verified"}
			raise BusinessRuleError(
				"Payment was already completed with a different payment id",
				error_code="PAYMENT_ALREADY_COMPLETED",
				correlation_id=self.correlation_id,
			)
		if payment.status in (PaymentStatus.FAILED.value, PaymentStatus.REFUNDED.value):
			raise BusinessRuleError(
				f"Payment is '{payment.status}' and cannot be verified; create a new order",
				error_code="PAYMENT_NOT_PENDING",
				correlation_id=self.correlation_id,
			)

		payment_pk = payment.id
		job_pk = payment.job_id

		def op() -> None:
			if not self.payment_repo.complete(payment_pk, order_id, gateway_payment_id, signature, self.now()):
				raise ConflictError(
					"Payment is no longer pending for this order",
					error_code="PAYMENT_NOT_PENDING",
					correlation_id=self.correlation_id,
				)
			if not self.job_repo.transition_status(job_pk, JobStatus.AWAITING_PAYMENT.value, JobStatus.PAID.value):
				raise InvalidJobTransitionError(
					job_pk, JobStatus.AWAITING_PAYMENT.value, JobStatus.PAID.value, correlation_id=self.correlation_id
				)

		self.run_in_transaction(db, op, name="verify_payment")
		self.log_operation("verify_payment", order_id=order_id, job_id=job_pk)
		return {"success": True, "message": "Payment verified successfully"}

	def record_failure(self, order_id: str, reason: Optional[str], actor: Principal, db: Session) -> Payment:
		"""Checkout failed on the client; the job stays awaiting_payment for a new order."""
		payment = self.payment_repo.get_by_order_id(order_id)
		if not payment:
			raise PaymentNotFoundError(order_id, correlation_id=self.correlation_id)
		if payment.employer_id != actor.id and not actor.is_admin:
			raise ForbiddenError("Only the job owner can update this payment", correlation_id=self.correlation_id)
		payment_pk = payment.id

		def op() -> Payment:
			if not self.payment_repo.mark_failed(payment_pk, reason or "Payment failed"):
				raise BusinessRuleError(
					"Only pending payments can be marked as failed",
					error_code="PAYMENT_NOT_PENDING",
					correlation_id=self.correlation_id,
				)
			return self.payment_repo.refresh_by_id(payment_pk)

		failed = self.run_in_transaction(db, op, name="record_payment_failure")
		self.log_operation("record_failure", order_id=order_id, payment_id=payment_pk)
		return failed

	def get_payment_for_job(self, job_id: str, actor: Principal) -> Payment:
		job = self._get_job(job_id)
		if actor.id not in (job.employer_id, job.assigned_worker_id) and not actor.is_admin:
			raise ForbiddenError("Only the job's employer or worker can view its payment", correlation_id=self.correlation_id)
		payment = self.payment_repo.get_by_job(job.id)
		if not payment:
			raise PaymentNotFoundError(job_id, correlation_id=self.correlation_id)
		return payment

	def _create_gateway_order(self, amount: int, receipt: str) -> GatewayOrder:
		try:
			return log_outbound_call(
				self.gateway.name,
				"orders",
				"create_order",
				self.correlation_id,
				lambda: self.gateway.create_order(amount, self.currency, receipt=receipt),
			)
		except GatewayError as e:
			self.logger.error(
				"Payment gateway order creation failed",
				extra={"correlation_id": self.correlation_id, "service": self.__class__.__name__, "error": str(e)}
			)
			raise ExternalServiceError("Payment gateway", str(e), correlation_id=self.correlation_id) from e

	def _get_job(self, job_id: str) -> Job:
		job = self.job_repo.get_by_id(job_id)
		if not job:
			raise JobNotFoundError(job_id, correlation_id=self.correlation_id)
		return job
