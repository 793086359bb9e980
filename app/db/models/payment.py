from sqlalchemy import Column, ForeignKey, Integer, String, Text, DateTime
from sqlalchemy.orm import relationship
from app.db.base_class import AuditMixin, Base, UUIDPrimaryKeyMixin


class Payment(Base, UUIDPrimaryKeyMixin, AuditMixin):
	__tablename__ = "payments"

	# One payment row per job; re-issued orders reuse it
	job_id = Column(String(36), ForeignKey("jobs.id"), nullable=False, unique=True, index=True)
	employer_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
	worker_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
	amount = Column(Integer, nullable=False)  # smallest currency unit (paise for INR)
	currency = Column(String(3), nullable=False, default="INR")
	status = Column(String(16), nullable=False, default="pending", index=True)  # pending, processing, completed, failed, refunded
	payment_method = Column(String(32), nullable=True)  # upi, razorpay, card, bank_transfer
	razorpay_order_id = Column(String(64), nullable=True, unique=True, index=True)
	razorpay_payment_id = Column(String(64), nullable=True)
	razorpay_signature = Column(String(128), nullable=True)
	failure_reason = Column(Text, nullable=True)
	paid_at = Column(DateTime(timezone=True), nullable=True)

	job = relationship("Job", back_populates="payment")
