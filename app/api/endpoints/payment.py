from fastapi import Depends
from app.api.router import create_router
from sqlalchemy.orm import Session
from app.api.dependencies.auth import get_current_principal, require_roles
from app.api.dependencies.database import get_db
from app.api.dependencies.services import get_payment_service
from app.core.security import Principal
from app.services.payment_services import PaymentService
from app.schemas.payment import (
	CreateOrderRequest,
	CreateOrderResponse,
	PaymentFailureRequest,
	PaymentRead,
	VerifyPaymentRequest,
	VerifyPaymentResponse,
)


router = create_router(
	name="payment",
	extra_responses={503: {"description": "Payment gateway unavailable"}},
)

employer_only = require_roles("employer")


@router.post("/create-order", response_model=CreateOrderResponse)
def create_order(
	body: CreateOrderRequest,
	db: Session = Depends(get_db),
	principal: Principal = Depends(employer_only),
	payment_service: PaymentService = Depends(get_payment_service),
):
	return payment_service.create_order(body.job_id, principal, db)


@router.post("/verify", response_model=VerifyPaymentResponse)
def verify_payment(
	body: VerifyPaymentRequest,
	db: Session = Depends(get_db),
	principal: Principal = Depends(employer_only),
	payment_service: PaymentService = Depends(get_payment_service),
):
	return payment_service.verify_payment(
		body.razorpay_order_id,
		body.razorpay_payment_id,
		body.razorpay_signature,
		principal,
		db,
	)


@router.post("/fail", response_model=PaymentRead)
def record_payment_failure(
	body: PaymentFailureRequest,
	db: Session = Depends(get_db),
	principal: Principal = Depends(employer_only),
	payment_service: PaymentService = Depends(get_payment_service),
):
	return payment_service.record_failure(body.razorpay_order_id, body.reason, principal, db)


@router.get("/job/{job_id}", response_model=PaymentRead)
def get_payment_for_job(
	job_id: str,
	principal: Principal = Depends(get_current_principal),
	payment_service: PaymentService = Depends(get_payment_service),
):
	return payment_service.get_payment_for_job(job_id, principal)
