"""Service dependency providers for FastAPI dependency injection."""

from fastapi import Depends, Request
from sqlalchemy.orm import Session
from typing import Optional

from app.api.dependencies.database import get_db
from app.core.config import settings
from app.razorpay.client import PaymentGateway, get_payment_gateway
from app.services.auth_services import AuthService
from app.services.user_services import UserService
from app.services.job_services import JobService
from app.services.application_services import ApplicationService
from app.services.message_services import MessageService
from app.services.payment_services import PaymentService
from app.repositories.user import UserRepository
from app.repositories.job import JobRepository
from app.repositories.job_application import JobApplicationRepository
from app.repositories.message import MessageRepository
from app.repositories.payment import PaymentRepository


def get_correlation_id(request: Request) -> Optional[str]:
	"""Extract or generate correlation ID for logging and tracing."""
	from app.core.observability import CORRELATION_HEADER, generate_correlation_id
	cid = getattr(request.state, "correlation_id", None)
	if not cid:
		cid = generate_correlation_id(request.headers.get(CORRELATION_HEADER))
		setattr(request.state, "correlation_id", cid)
	return cid


# Repository Dependencies
def get_user_repository(
	db: Session = Depends(get_db),
	correlation_id: Optional[str] = Depends(get_correlation_id)
) -> UserRepository:
	"""Provide UserRepository instance."""
	return UserRepository(db=db, correlation_id=correlation_id)


def get_job_repository(
	db: Session = Depends(get_db),
	correlation_id: Optional[str] = Depends(get_correlation_id)
) -> JobRepository:
	"""Provide JobRepository instance."""
	return JobRepository(db=db, correlation_id=correlation_id)


def get_job_application_repository(
	db: Session = Depends(get_db),
	correlation_id: Optional[str] = Depends(get_correlation_id)
) -> JobApplicationRepository:
	"""Provide JobApplicationRepository instance."""
	return JobApplicationRepository(db=db, correlation_id=correlation_id)


def get_message_repository(
	db: Session = Depends(get_db),
	correlation_id: Optional[str] = Depends(get_correlation_id)
) -> MessageRepository:
	"""Provide MessageRepository instance."""
	return MessageRepository(db=db, correlation_id=correlation_id)


def get_payment_repository(
	db: Session = Depends(get_db),
	correlation_id: Optional[str] = Depends(get_correlation_id)
) -> PaymentRepository:
	"""Provide PaymentRepository instance."""
	return PaymentRepository(db=db, correlation_id=correlation_id)


# Service Dependencies
def get_auth_service(
	user_repo: UserRepository = Depends(get_user_repository),
	correlation_id: Optional[str] = Depends(get_correlation_id)
) -> AuthService:
	"""Provide AuthService instance with user repository and correlation ID."""
	return AuthService(correlation_id=correlation_id, user_repo=user_repo)


def get_user_service(
	user_repo: UserRepository = Depends(get_user_repository),
	correlation_id: Optional[str] = Depends(get_correlation_id)
) -> UserService:
	return UserService(user_repo=user_repo, correlation_id=correlation_id)


def get_job_service(
	job_repo: JobRepository = Depends(get_job_repository),
	user_repo: UserRepository = Depends(get_user_repository),
	correlation_id: Optional[str] = Depends(get_correlation_id)
) -> JobService:
	"""Provide JobService instance with required repositories."""
	return JobService(job_repo=job_repo, user_repo=user_repo, correlation_id=correlation_id)


def get_application_service(
	application_repo: JobApplicationRepository = Depends(get_job_application_repository),
	job_repo: JobRepository = Depends(get_job_repository),
	user_repo: UserRepository = Depends(get_user_repository),
	correlation_id: Optional[str] = Depends(get_correlation_id)
) -> ApplicationService:
	"""Provide ApplicationService; the competing-applications policy comes from settings.

	Args:
		application_repo: Application repository from dependency injection
		job_repo: Job repository from dependency injection
		user_repo: User repository from dependency injection
		correlation_id: Optional correlation ID from request headers

	Returns:
		Configured ApplicationService instance
	"""
	return ApplicationService(
		application_repo=application_repo,
		job_repo=job_repo,
		user_repo=user_repo,
		auto_reject_competing=settings.AUTO_REJECT_COMPETING_APPLICATIONS,
		correlation_id=correlation_id
	)


def get_message_service(
	message_repo: MessageRepository = Depends(get_message_repository),
	user_repo: UserRepository = Depends(get_user_repository),
	job_repo: JobRepository = Depends(get_job_repository),
	correlation_id: Optional[str] = Depends(get_correlation_id)
) -> MessageService:
	return MessageService(
		message_repo=message_repo,
		user_repo=user_repo,
		job_repo=job_repo,
		correlation_id=correlation_id
	)


def get_payment_service(
	job_repo: JobRepository = Depends(get_job_repository),
	payment_repo: PaymentRepository = Depends(get_payment_repository),
	gateway: PaymentGateway = Depends(get_payment_gateway),
	correlation_id: Optional[str] = Depends(get_correlation_id)
) -> PaymentService:
	"""Provide PaymentService with the configured gateway.

	The gateway is its own dependency so tests can swap it through
	`app.dependency_overrides[get_payment_gateway]`.
	"""
	return PaymentService(
		job_repo=job_repo,
		payment_repo=payment_repo,
		gateway=gateway,
		currency=settings.PAYMENT_CURRENCY,
		wage_multiplier=settings.PAYMENT_WAGE_MULTIPLIER,
		correlation_id=correlation_id
	)
