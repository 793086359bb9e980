"""Job and application state machines.

Each job target status has exactly one legal predecessor:

    open -> in_progress -> awaiting_payment -> paid | completed
    open -> cancelled

Applications start `pending` and move once to `accepted`, `rejected` or
`withdrawn`; all three are terminal.
"""

from typing import Dict

from app.schemas.application import ApplicationStatus
from app.schemas.job import JobStatus

JOB_TRANSITIONS: Dict[JobStatus, JobStatus] = {
	JobStatus.IN_PROGRESS: JobStatus.OPEN,
	JobStatus.AWAITING_PAYMENT: JobStatus.IN_PROGRESS,
	JobStatus.PAID: JobStatus.AWAITING_PAYMENT,
	JobStatus.COMPLETED: JobStatus.AWAITING_PAYMENT,
	JobStatus.CANCELLED: JobStatus.OPEN,
}

APPLICATION_TRANSITIONS: Dict[ApplicationStatus, ApplicationStatus] = {
	ApplicationStatus.ACCEPTED: ApplicationStatus.PENDING,
	ApplicationStatus.REJECTED: ApplicationStatus.PENDING,
	ApplicationStatus.WITHDRAWN: ApplicationStatus.PENDING,
}


def required_job_status(target: JobStatus) -> JobStatus:
	"""Predecessor a job must be in to move to `target`."""
	try:
		return JOB_TRANSITIONS[target]
	except KeyError:
		raise ValueError(f"No transition leads to '{target.value}'")


def required_application_status(target: ApplicationStatus) -> ApplicationStatus:
	try:
		return APPLICATION_TRANSITIONS[target]
	except KeyError:
		raise ValueError(f"No transition leads to '{target.value}'")
