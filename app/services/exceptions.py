"""Domain-specific exceptions for service layer operations.

This module provides a structured exception hierarchy for the marketplace
services. Every exception carries an HTTP status so a single global handler
can translate it into a uniform `{status, message}` response.

Architecture:
- ServiceError: Base exception with correlation ID and context support
- Category Base Classes: ValidationError, AuthError, NotFoundError,
  ConflictError, BusinessRuleError, ExternalServiceError
- Specific Exceptions: Concrete exceptions for lifecycle and payment scenarios
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union
from http import HTTPStatus


class ErrorSeverity(Enum):
    """Error severity levels for logging and monitoring."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Error categories for classification and handling."""
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    EXTERNAL_SERVICE = "external_service"
    SYSTEM = "system"


class ServiceError(Exception):
    """Base exception for all service layer errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code for client handling
        correlation_id: Request correlation ID for tracing
        details: Additional error context (sanitized for logging)
        user_message: User-friendly message for client display
        severity: Error severity level for logging/monitoring
        category: Error category for classification
        http_status: HTTP status code for API responses
    """

    def __init__(
        self,
        message: str,
        error_code: str = "SERVICE_ERROR",
        correlation_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        user_message: Optional[str] = None,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        category: ErrorCategory = ErrorCategory.SYSTEM,
        http_status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.correlation_id = correlation_id
        self.details = details or {}
        self.user_message = user_message or message
        self.severity = severity
        self.category = category
        self.http_status = http_status

    def to_dict(self, include_sensitive: bool = False) -> Dict[str, Any]:
        """Convert exception to the API error body.

        Args:
            include_sensitive: Whether to include sensitive details

        Returns:
            Dictionary representation of the error
        """
        result = {
            "status": "error",
            "message": self.user_message,
            "errorCode": self.error_code,
        }

        if self.correlation_id:
            result["correlationId"] = self.correlation_id

        if include_sensitive and self.details:
            result["details"] = self.details

        return result

    def __str__(self) -> str:
        """String representation for logging."""
        return f"{self.error_code}: {self.message}"


# =============================================================================
# VALIDATION ERRORS
# =============================================================================

class ValidationError(ServiceError):
    """Input validation failed."""

    def __init__(
        self,
        field: str,
        message: str,
        correlation_id: Optional[str] = None,
        validation_errors: Optional[List[Dict[str, str]]] = None
    ):
        details = {"field": field, "validation_message": message}
        if validation_errors:
            details["validation_errors"] = validation_errors

        super().__init__(
            message=f"Validation failed for {field}: {message}",
            error_code="VALIDATION_ERROR",
            correlation_id=correlation_id,
            details=details,
            user_message=f"Invalid {field}: {message}",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.VALIDATION,
            http_status=HTTPStatus.BAD_REQUEST
        )


# =============================================================================
# AUTHENTICATION & AUTHORIZATION ERRORS
# =============================================================================

class AuthError(ServiceError):
    """Base class for authentication and authorization errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        correlation_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        category: ErrorCategory = ErrorCategory.AUTHENTICATION,
        http_status: HTTPStatus = HTTPStatus.UNAUTHORIZED
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            correlation_id=correlation_id,
            details=details,
            severity=ErrorSeverity.LOW,
            category=category,
            http_status=http_status
        )


class UnauthorizedError(AuthError):
    """No valid session."""

    def __init__(
        self,
        message: str = "Authentication required",
        correlation_id: Optional[str] = None
    ):
        super().__init__(
            message=message,
            error_code="UNAUTHORIZED",
            correlation_id=correlation_id
        )


class ForbiddenError(AuthError):
    """Authenticated, but the principal may not perform this operation."""

    def __init__(
        self,
        message: str = "Access denied",
        correlation_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code="FORBIDDEN",
            correlation_id=correlation_id,
            details=details,
            category=ErrorCategory.AUTHORIZATION,
            http_status=HTTPStatus.FORBIDDEN
        )


# =============================================================================
# NOT FOUND ERRORS
# =============================================================================

class NotFoundError(ServiceError):
    """Base class for resource not found errors."""

    def __init__(
        self,
        resource_type: str,
        resource_id: Union[int, str, None] = None,
        correlation_id: Optional[str] = None
    ):
        super().__init__(
            message=f"{resource_type} not found",
            error_code=f"{resource_type.upper().replace(' ', '_')}_NOT_FOUND",
            correlation_id=correlation_id,
            details={"resource_type": resource_type, "resource_id": resource_id},
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.RESOURCE_NOT_FOUND,
            http_status=HTTPStatus.NOT_FOUND
        )


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: str, correlation_id: Optional[str] = None):
        super().__init__("User", user_id, correlation_id)


class JobNotFoundError(NotFoundError):
    def __init__(self, job_id: str, correlation_id: Optional[str] = None):
        super().__init__("Job", job_id, correlation_id)


class ApplicationNotFoundError(NotFoundError):
    def __init__(self, application_id: str, correlation_id: Optional[str] = None):
        super().__init__("Application", application_id, correlation_id)


class MessageNotFoundError(NotFoundError):
    def __init__(self, message_id: str, correlation_id: Optional[str] = None):
        super().__init__("Message", message_id, correlation_id)


class PaymentNotFoundError(NotFoundError):
    def __init__(self, reference: str, correlation_id: Optional[str] = None):
        super().__init__("Payment", reference, correlation_id)


# =============================================================================
# CONFLICT ERRORS
# =============================================================================

class ConflictError(ServiceError):
    """The request conflicts with the current state of a resource."""

    def __init__(
        self,
        message: str,
        error_code: str = "CONFLICT",
        correlation_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            correlation_id=correlation_id,
            details=details,
            category=ErrorCategory.CONFLICT,
            http_status=HTTPStatus.CONFLICT
        )


class UsernameTakenError(ConflictError):
    """Username is already registered."""

    def __init__(self, username: str, correlation_id: Optional[str] = None):
        super().__init__(
            message="Username already taken",
            error_code="USERNAME_TAKEN",
            correlation_id=correlation_id,
            details={"username": username}
        )


class JobAlreadyAssignedError(ConflictError):
    """Lost the accept race: the job left 'open' before this accept landed."""

    def __init__(self, job_id: str, correlation_id: Optional[str] = None):
        super().__init__(
            message="Job is no longer open; it may already be assigned to another worker",
            error_code="JOB_ALREADY_ASSIGNED",
            correlation_id=correlation_id,
            details={"job_id": job_id}
        )


class DuplicateApplicationError(ConflictError):
    """Worker already has an active application for the job."""

    def __init__(self, job_id: str, worker_id: str, correlation_id: Optional[str] = None):
        super().__init__(
            message="You have already applied for this job",
            error_code="DUPLICATE_APPLICATION",
            correlation_id=correlation_id,
            details={"job_id": job_id, "worker_id": worker_id}
        )


# =============================================================================
# BUSINESS RULE ERRORS
# =============================================================================

class BusinessRuleError(ServiceError):
    """Valid input that violates a lifecycle guard."""

    def __init__(
        self,
        message: str,
        error_code: str = "BUSINESS_RULE_VIOLATION",
        correlation_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            correlation_id=correlation_id,
            details=details,
            severity=severity,
            category=ErrorCategory.BUSINESS_RULE,
            http_status=HTTPStatus.BAD_REQUEST
        )


class InvalidJobTransitionError(BusinessRuleError):
    """Job is not in the state the transition requires."""

    def __init__(
        self,
        job_id: str,
        expected_status: str,
        target_status: Optional[str] = None,
        correlation_id: Optional[str] = None
    ):
        super().__init__(
            message=f"Job must be in '{expected_status}' status",
            error_code="INVALID_JOB_TRANSITION",
            correlation_id=correlation_id,
            details={"job_id": job_id, "expected_status": expected_status, "target_status": target_status}
        )


class InvalidApplicationTransitionError(BusinessRuleError):
    """Application is not in the state the transition requires."""

    def __init__(
        self,
        application_id: str,
        expected_status: str,
        target_status: Optional[str] = None,
        correlation_id: Optional[str] = None
    ):
        super().__init__(
            message=f"Application must be in '{expected_status}' status",
            error_code="INVALID_APPLICATION_TRANSITION",
            correlation_id=correlation_id,
            details={"application_id": application_id, "expected_status": expected_status, "target_status": target_status}
        )


class SignatureVerificationError(BusinessRuleError):
    """Gateway callback signature does not match."""

    def __init__(self, order_id: str, correlation_id: Optional[str] = None):
        super().__init__(
            message="Payment signature verification failed",
            error_code="SIGNATURE_VERIFICATION_FAILED",
            correlation_id=correlation_id,
            details={"order_id": order_id},
            severity=ErrorSeverity.HIGH
        )


# =============================================================================
# EXTERNAL SERVICE ERRORS
# =============================================================================

class ExternalServiceError(ServiceError):
    """A third-party dependency is unreachable, erroring or disabled."""

    def __init__(
        self,
        service: str,
        reason: str,
        correlation_id: Optional[str] = None
    ):
        super().__init__(
            message=f"{service} error: {reason}",
            error_code="EXTERNAL_SERVICE_ERROR",
            correlation_id=correlation_id,
            details={"service": service, "reason": reason},
            severity=ErrorSeverity.HIGH,
            category=ErrorCategory.EXTERNAL_SERVICE,
            http_status=HTTPStatus.SERVICE_UNAVAILABLE
        )
