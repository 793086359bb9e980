"""Authentication service for user registration, login and session principals.

Passwords are hashed with bcrypt; a successful login yields a signed session
token that the HTTP layer places in an httpOnly cookie.
"""

from typing import Optional, Tuple
from sqlalchemy.orm import Session

from app.services.base import BaseService
from app.services.exceptions import (
    UnauthorizedError,
    UsernameTakenError,
    ValidationError
)
from app.repositories.user import UserRepository
from app.db.models.user import User
from app.core.security import Principal, create_session_token, decode_session_token, get_password_hash, verify_password
from app.schemas.user import UserCreate
from app.schemas.auth import UserLogin

INVALID_CREDENTIALS = "Invalid username or password"


class AuthService(BaseService):
    """Service class for handling user authentication operations."""

    def __init__(self, correlation_id: Optional[str] = None, **repositories):
        """Initialize authentication service.

        Args:
            correlation_id: Optional request correlation ID for logging
            **repositories: Repository instances (user_repo)
        """
        super().__init__(correlation_id)
        if repositories:
            self._set_repositories(**repositories)

        if not hasattr(self, "user_repo"):
            raise ValidationError(
                field="user_repo",
                message="UserRepository is required for AuthService",
                correlation_id=correlation_id
            )

    def register_user(self, user_in: UserCreate, db: Session) -> User:
        """Create a new user if the username is not already taken.

        Args:
            user_in: Registration data
            db: Database session for transaction management

        Returns:
            The created User

        Raises:
            UsernameTakenError: If the username is already registered
        """
        self.log_operation("register_user_attempt", role=user_in.role.value)

        def _register_operation() -> User:
            if self.user_repo.username_exists(user_in.username):
                raise UsernameTakenError(user_in.username, correlation_id=self.correlation_id)
            return self.user_repo.create_user(user_in, get_password_hash(user_in.password))

        user = self.run_in_transaction(db, _register_operation, name="register_user")
        self.log_operation("register_user_success", user_id=user.id, role=user.role)
        return user

    def authenticate(self, login_data: UserLogin) -> Tuple[User, str]:
        """Check credentials and issue a session token.

        Unknown usernames and wrong passwords fail identically.

        Returns:
            The user and a signed session token

        Raises:
            UnauthorizedError: If the credentials are invalid
        """
        user = self.user_repo.get_by_username(login_data.username)
        if not user or not verify_password(login_data.password, user.hashed_password):
            self.log_operation("authenticate_user_failed", reason="invalid_credentials")
            raise UnauthorizedError(INVALID_CREDENTIALS, correlation_id=self.correlation_id)

        token = create_session_token({"sub": user.id, "role": user.role})
        self.log_operation("authenticate_user_success", user_id=user.id)
        return user, token

    def resolve_principal(self, token: Optional[str]) -> Optional[Principal]:
        """Turn a session token into a Principal, or None when it is missing,
        invalid, expired, or names a user that no longer exists."""
        if not token:
            return None
        payload = decode_session_token(token)
        if not payload:
            return None
        user = self.user_repo.get_by_id(payload["sub"])
        if not user:
            return None
        return Principal(id=user.id, role=user.role, username=user.username)
