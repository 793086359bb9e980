"""User repository for user-related database operations."""

from typing import Optional, Dict, Any
from sqlalchemy.orm import Session

from app.repositories.base import BaseRepository
from app.db.models.user import User
from app.schemas.user import UserCreate


class UserRepository(BaseRepository[User]):
    """Repository for User entity operations."""

    def __init__(self, db: Session, correlation_id: Optional[str] = None):
        super().__init__(db, User, correlation_id)

    def get_by_username(self, username: str) -> Optional[User]:
        """Get user by username.

        Args:
            username: Login name

        Returns:
            User instance or None if not found
        """
        result = self.db.query(self.model).filter(self.model.username == username).first()
        self._log_operation("get_by_username", found=result is not None)
        return result

    def username_exists(self, username: str) -> bool:
        result = self.db.query(self.model.id).filter(self.model.username == username).first() is not None
        self._log_operation("username_exists", exists=result)
        return result

    def create_user(self, user_in: UserCreate, hashed_password: str) -> User:
        user_data = user_in.model_dump(exclude={"password"})
        user_data["role"] = user_in.role.value
        user_data["hashed_password"] = hashed_password
        return self.create(user_data)

    def update_profile(self, user_id: str, fields: Dict[str, Any]) -> Optional[User]:
        """Update the mutable profile fields; role and username never change here."""
        allowed = {k: v for k, v in fields.items() if k in {"full_name", "phone", "language", "location", "skills"}}
        return self.update(user_id, allowed)
