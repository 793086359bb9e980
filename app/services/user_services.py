from typing import Optional

from sqlalchemy.orm import Session

from app.core.security import Principal
from app.services.base import BaseService
from app.services.exceptions import UserNotFoundError
from app.repositories.user import UserRepository
from app.db.models.user import User
from app.schemas.user import UserUpdate


class UserService(BaseService):
	"""Profile reads and owner-initiated profile edits. Role is never changed here."""

	def __init__(self, user_repo: UserRepository, correlation_id: Optional[str] = None):
		super().__init__(correlation_id)
		self._set_repositories(user_repo=user_repo)

	def get_profile(self, user_id: str) -> User:
		user = self.user_repo.get_by_id(user_id)
		if not user:
			raise UserNotFoundError(user_id, correlation_id=self.correlation_id)
		return user

	def update_profile(self, actor: Principal, user_in: UserUpdate, db: Session) -> User:
		fields = user_in.model_dump(exclude_unset=True)

		def op() -> User:
			user = self.user_repo.update_profile(actor.id, fields)
			if not user:
				raise UserNotFoundError(actor.id, correlation_id=self.correlation_id)
			return user

		user = self.run_in_transaction(db, op, name="update_profile")
		self.log_operation("update_profile", user_id=actor.id, fields=sorted(fields.keys()))
		return user
