"""Message repository."""

from typing import Optional, List

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from app.repositories.base import BaseRepository
from app.db.models.message import Message


class MessageRepository(BaseRepository[Message]):
	"""Repository for Message entity operations."""

	def __init__(self, db: Session, correlation_id: Optional[str] = None):
		super().__init__(db, Message, correlation_id)

	def get_conversation(self, user_a: str, user_b: str) -> List[Message]:
		"""Both directions between two users, oldest first."""
		results = (
			self.db.query(self.model)
			.filter(
				or_(
					and_(self.model.sender_id == user_a, self.model.receiver_id == user_b),
					and_(self.model.sender_id == user_b, self.model.receiver_id == user_a),
				)
			)
			.order_by(self.model.created_at.asc(), self.model.id.asc())
			.all()
		)
		self._log_operation("get_conversation", user_a=user_a, user_b=user_b, count=len(results))
		return results

	def mark_read(self, message_id: str) -> None:
		"""Flip is_read false -> true; an already-read row is left untouched."""
		self.conditional_update(
			[self.model.id == message_id, self.model.is_read.is_(False)],
			{"is_read": True},
		)
