from __future__ import annotations

from typing import Optional, List

from sqlalchemy.orm import Session

from app.core.security import Principal
from app.services.base import BaseService
from app.services.exceptions import (
	ForbiddenError,
	JobNotFoundError,
	MessageNotFoundError,
	UserNotFoundError,
	ValidationError,
)
from app.repositories.job import JobRepository
from app.repositories.message import MessageRepository
from app.repositories.user import UserRepository
from app.db.models.message import Message
from app.schemas.message import MessageCreate


class MessageService(BaseService):
	def __init__(
		self,
		message_repo: MessageRepository,
		user_repo: UserRepository,
		job_repo: JobRepository,
		correlation_id: Optional[str] = None,
	):
		super().__init__(correlation_id)
		self._set_repositories(message_repo=message_repo, user_repo=user_repo, job_repo=job_repo)

	def send_message(self, message_in: MessageCreate, actor: Principal, db: Session) -> Message:
		if message_in.sender_id != actor.id:
			raise ForbiddenError("Messages can only be sent as yourself", correlation_id=self.correlation_id)
		if message_in.receiver_id == message_in.sender_id:
			raise ValidationError("receiverId", "cannot message yourself", correlation_id=self.correlation_id)

		def op() -> Message:
			if not self.user_repo.exists(message_in.receiver_id):
				raise UserNotFoundError(message_in.receiver_id, correlation_id=self.correlation_id)
			if message_in.job_id and not self.job_repo.exists(message_in.job_id):
				raise JobNotFoundError(message_in.job_id, correlation_id=self.correlation_id)
			return self.message_repo.create({
				"sender_id": message_in.sender_id,
				"receiver_id": message_in.receiver_id,
				"job_id": message_in.job_id,
				"content": message_in.content,
				"is_read": False,
			})

		sent = self.run_in_transaction(db, op, name="send_message")
		self.log_operation("send_message", message_id=sent.id, receiver_id=sent.receiver_id)
		return sent

	def get_conversation(self, user_a: str, user_b: str, actor: Principal) -> List[Message]:
		if actor.id not in (user_a, user_b) and not actor.is_admin:
			raise ForbiddenError("You can only read your own conversations", correlation_id=self.correlation_id)
		return self.message_repo.get_conversation(user_a, user_b)

	def mark_read(self, message_id: str, actor: Principal, db: Session) -> None:
		"""Receiver-only; marking an already-read message again changes nothing."""
		message = self.message_repo.get_by_id(message_id)
		if not message:
			raise MessageNotFoundError(message_id, correlation_id=self.correlation_id)
		if message.receiver_id != actor.id:
			raise ForbiddenError("Only the receiver can mark a message as read", correlation_id=self.correlation_id)

		self.run_in_transaction(db, lambda: self.message_repo.mark_read(message_id), name="mark_read")
		self.log_operation("mark_read", message_id=message_id)
