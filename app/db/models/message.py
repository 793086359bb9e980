from sqlalchemy import Column, ForeignKey, String, Text, Boolean, Index
from app.db.base_class import AuditMixin, Base, UUIDPrimaryKeyMixin


class Message(Base, UUIDPrimaryKeyMixin, AuditMixin):
	__tablename__ = "messages"
	__table_args__ = (
		Index("ix_messages_sender_receiver_created_at", "sender_id", "receiver_id", "created_at"),
	)

	sender_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
	receiver_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
	job_id = Column(String(36), ForeignKey("jobs.id"), nullable=True, index=True)
	content = Column(Text, nullable=False)
	is_read = Column(Boolean, nullable=False, default=False)
