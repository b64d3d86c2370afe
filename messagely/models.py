from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from .database import Base


class User(Base):
	__tablename__ = "users"

	username = Column(String(64), primary_key=True)
	password = Column(String(256), nullable=False)
	first_name = Column(String(128), nullable=False)
	last_name = Column(String(128), nullable=False)
	phone = Column(String(32), nullable=False)
	join_at = Column(DateTime(timezone=True), nullable=False)
	last_login_at = Column(DateTime(timezone=True))

	sent_messages = relationship("Message", back_populates="from_user", foreign_keys="Message.from_username")
	received_messages = relationship("Message", back_populates="to_user", foreign_keys="Message.to_username")


class Message(Base):
	__tablename__ = "messages"

	id = Column(Integer, primary_key=True, autoincrement=True)
	from_username = Column(String(64), ForeignKey("users.username"), index=True, nullable=False)
	to_username = Column(String(64), ForeignKey("users.username"), index=True, nullable=False)
	body = Column(Text, nullable=False)
	sent_at = Column(DateTime(timezone=True), nullable=False)
	read_at = Column(DateTime(timezone=True), nullable=True)

	from_user = relationship("User", foreign_keys=[from_username], back_populates="sent_messages")
	to_user = relationship("User", foreign_keys=[to_username], back_populates="received_messages")


def utcnow() -> datetime:
	return datetime.now(timezone.utc)
