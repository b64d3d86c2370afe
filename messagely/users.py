"""User store: registration, password checks and per-user message listings."""

import logging
from typing import List

from sqlalchemy import insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, contains_eager

from .auth import dummy_verify, get_password_hash, verify_password
from .database import committing
from .errors import DuplicateUser, NotFound
from .models import Message, User, utcnow
from .schemas import ReceivedMessage, SentMessage, UserBasic, UserOut


logger = logging.getLogger(__name__)


def register(db: Session, username: str, password: str, first_name: str, last_name: str, phone: str) -> UserOut:
	"""
	Store a new user with a bcrypt-hashed password and return the profile.

	join_at and last_login_at both start at the registration time. A username
	that already exists is reported by the store's primary key constraint and
	surfaces as DuplicateUser.
	"""
	now = utcnow()
	try:
		with committing(db):
			db.execute(
				insert(User).values(
					username=username,
					password=get_password_hash(password),
					first_name=first_name,
					last_name=last_name,
					phone=phone,
					join_at=now,
					last_login_at=now,
				)
			)
	except IntegrityError:
		logger.info("Registration rejected, username %r already taken", username)
		raise DuplicateUser(f"Username already taken: {username}")
	logger.info("Registered user %r", username)
	return get(db, username)


def authenticate(db: Session, username: str, password: str) -> bool:
	# Same answer for unknown user and wrong password.
	password_hash = db.query(User.password).filter(User.username == username).scalar()
	if password_hash is None:
		dummy_verify()
		return False
	return verify_password(password, password_hash)


def update_login_timestamp(db: Session, username: str) -> None:
	with committing(db):
		db.query(User).filter(User.username == username).update(
			{User.last_login_at: utcnow()}, synchronize_session=False
		)


def all_users(db: Session) -> List[UserBasic]:
	rows = (
		db.query(User.username, User.first_name, User.last_name, User.phone)
		.order_by(User.username.asc())
		.all()
	)
	return [UserBasic.model_validate(row) for row in rows]


def get(db: Session, username: str) -> UserOut:
	row = (
		db.query(User.username, User.first_name, User.last_name, User.phone, User.join_at, User.last_login_at)
		.filter(User.username == username)
		.first()
	)
	if row is None:
		raise NotFound(f"No user found with username: {username}")
	return UserOut.model_validate(row)


def messages_from(db: Session, username: str) -> List[SentMessage]:
	"""Messages sent by ``username``, each with its recipient loaded through the join."""
	rows = (
		db.query(Message)
		.join(Message.to_user)
		.options(contains_eager(Message.to_user))
		.filter(Message.from_username == username)
		.order_by(Message.sent_at.asc(), Message.id.asc())
		.all()
	)
	return [SentMessage.model_validate(m) for m in rows]


def messages_to(db: Session, username: str) -> List[ReceivedMessage]:
	"""Messages received by ``username``, each with its sender loaded through the join."""
	rows = (
		db.query(Message)
		.join(Message.from_user)
		.options(contains_eager(Message.from_user))
		.filter(Message.to_username == username)
		.order_by(Message.sent_at.asc(), Message.id.asc())
		.all()
	)
	return [ReceivedMessage.model_validate(m) for m in rows]
