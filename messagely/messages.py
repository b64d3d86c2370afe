"""Message service: sending, party-only reads and recipient-only read receipts."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from .database import committing
from .errors import Forbidden, NotFound, ValidationError
from .models import Message, utcnow
from .schemas import MessageDetail, MessageOut, MessageRead


logger = logging.getLogger(__name__)

# Largest value an INTEGER primary key can hold.
MAX_MESSAGE_ID = 2 ** 63 - 1


def send(db: Session, from_username: str, to_username: str, body: str) -> MessageOut:
	if not to_username or not body:
		raise ValidationError("Missing required fields")

	message = Message(
		from_username=from_username,
		to_username=to_username,
		body=body,
		sent_at=utcnow(),
	)
	# Recipient existence is left to the foreign key.
	try:
		with committing(db):
			db.add(message)
	except IntegrityError:
		logger.info("Message from %r rejected, unknown recipient %r", from_username, to_username)
		raise NotFound(f"No user found with username: {to_username}")
	db.refresh(message)
	logger.info("Message %s sent from %r to %r", message.id, from_username, to_username)
	return MessageOut.model_validate(message)


def _ensure_storable_id(message_id: int) -> None:
	if not -MAX_MESSAGE_ID <= message_id <= MAX_MESSAGE_ID:
		raise NotFound("Message not found")


def get_by_id(db: Session, message_id: int, requesting_user: str) -> MessageDetail:
	_ensure_storable_id(message_id)
	message = (
		db.query(Message)
		.options(joinedload(Message.from_user), joinedload(Message.to_user))
		.filter(Message.id == message_id)
		.first()
	)
	if message is None:
		raise NotFound("Message not found")
	if requesting_user not in (message.from_username, message.to_username):
		raise Forbidden("Unauthorized")
	return MessageDetail.model_validate(message)


def mark_read(db: Session, message_id: int, requesting_user: str) -> MessageRead:
	"""
	Stamp read_at for the recipient.

	Only the first call writes a timestamp: the update is conditional on
	read_at still being NULL, so repeated or concurrent calls return the
	original stamp.
	"""
	_ensure_storable_id(message_id)
	to_username = db.query(Message.to_username).filter(Message.id == message_id).scalar()
	if to_username is None:
		raise NotFound("Message not found")
	if requesting_user != to_username:
		raise Forbidden("Unauthorized")

	with committing(db):
		updated = (
			db.query(Message)
			.filter(Message.id == message_id, Message.read_at.is_(None))
			.update({Message.read_at: utcnow()}, synchronize_session=False)
		)
	if updated:
		logger.info("Message %s read by %r", message_id, requesting_user)
	else:
		logger.debug("Message %s was already read", message_id)
	row = db.query(Message.id, Message.read_at).filter(Message.id == message_id).one()
	return MessageRead.model_validate(row)
