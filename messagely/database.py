import logging
import sqlite3
from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import DATABASE_URL
from .errors import StoreError


logger = logging.getLogger(__name__)

Base = declarative_base()


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
	# SQLite ignores REFERENCES clauses unless asked per connection
	if isinstance(dbapi_connection, sqlite3.Connection):
		cursor = dbapi_connection.cursor()
		cursor.execute("PRAGMA foreign_keys=ON")
		cursor.close()


def build_engine(url: str) -> Engine:
	kwargs = {}
	if url.startswith("sqlite"):
		kwargs["connect_args"] = {"check_same_thread": False}
		if url in ("sqlite://", "sqlite:///:memory:"):
			kwargs["poolclass"] = StaticPool
	else:
		kwargs["pool_pre_ping"] = True
	return create_engine(url, **kwargs)


engine = build_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind: Engine = engine) -> None:
	from . import models  # noqa: F401  registers tables on Base

	Base.metadata.create_all(bind=bind)


def get_db():
	db = SessionLocal()
	try:
		yield db
	finally:
		db.close()


@contextmanager
def committing(db: Session):
	"""
	Commit whatever the block added to the session.

	Constraint violations are re-raised untouched so callers can translate them
	into domain errors; any other store failure becomes a StoreError.
	"""
	try:
		yield db
		db.commit()
	except IntegrityError:
		db.rollback()
		raise
	except SQLAlchemyError as e:
		db.rollback()
		logger.exception("Store failure, transaction rolled back")
		raise StoreError(str(e)) from e
