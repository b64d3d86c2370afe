import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from messagely.database import Base, build_engine, get_db
from messagely.main import app
from messagely import users


engine = build_engine("sqlite://")
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(db):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def alice(db):
    return users.register(db, "alice", "alice-pw", "Alice", "Liddell", "555-0100")


@pytest.fixture()
def bob(db):
    return users.register(db, "bob", "bob-pw", "Bob", "Builder", "555-0101")


@pytest.fixture()
def carol(db):
    return users.register(db, "carol", "carol-pw", "Carol", "Danvers", "555-0102")


@pytest.fixture()
def session_factory(db):
    return TestingSessionLocal
