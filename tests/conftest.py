# flake8: noqa
import sys
from pathlib import Path

# Ensure project root is on sys.path so `recipebox` can be imported when tests are run
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))  # noqa: E402

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from recipebox import app as app_module
from recipebox import models
from recipebox.db import Base
from recipebox.schemas import Actor


SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
# Use StaticPool so the same in-memory database is shared across connections
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def fresh_tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


def make_user(db, email, role=models.Role.USER, name=None):
    user = models.User(email=email, name=name or email.split("@")[0], role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return Actor(user_id=user.id, email=user.email, role=user.role)


@pytest.fixture
def admin(db):
    return make_user(db, "admin@demo.com", models.Role.ADMIN, "Admin User")


@pytest.fixture
def member(db):
    return make_user(db, "user@demo.com", models.Role.USER, "Regular User")


@pytest.fixture
def client():
    app_module.app.dependency_overrides[app_module.get_db] = override_get_db
    yield TestClient(app_module.app)
    app_module.app.dependency_overrides.clear()


@pytest.fixture
def user_factory(db):
    def factory(email, role=models.Role.USER, name=None):
        return make_user(db, email, role, name)
    return factory
