# flake8: noqa
import sys
from pathlib import Path

# Ensure project root is on sys.path so `recipeshare` can be imported when tests are run
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))  # noqa: E402

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient  # noqa: E402

from recipeshare import app as app_module
from recipeshare import models


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
def fresh_db():
    # every test starts from empty tables
    models.Base.metadata.create_all(bind=engine)
    app_module.app.dependency_overrides[app_module.get_db] = override_get_db
    yield
    app_module.app.dependency_overrides.clear()
    models.Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    return TestClient(app_module.app)


@pytest.fixture
def db_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def make_user(db_session):
    """Insert a user (and by default an empty profile), as sign-in would."""

    def _make(username, with_profile=True, bio=None, picture=None):
        user = models.User(username=username)
        db_session.add(user)
        db_session.flush()
        if with_profile:
            db_session.add(
                models.UserProfile(user_id=user.id, bio=bio, profile_picture=picture)
            )
        db_session.commit()
        return user.id

    return _make


@pytest.fixture
def make_recipe(client):
    def _make(user_id, title="Soup", ingredients="Water, Salt", instructions="Boil", **extra):
        payload = {
            "title": title,
            "ingredients": ingredients,
            "instructions": instructions,
            "userId": user_id,
        }
        payload.update(extra)
        res = client.post("/recipes", json=payload)
        assert res.status_code == 201, res.text
        return int(res.json()["data"]["recipeId"])

    return _make
