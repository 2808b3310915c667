"""Pytest configuration and shared fixtures.

Every test gets a fresh in-memory SQLite database. The API client shares
the test's session, so data created through factories is visible to
requests and vice versa.
"""

import os

# Must be set before contentplatform reads its settings
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BOOTSTRAP_ON_STARTUP", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from contentplatform.api.deps import get_db
from contentplatform.api.main import app
from contentplatform.core.security import create_access_token
from contentplatform.db import models  # noqa: F401
from contentplatform.db.base import Base
from contentplatform.db.seed import bootstrap
from contentplatform.db.session import build_engine
from tests import factories


@pytest.fixture
def db_engine():
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(bind=db_engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def catalog(db_session):
    """Bootstrapped permission catalog and canonical roles."""
    return bootstrap(db_session)


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Build bearer headers for a user."""
    def _headers(user) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}
    return _headers


# ---------------------------------------------------------------------------
# Factory fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def corporate_factory(db_session):
    def _create(**kwargs):
        return factories.create_corporate(db_session, **kwargs)
    return _create


@pytest.fixture
def role_factory(db_session):
    def _create(**kwargs):
        return factories.create_role(db_session, **kwargs)
    return _create


@pytest.fixture
def user_factory(db_session):
    def _create(**kwargs):
        return factories.create_user(db_session, **kwargs)
    return _create


@pytest.fixture
def template_factory(db_session):
    def _create(**kwargs):
        return factories.create_template(db_session, **kwargs)
    return _create
