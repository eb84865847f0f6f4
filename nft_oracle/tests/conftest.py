import os

# settings are read at import time; provide test values before importing the app
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# FORCE model registration
import nft_oracle.models  # noqa

from nft_oracle.db.base import Base
from nft_oracle.db.session import get_db
from nft_oracle.core.security import create_access_token
from nft_oracle.main import create_app

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite://")

if TEST_DATABASE_URL.startswith("sqlite"):
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
else:
    engine = create_engine(TEST_DATABASE_URL, future=True)

TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture(scope="function")
def db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db):
    app = create_app()

    def override_get_db():
        s = TestingSessionLocal()
        try:
            yield s
        except Exception:
            s.rollback()
            raise
        finally:
            s.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c


def _auth(role: str, participant_id: str) -> dict:
    token = create_access_token(participant_id, {"role": role, "participant_id": participant_id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def feed_headers():
    return _auth("FEED", "feed-mintbase")


@pytest.fixture
def auditor_headers():
    return _auth("AUDITOR", "auditor-1")
