"""
Test configuration and fixtures for Dishbook.

- Function-scoped in-memory SQLite engine (StaticPool, one connection)
- Session fixture bound to it, tables created per test
- TestClient with database and matcher dependency overrides
- Verifier and Claude mocks
"""

import os

# Must be set before dishbook.database builds its engine
os.environ.setdefault("DATABASE_URL", "sqlite://")

from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from dishbook.api.matching import get_matcher
from dishbook.api.verification import get_verification_service
from dishbook.database import Base, get_db
from dishbook.main import app
from dishbook.services.product_matcher import ProductMatcher
from dishbook.services.verification_service import ProductVerificationService
from tests.fixtures.mocks import MockClaudeService, StubVerifier


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def test_engine():
    """
    Fresh in-memory database per test.

    StaticPool keeps a single connection so every session sees the same
    database.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(test_engine) -> Generator[Session, None, None]:
    """Database session for one test. The whole database is dropped afterwards."""
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=test_engine
    )
    session = TestingSessionLocal()

    yield session

    session.close()


# =============================================================================
# Mock Fixtures
# =============================================================================


@pytest.fixture
def stub_verifier() -> StubVerifier:
    """Verifier that records calls and answers "no match" unless configured."""
    return StubVerifier()


@pytest.fixture
def mock_claude_service() -> MockClaudeService:
    return MockClaudeService()


@pytest.fixture
def verification_service(mock_claude_service) -> ProductVerificationService:
    """Verification service wired to the Claude mock."""
    return ProductVerificationService(claude_service=mock_claude_service)


# =============================================================================
# TestClient Fixtures
# =============================================================================


@pytest.fixture
def client(
    db: Session,
    stub_verifier: StubVerifier,
    verification_service: ProductVerificationService,
) -> Generator[TestClient, None, None]:
    """
    TestClient with dependency overrides.

    The database session, the matcher (with the stub verifier) and the
    verification service (with the Claude mock) are injected into the app.
    """

    def override_get_db():
        try:
            yield db
        finally:
            pass  # Don't close - managed by db fixture

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_matcher] = lambda: ProductMatcher(
        verifier=stub_verifier
    )
    app.dependency_overrides[get_verification_service] = lambda: verification_service

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# pytest markers
# =============================================================================


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m not slow')"
    )
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
