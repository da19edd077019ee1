"""Pytest configuration and shared fixtures."""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from shared.models.entities import Base
from essay.models.session_state import SessionConfig, create_session
from database import get_db
from main import app


@pytest.fixture(scope="function")
def db_session():
    """
    Create a test database session with in-memory SQLite.

    This fixture creates a fresh database for each test function,
    ensuring test isolation.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    Base.metadata.create_all(engine)

    SessionLocal = sessionmaker(bind=engine)
    session = SessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(engine)


@pytest.fixture
def client(db_session):
    """Test client for the FastAPI app backed by the in-memory database."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def session_config():
    """30 seconds, 500 words, 10 deleted characters."""
    return SessionConfig(time_limit_seconds=30, word_limit=500, deletion_limit=10)


@pytest.fixture
def fresh_state(session_config):
    return create_session(session_config)


@pytest.fixture
def mock_llm(mocker):
    """Mock LLMService returning a configurable raw response."""
    llm = mocker.Mock()
    llm.call.return_value = "{}"
    return llm
