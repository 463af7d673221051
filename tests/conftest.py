"""Test configuration and fixtures."""

import os
from collections.abc import Generator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Set environment variables immediately when this module is imported
# This ensures they're available before any other modules try to load Settings
test_env_vars = {
    "GITHUB_API_BASE_URL": "https://api.github.com",
    "GITHUB_REQUEST_DELAY": "0",
    "DATABASE_URL": "sqlite:///:memory:",
    "APP_NAME": "PR Code Reviewer Test",
    "APP_VERSION": "1.0.0-test",
    "DEBUG": "true",
    "HOST": "127.0.0.1",
    "PORT": "8000",
    "LOG_LEVEL": "DEBUG",
    "MAX_STORED_CODE_LENGTH": "10000",
    "MAX_ANALYSIS_LENGTH": "50000",
}

for key, value in test_env_vars.items():
    os.environ[key] = value
os.environ.pop("GITHUB_TOKEN", None)


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment() -> None:
    """Set up test environment variables."""
    yield

    for key in test_env_vars:
        os.environ.pop(key, None)


@pytest.fixture
def test_engine() -> Generator[Engine, None, None]:
    """Create a test database engine shared by every session."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> Generator[sessionmaker, None, None]:
    """Create tables and return a session factory bound to the test engine."""
    # Import models to ensure they're registered with Base
    from pr_code_reviewer import models  # noqa: F401
    from pr_code_reviewer.utils.database import Base

    Base.metadata.create_all(bind=test_engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def test_session(session_factory) -> Generator[Session, None, None]:
    """Create a test database session."""
    session = session_factory()
    yield session
    session.close()
