"""
Pytest configuration and fixtures for NewsShelf tests.
"""

import os

# Settings are read at import time, so the environment must be in place first
os.environ.setdefault("POSTGRES_PASSWORD", "test_password")
os.environ.setdefault("ADMIN_API_KEY", "test_admin_key")
os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite:///:memory:")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import json
import pytest
from datetime import datetime, timezone, timedelta
from typing import Generator
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from newsshelf.core.database import Base, get_db
from newsshelf.models.user import User
from newsshelf.models.preferred_topics import PreferredTopics
from newsshelf.models.articles_seen import ArticlesSeen
from newsshelf.models.saved_article import SavedArticles


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def db_engine():
    """Create a test database engine."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """Create a test database session."""
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=db_engine
    )
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def file_session_factory(tmp_path):
    """Sessionmaker on a file-backed SQLite database, for multi-session tests."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'newsshelf.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_app(db_session):
    """Create the FastAPI app without lifespan events, bound to the test session."""
    from newsshelf.main import create_app

    test_app = create_app(use_lifespan=False)

    # Override database dependency
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    test_app.dependency_overrides[get_db] = override_get_db

    return test_app


@pytest.fixture(scope="function")
def client(test_app) -> TestClient:
    """Create a test client without entering context manager."""
    return TestClient(test_app, raise_server_exceptions=False)


@pytest.fixture(scope="function")
def test_user(db_session) -> User:
    """Create a fully initialized test user."""
    user = User(
        news_api="test_news_api_key_123",
        initialized_at=datetime.now(timezone.utc),
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)

    db_session.add(PreferredTopics(id=user.id, topics=["Technology", "AI"]))
    db_session.add(ArticlesSeen(id=user.id, articles=[], clicks=0))
    db_session.commit()
    return user


@pytest.fixture(scope="function")
def make_user(db_session):
    """Factory creating users with optional tracking state."""

    def _make_user(api_key, seen=None, clicks=None, topics=None, created_at=None):
        user = User(news_api=api_key, initialized_at=datetime.now(timezone.utc))
        if created_at is not None:
            user.created_at = created_at
        db_session.add(user)
        db_session.commit()
        if seen is not None:
            db_session.add(
                ArticlesSeen(
                    id=user.id,
                    articles=list(seen),
                    clicks=len(seen) if clicks is None else clicks,
                )
            )
        if topics is not None:
            db_session.add(PreferredTopics(id=user.id, topics=list(topics)))
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def sample_article() -> dict:
    """An article in the shape the news-search API returns."""
    return {
        "source": {"id": "the-verge", "name": "The Verge"},
        "author": "Test Author",
        "title": "Test Article",
        "description": "This is a test article description",
        "url": "https://example.com/article-1",
        "urlToImage": "https://example.com/image-1.jpg",
        "publishedAt": "2024-01-01T12:00:00Z",
        "content": "Full article content goes here",
    }


@pytest.fixture
def make_article(sample_article):
    """Build article payloads that differ by URL."""

    def _make_article(index: int = 1, **overrides) -> dict:
        article = dict(sample_article)
        article["url"] = f"https://example.com/article-{index}"
        article["title"] = f"Test Article {index}"
        article.update(overrides)
        return article

    return _make_article


@pytest.fixture
def stored_document():
    """Serialize a document the way ArticleStore writes it."""

    def _stored_document(url, collection_name, title="Stored"):
        return json.dumps(
            {
                "url": url,
                "title": title,
                "description": None,
                "url_to_image": None,
                "source": "Example News",
                "published_at": "2024-01-01T12:00:00Z",
                "saved_at": (
                    datetime.now(timezone.utc) - timedelta(hours=1)
                ).isoformat(),
                "collection_name": collection_name,
            }
        )

    return _stored_document


@pytest.fixture
def seed_saved_articles(db_session):
    """Write a raw document array for a user, bypassing ArticleStore."""

    def _seed(user_id, raw_entries):
        db_session.add(SavedArticles(id=user_id, articles=list(raw_entries)))
        db_session.commit()

    return _seed
