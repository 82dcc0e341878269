from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
import uuid
from newsshelf.core.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # News API key doubles as the login credential
    news_api = Column(String, unique=True, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), default=_utcnow, index=True)
    # Set once the dependent topics/tracking rows are confirmed present
    initialized_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    preferred_topics = relationship(
        "PreferredTopics", back_populates="user", uselist=False
    )
    articles_seen = relationship("ArticlesSeen", back_populates="user", uselist=False)
    saved_articles = relationship("SavedArticles", back_populates="user", uselist=False)
