from sqlalchemy import Column, String, ForeignKey, JSON
from sqlalchemy.orm import relationship
from newsshelf.core.database import Base


class PreferredTopics(Base):
    __tablename__ = "preferred_topics"

    id = Column(String(36), ForeignKey("users.id"), primary_key=True)
    topics = Column(JSON, nullable=False, default=list)

    user = relationship("User", back_populates="preferred_topics")
