from sqlalchemy import Column, Integer, String, ForeignKey, JSON
from sqlalchemy.orm import relationship
from newsshelf.core.database import Base


class ArticlesSeen(Base):
    """Per-user tracking record: distinct seen URLs plus a click counter."""

    __tablename__ = "articles_seen"

    id = Column(String(36), ForeignKey("users.id"), primary_key=True)
    articles = Column(JSON, nullable=False, default=list)  # Ordered, distinct URLs
    clicks = Column(Integer, nullable=False, default=0)
    version_id = Column(Integer, nullable=False)

    user = relationship("User", back_populates="articles_seen")

    __mapper_args__ = {"version_id_col": version_id}
