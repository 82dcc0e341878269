from sqlalchemy import Column, Integer, String, ForeignKey, JSON
from sqlalchemy.orm import relationship
from newsshelf.core.database import Base


class SavedArticles(Base):
    """
    One row per user holding every saved article as a serialized document.

    ``articles`` is a JSON array of strings; each string is an opaque JSON
    document interpreted only by ArticleStore. ``version_id`` guards the
    read-modify-write cycle so concurrent saves cannot overwrite each other.
    """

    __tablename__ = "saved_articles"

    id = Column(String(36), ForeignKey("users.id"), primary_key=True)
    articles = Column(JSON, nullable=False, default=list)
    version_id = Column(Integer, nullable=False)

    user = relationship("User", back_populates="saved_articles")

    __mapper_args__ = {"version_id_col": version_id}
