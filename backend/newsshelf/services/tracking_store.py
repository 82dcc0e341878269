from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import logging

from newsshelf.core.errors import NotFound, StorageUnavailable
from newsshelf.models.articles_seen import ArticlesSeen
from newsshelf.schemas.tracking import TrackingStats
from newsshelf.services.versioned_write import run_versioned

logger = logging.getLogger(__name__)


class TrackingStore:
    """Per-user seen-list (distinct URLs) and monotonically increasing click counter."""

    def __init__(self, db: Session):
        self.db = db

    def record_click(self, user_id: str, article_url: str) -> bool:
        """
        Record a click on an article.

        The URL joins the seen-list on its first click only; the counter
        grows on every click. Returns True when the URL was newly seen.
        A missing tracking row is an error, not an implicit zero.
        """

        def operation() -> bool:
            record = self.db.get(ArticlesSeen, user_id)
            if record is None:
                raise NotFound("Tracking record not found")

            seen = list(record.articles or [])
            newly_seen = article_url not in seen
            if newly_seen:
                record.articles = seen + [article_url]
            record.clicks = (record.clicks or 0) + 1
            return newly_seen

        newly_seen = run_versioned(self.db, operation, f"record click for user {user_id}")
        logger.debug(
            f"User {user_id} clicked {article_url} (newly seen: {newly_seen})"
        )
        return newly_seen

    def stats(self, user_id: str) -> TrackingStats:
        """Seen and click counts; zeros when the user has no tracking row."""
        try:
            record = self.db.get(ArticlesSeen, user_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.warning(f"Error reading tracking stats for user {user_id}: {e}")
            return TrackingStats()

        if record is None:
            return TrackingStats()
        return TrackingStats(seen=len(record.articles or []), clicks=record.clicks or 0)
