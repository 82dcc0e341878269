from collections import Counter
from typing import Dict, List
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import logging

from newsshelf.core.config import settings
from newsshelf.core.errors import StorageUnavailable
from newsshelf.core.logging_config import mask_credential
from newsshelf.models.articles_seen import ArticlesSeen
from newsshelf.models.preferred_topics import PreferredTopics
from newsshelf.models.user import User
from newsshelf.schemas.admin import (
    AdminUserStats,
    Dashboard,
    DashboardTotals,
    TopArticle,
)

logger = logging.getLogger(__name__)


class AdminAggregator:
    """
    Cross-user usage statistics, recomputed from raw rows on every call.

    Read-only. The scan holds no locks, so the result is a point-in-time
    snapshot with no consistency guarantee against concurrent writes.
    """

    def __init__(self, db: Session, top_n: int = None, mask_prefix: int = None):
        self.db = db
        self.top_n = top_n if top_n is not None else settings.ADMIN_TOP_ARTICLES
        self.mask_prefix = (
            mask_prefix if mask_prefix is not None else settings.API_KEY_MASK_PREFIX
        )

    def dashboard(self) -> Dashboard:
        try:
            users = self.db.query(User).order_by(User.created_at.desc()).all()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error fetching users: {e}")
            raise StorageUnavailable("Failed to fetch users") from e

        seen_rows = self._read_all(ArticlesSeen)
        topic_rows = self._read_all(PreferredTopics)

        seen_by_user: Dict[str, ArticlesSeen] = {row.id: row for row in seen_rows}
        topics_by_user: Dict[str, PreferredTopics] = {row.id: row for row in topic_rows}

        user_stats = []
        for user in users:
            seen = seen_by_user.get(user.id)
            topics = topics_by_user.get(user.id)
            user_stats.append(
                AdminUserStats(
                    id=user.id,
                    api_key=mask_credential(user.news_api, self.mask_prefix),
                    created_at=user.created_at,
                    clicks=(seen.clicks or 0) if seen else 0,
                    articles_viewed=len(seen.articles or []) if seen else 0,
                    topics=list(topics.topics or []) if topics else [],
                )
            )

        totals = DashboardTotals(
            total_users=len(user_stats),
            total_clicks=sum(stats.clicks for stats in user_stats),
            total_articles_viewed=sum(stats.articles_viewed for stats in user_stats),
        )

        return Dashboard(
            users=user_stats,
            stats=totals,
            top_articles=self.top_articles(seen_rows),
        )

    def top_articles(self, seen_rows: List[ArticlesSeen]) -> List[TopArticle]:
        """
        Most-viewed URLs by global occurrence count across all seen-lists.

        Ties keep first-encounter order (Counter preserves insertion order and
        most_common sorts stably).
        """
        counts: Counter = Counter()
        for row in seen_rows:
            counts.update(row.articles or [])

        return [
            TopArticle(url=url, view_count=count)
            for url, count in counts.most_common(self.top_n)
        ]

    def _read_all(self, model) -> list:
        # Side tables degrade to empty rather than failing the whole dashboard
        try:
            return self.db.query(model).all()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error fetching {model.__tablename__}: {e}")
            return []
