from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import logging

from newsshelf.core.errors import NotFound, StorageUnavailable
from newsshelf.models.saved_article import SavedArticles
from newsshelf.models.user import User
from newsshelf.schemas.saved_article import ArticlePayload, StoredArticle
from newsshelf.services.document_array import DocumentArray
from newsshelf.services.versioned_write import run_versioned

logger = logging.getLogger(__name__)

CREATED = "created"
ALREADY_EXISTS = "already_exists"


class ArticleStore:
    """
    Saved articles for each user, kept as one document array per user.

    Collections are not stored; they are the grouping of documents sharing
    a collection name. Every mutation is a versioned read-modify-write of the
    whole array (see ``run_versioned``).
    """

    def __init__(self, db: Session):
        self.db = db

    def _load(self, user_id: str) -> Optional[DocumentArray]:
        try:
            row = self.db.get(SavedArticles, user_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error reading saved articles for user {user_id}: {e}")
            raise StorageUnavailable("Failed to read saved articles") from e
        if row is None:
            return None
        return DocumentArray.load(row.articles, owner=user_id)

    def list(self, user_id: str) -> Dict[str, List[StoredArticle]]:
        """Saved articles grouped by collection name; empty if the user has none."""
        array = self._load(user_id)
        if array is None:
            return {}
        return array.grouped()

    def save(
        self, user_id: str, article: ArticlePayload, collection_name: str
    ) -> str:
        """
        Save an article snapshot into a collection.

        Returns ``ALREADY_EXISTS`` without writing when the (url, collection)
        pair is already stored, otherwise ``CREATED``.
        """

        def operation() -> str:
            row = self.db.get(SavedArticles, user_id)
            if row is None:
                if self.db.get(User, user_id) is None:
                    raise NotFound("User not found")
                array = DocumentArray()
            else:
                array = DocumentArray.load(row.articles, owner=user_id)

            if array.contains(article.url, collection_name):
                return ALREADY_EXISTS

            array.append(self._snapshot(article, collection_name))
            if row is None:
                self.db.add(SavedArticles(id=user_id, articles=array.dump()))
            else:
                row.articles = array.dump()
            return CREATED

        result = run_versioned(
            self.db, operation, f"save article for user {user_id}"
        )
        if result == CREATED:
            logger.info(
                f"User {user_id} saved article {article.url} to collection '{collection_name}'"
            )
        return result

    def remove_article(self, user_id: str, article_url: str, collection_name: str) -> int:
        """Remove entries matching both url and collection name exactly."""
        removed = self._remove_where(
            user_id,
            lambda a: a.url == article_url and a.collection_name == collection_name,
            f"remove article for user {user_id}",
        )
        logger.info(
            f"User {user_id} removed {removed} article(s) {article_url} from '{collection_name}'"
        )
        return removed

    def remove_collection(self, user_id: str, collection_name: str) -> int:
        """Remove every article in a collection in a single write."""
        removed = self._remove_where(
            user_id,
            lambda a: a.collection_name == collection_name,
            f"remove collection for user {user_id}",
        )
        logger.info(
            f"User {user_id} removed collection '{collection_name}' ({removed} articles)"
        )
        return removed

    def _remove_where(
        self,
        user_id: str,
        predicate: Callable[[StoredArticle], bool],
        description: str,
    ) -> int:
        def operation() -> int:
            row = self.db.get(SavedArticles, user_id)
            if row is None:
                raise NotFound("No articles found")
            array = DocumentArray.load(row.articles, owner=user_id)
            removed = array.remove_where(predicate)
            row.articles = array.dump()
            return removed

        return run_versioned(self.db, operation, description)

    @staticmethod
    def _snapshot(article: ArticlePayload, collection_name: str) -> StoredArticle:
        return StoredArticle(
            url=article.url,
            title=article.title,
            description=article.description,
            url_to_image=article.url_to_image,
            source=article.source_name,
            published_at=article.published_at,
            saved_at=datetime.now(timezone.utc),
            collection_name=collection_name,
        )
