from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
import logging

from newsshelf.core.config import settings
from newsshelf.core.errors import (
    InvalidRequest,
    NotFound,
    PartialInitialization,
    StorageUnavailable,
)
from newsshelf.core.logging_config import log_audit_event, mask_credential
from newsshelf.models.articles_seen import ArticlesSeen
from newsshelf.models.preferred_topics import PreferredTopics
from newsshelf.models.user import User
from newsshelf.schemas.user import UserData

logger = logging.getLogger(__name__)


class UserDirectory:
    """
    Maps an opaque news API key to an internal user identity.

    A user owns three dependent rows: preferred topics, a tracking record and
    (created lazily on first save) a saved-articles row. The first two are
    created with the user; that step is idempotent and is retried on later
    logins until ``initialized_at`` is set.
    """

    def __init__(self, db: Session):
        self.db = db

    def _find_by_key(self, api_key: str) -> Optional[User]:
        return self.db.query(User).filter(User.news_api == api_key).first()

    def resolve_or_create(self, api_key: str) -> Tuple[str, bool]:
        """Return ``(user_id, is_new_user)`` for the credential, creating the user if unseen."""
        if not api_key:
            raise InvalidRequest("News API key is required")

        try:
            user = self._find_by_key(api_key)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error looking up user: {e}")
            raise StorageUnavailable("Failed to look up user") from e

        if user is not None:
            if user.initialized_at is None:
                self.ensure_initialized(user)
            log_audit_event(
                event_type="user.login",
                message="Existing user resolved from API key",
                user_id=user.id,
            )
            return user.id, False

        try:
            user = User(news_api=api_key)
            self.db.add(user)
            self.db.commit()
        except IntegrityError:
            # Another request registered the same key between lookup and insert
            self.db.rollback()
            user = self._find_by_key(api_key)
            if user is None:
                raise StorageUnavailable("Failed to create user")
            logger.info(f"Concurrent registration resolved to existing user {user.id}")
            if user.initialized_at is None:
                self.ensure_initialized(user)
            return user.id, False
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error inserting user: {e}")
            raise StorageUnavailable("Failed to create user") from e

        self.ensure_initialized(user)

        log_audit_event(
            event_type="user.created",
            message="New user created",
            user_id=user.id,
            api_key=mask_credential(api_key, settings.API_KEY_MASK_PREFIX),
        )
        return user.id, True

    def ensure_initialized(self, user: User) -> bool:
        """
        Create whichever dependent rows are missing.

        Each row is committed on its own, so one can succeed while the other
        fails. Failures are logged and swallowed; ``initialized_at`` stays
        unset so the next login retries.
        """
        user_id = user.id
        steps: List[Tuple[str, type, Callable[[], object]]] = [
            (
                "preferred_topics",
                PreferredTopics,
                lambda: PreferredTopics(id=user_id, topics=[]),
            ),
            (
                "articles_seen",
                ArticlesSeen,
                lambda: ArticlesSeen(id=user_id, articles=[], clicks=0),
            ),
        ]

        complete = True
        for name, model, factory in steps:
            try:
                if self.db.get(model, user_id) is None:
                    self.db.add(factory())
                    self.db.commit()
            except SQLAlchemyError as e:
                self.db.rollback()
                complete = False
                error = PartialInitialization(f"{name} row not created for user {user_id}")
                logger.error(f"{error.message}: {e}")

        if not complete:
            log_audit_event(
                event_type="user.partial_init",
                message="User dependent rows partially initialized",
                level=logging.WARNING,
                user_id=user_id,
            )
            return False

        try:
            user.initialized_at = datetime.now(timezone.utc)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to mark user {user_id} initialized: {e}")
            return False
        return True

    def fetch(self, user_id: str) -> UserData:
        """Credential, topics and tracking data; only a missing user row is NotFound."""
        try:
            user = self.db.get(User, user_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error getting user {user_id}: {e}")
            raise StorageUnavailable("Failed to get user") from e

        if user is None:
            raise NotFound("User not found")

        topics = self._read_optional(PreferredTopics, user_id)
        seen = self._read_optional(ArticlesSeen, user_id)

        return UserData(
            id=user.id,
            news_api_key=user.news_api,
            preferred_topics=list(topics.topics or []) if topics else [],
            articles_seen=list(seen.articles or []) if seen else [],
            total_clicks=(seen.clicks or 0) if seen else 0,
        )

    def _read_optional(self, model, user_id: str):
        try:
            return self.db.get(model, user_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.warning(f"Error reading {model.__tablename__} for user {user_id}: {e}")
            return None

    def update_topics(self, user_id: str, topics: List[str]) -> None:
        """Replace the user's preferred topics wholesale."""
        try:
            if self.db.get(User, user_id) is None:
                raise NotFound("User not found")

            row = self.db.get(PreferredTopics, user_id)
            if row is None:
                self.db.add(PreferredTopics(id=user_id, topics=list(topics)))
            else:
                row.topics = list(topics)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error updating topics for user {user_id}: {e}")
            raise StorageUnavailable("Failed to update topics") from e

        logger.info(f"User {user_id} updated preferred topics ({len(topics)} topics)")
