from typing import Callable, TypeVar
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError
import logging

from newsshelf.core.config import settings
from newsshelf.core.errors import (
    ConcurrentUpdate,
    NewsShelfError,
    StorageUnavailable,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def run_versioned(
    db: Session,
    operation: Callable[[], T],
    description: str,
    max_attempts: int = None,
) -> T:
    """
    Run a read-modify-write against a versioned row and commit it.

    ``operation`` must re-read its row on every call. A stale version (another
    writer committed first) or a duplicate insert of a missing row rolls the
    session back and the whole operation runs again; after ``max_attempts``
    losses the caller gets ConcurrentUpdate. Any other storage error is
    reported as StorageUnavailable without retrying.
    """
    attempts = max_attempts or settings.STORE_MAX_ATTEMPTS

    for attempt in range(1, attempts + 1):
        try:
            result = operation()
            db.commit()
            return result
        except (StaleDataError, IntegrityError) as e:
            db.rollback()
            logger.warning(
                f"{description}: concurrent write detected (attempt {attempt}/{attempts}): {e}"
            )
        except NewsShelfError:
            db.rollback()
            raise
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"{description}: storage error: {e}")
            raise StorageUnavailable(f"Storage unavailable: {description}") from e

    raise ConcurrentUpdate(f"Concurrent update conflict: {description}")
