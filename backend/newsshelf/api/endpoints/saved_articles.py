from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
import logging
from slowapi import Limiter
from slowapi.util import get_remote_address

from newsshelf.core.config import settings
from newsshelf.api.validation import UserIdParam
from newsshelf.core.database import get_db
from newsshelf.core.errors import InvalidRequest
from newsshelf.schemas.saved_article import (
    Collection,
    CollectionsResponse,
    SaveArticleRequest,
    SaveArticleResponse,
    RemoveArticlesRequest,
)
from newsshelf.schemas.user import SuccessResponse
from newsshelf.services.article_store import ArticleStore, ALREADY_EXISTS

router = APIRouter()
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)
logger = logging.getLogger(__name__)


@router.get("/", response_model=CollectionsResponse)
@limiter.limit("60/minute")
async def get_collections(
    request: Request,
    user_id: str = UserIdParam,
    db: Session = Depends(get_db),
):
    """
    Get the user's saved articles grouped into collections.

    - Collections appear in the order their first article was saved
    - A user with nothing saved gets an empty list
    """
    grouped = ArticleStore(db).list(user_id)
    return CollectionsResponse(
        collections=[
            Collection(collection_name=name, articles=articles)
            for name, articles in grouped.items()
        ]
    )


@router.post("/", response_model=SaveArticleResponse)
@limiter.limit("60/minute")
async def save_article(
    request: Request,
    payload: SaveArticleRequest,
    db: Session = Depends(get_db),
):
    """
    Save an article into a named collection.

    - Creates the collection implicitly on first use
    - Saving the same URL into the same collection again is a no-op
      reported as already_exists
    """
    result = ArticleStore(db).save(
        payload.user_id, payload.article, payload.collection_name
    )
    return SaveArticleResponse(already_exists=result == ALREADY_EXISTS)


@router.delete("/", response_model=SuccessResponse)
@limiter.limit("60/minute")
async def remove_articles(
    request: Request,
    payload: RemoveArticlesRequest,
    db: Session = Depends(get_db),
):
    """
    Remove one article from a collection, or the whole collection.

    - With delete_collection=true every article in the collection is removed
    - Otherwise article_url is required and only that (url, collection) pair goes
    """
    store = ArticleStore(db)
    if payload.delete_collection:
        store.remove_collection(payload.user_id, payload.collection_name)
    else:
        if not payload.article_url:
            raise InvalidRequest("Article URL is required")
        store.remove_article(
            payload.user_id, payload.article_url, payload.collection_name
        )
    return SuccessResponse()
