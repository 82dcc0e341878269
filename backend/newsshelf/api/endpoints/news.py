from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session
from typing import Literal
from slowapi import Limiter
from slowapi.util import get_remote_address

from newsshelf.core.config import settings
from newsshelf.api.validation import (
    UserIdParam,
    SearchQueryParam,
    PageParam,
    PageSizeParam,
)
from newsshelf.core.database import get_db
from newsshelf.core.errors import InvalidRequest
from newsshelf.schemas.news import ValidateKeyRequest, ValidateKeyResponse
from newsshelf.services.news_client import NewsClient
from newsshelf.services.user_directory import UserDirectory

router = APIRouter()
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)


@router.get("/")
@limiter.limit("30/minute")
async def search_news(
    request: Request,
    user_id: str = UserIdParam,
    q: str = SearchQueryParam,
    page_size: int = PageSizeParam,
    page: int = PageParam,
    sort_by: Literal["publishedAt", "relevancy", "popularity"] = Query("publishedAt"),
    db: Session = Depends(get_db),
):
    """Search news with the API key stored for the user."""
    user = UserDirectory(db).fetch(user_id)
    if not user.news_api_key:
        raise InvalidRequest("User has no API key configured")

    return await NewsClient().search(
        user.news_api_key, q, page_size=page_size, page=page, sort_by=sort_by
    )


@router.post("/validate", response_model=ValidateKeyResponse)
@limiter.limit("10/minute")
async def validate_api_key(request: Request, payload: ValidateKeyRequest):
    """Probe a news API key before onboarding with it."""
    if not payload.api_key:
        raise InvalidRequest("API key is required")

    valid, error = await NewsClient().validate_key(payload.api_key)
    return ValidateKeyResponse(valid=valid, error=error)
