from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
import logging
from slowapi import Limiter
from slowapi.util import get_remote_address

from newsshelf.core.config import settings
from newsshelf.api.validation import UserIdParam
from newsshelf.core.database import get_db
from newsshelf.schemas.user import (
    ResolveUserRequest,
    ResolveUserResponse,
    UserData,
    UpdateTopicsRequest,
    SuccessResponse,
)
from newsshelf.services.user_directory import UserDirectory

router = APIRouter()
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)
logger = logging.getLogger(__name__)


@router.post("/", response_model=ResolveUserResponse)
@limiter.limit("30/minute")
async def resolve_user(
    request: Request,
    payload: ResolveUserRequest,
    db: Session = Depends(get_db),
):
    """
    Log in with a news API key, creating the user on first use.

    - Returns the existing identity with is_new_user=false when the key is known
    - Otherwise creates the user and its topics/tracking rows
    """
    user_id, is_new_user = UserDirectory(db).resolve_or_create(payload.news_api_key)
    return ResolveUserResponse(user_id=user_id, is_new_user=is_new_user)


@router.get("/", response_model=UserData)
@limiter.limit("60/minute")
async def get_user(
    request: Request,
    user_id: str = UserIdParam,
    db: Session = Depends(get_db),
):
    """Get a user's credential, preferred topics and tracking data."""
    return UserDirectory(db).fetch(user_id)


@router.put("/topics", response_model=SuccessResponse)
@limiter.limit("60/minute")
async def update_topics(
    request: Request,
    payload: UpdateTopicsRequest,
    db: Session = Depends(get_db),
):
    """Replace the user's preferred topics with the given list."""
    UserDirectory(db).update_topics(payload.user_id, payload.topics)
    return SuccessResponse()
