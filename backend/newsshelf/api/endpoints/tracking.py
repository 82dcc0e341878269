from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from slowapi import Limiter
from slowapi.util import get_remote_address

from newsshelf.core.config import settings
from newsshelf.api.validation import UserIdParam
from newsshelf.core.database import get_db
from newsshelf.schemas.tracking import RecordClickRequest, TrackingStats
from newsshelf.schemas.user import SuccessResponse
from newsshelf.services.tracking_store import TrackingStore

router = APIRouter()
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)


@router.post("/", response_model=SuccessResponse)
@limiter.limit("120/minute")
async def record_click(
    request: Request,
    payload: RecordClickRequest,
    db: Session = Depends(get_db),
):
    """
    Record a click; the URL joins the seen-list on its first click.

    - 404 when the user has no tracking record
    - 409 when concurrent clicks keep conflicting
    """
    TrackingStore(db).record_click(payload.user_id, payload.article_url)
    return SuccessResponse()


@router.get("/", response_model=TrackingStats)
@limiter.limit("60/minute")
async def get_tracking_stats(
    request: Request,
    user_id: str = UserIdParam,
    db: Session = Depends(get_db),
):
    """Seen and click counts for a user (zeros if nothing tracked yet)."""
    return TrackingStore(db).stats(user_id)
