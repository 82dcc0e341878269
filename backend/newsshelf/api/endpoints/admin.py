from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from slowapi import Limiter
from slowapi.util import get_remote_address

from newsshelf.core.admin import is_admin_key, require_admin_key
from newsshelf.core.config import settings
from newsshelf.core.database import get_db
from newsshelf.core.logging_config import log_audit_event, get_client_ip
from newsshelf.schemas.admin import Dashboard, AdminVerifyRequest, AdminVerifyResponse
from newsshelf.services.admin_aggregator import AdminAggregator

router = APIRouter()
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)


@router.get("/", response_model=Dashboard, dependencies=[Depends(require_admin_key)])
@limiter.limit("20/minute")
async def get_dashboard(request: Request, db: Session = Depends(get_db)):
    """
    Aggregate usage across all users.

    - Per-user stats with masked API keys
    - Totals for users, clicks and articles viewed
    - Most-viewed article URLs
    """
    dashboard = AdminAggregator(db).dashboard()
    log_audit_event(
        event_type="admin.dashboard.viewed",
        message="Admin dashboard viewed",
        ip_address=get_client_ip(request),
        event_category="security",
        total_users=dashboard.stats.total_users,
    )
    return dashboard


@router.post("/verify", response_model=AdminVerifyResponse)
@limiter.limit("10/minute")
async def verify_admin(request: Request, payload: AdminVerifyRequest):
    """Check whether a key is the admin key."""
    return AdminVerifyResponse(is_admin=is_admin_key(payload.api_key))
