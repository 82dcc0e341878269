from fastapi import Header, Query, Request
from typing import Optional
import logging
import secrets

from newsshelf.core.config import settings
from newsshelf.core.errors import Unauthorized
from newsshelf.core.logging_config import log_audit_event, get_client_ip

logger = logging.getLogger(__name__)


def is_admin_key(candidate: Optional[str]) -> bool:
    """Constant-time comparison against the shared admin secret."""
    if not candidate or not settings.ADMIN_API_KEY:
        return False
    return secrets.compare_digest(
        candidate.encode("utf-8"), settings.ADMIN_API_KEY.encode("utf-8")
    )


async def require_admin_key(
    request: Request,
    admin_key: Optional[str] = Query(None, description="Shared admin secret"),
    x_admin_key: Optional[str] = Header(None),
) -> None:
    """Capability check guarding the admin dashboard."""
    if is_admin_key(admin_key or x_admin_key):
        return

    log_audit_event(
        event_type="admin.dashboard.denied",
        message="Rejected admin dashboard request with invalid key",
        level=logging.WARNING,
        ip_address=get_client_ip(request),
        request_method=request.method,
        request_path=request.url.path,
        event_category="security",
    )
    raise Unauthorized("Unauthorized")
