from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from contextlib import asynccontextmanager
from newsshelf.core.config import settings
from newsshelf.core.database import engine, Base
from newsshelf.core.errors import register_exception_handlers
from newsshelf.core.logging_config import (
    setup_logging,
    CorrelationIdMiddleware,
    log_audit_event,
)
from newsshelf.api.endpoints import (
    users,
    saved_articles,
    tracking,
    admin,
    news,
)
import newsshelf.models  # noqa: F401  registers tables on Base.metadata
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
import logging

# Configure structured JSON logging
audit_logger = setup_logging(logging.DEBUG if settings.DEBUG else logging.INFO)
logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        # JSON API only; nothing should be framed or scripted
        response.headers["Content-Security-Policy"] = (
            "default-src 'none'; frame-ancestors 'none';"
        )

        return response


# Initialize rate limiter
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.DEFAULT_RATE_LIMIT],
    enabled=settings.RATE_LIMIT_ENABLED,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("Starting NewsShelf application...")

    if not settings.ADMIN_API_KEY:
        logger.warning("ADMIN_API_KEY is empty; the admin dashboard is unreachable")

    # Create database tables
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")

    yield

    logger.info("Shutting down NewsShelf application...")


def create_app(use_lifespan: bool = True) -> FastAPI:
    app = FastAPI(
        title="NewsShelf - Personal News Reader",
        description="Saved-article collections and reading activity for NewsAPI users",
        version="1.0.0",
        lifespan=lifespan if use_lifespan else None,
    )

    # Add correlation ID middleware (first, so all logs have correlation IDs)
    app.add_middleware(CorrelationIdMiddleware)

    # Add rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    app.add_middleware(SecurityHeadersMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(users.router, prefix="/api/user", tags=["user"])
    app.include_router(saved_articles.router, prefix="/api/articles", tags=["articles"])
    app.include_router(tracking.router, prefix="/api/tracking", tags=["tracking"])
    app.include_router(admin.router, prefix="/api/admin", tags=["admin"])
    app.include_router(news.router, prefix="/api/news", tags=["news"])

    @app.get("/")
    def root():
        return {
            "name": "NewsShelf",
            "version": "1.0.0",
            "description": "Personal News Reader",
        }

    @app.get("/health")
    def health_check():
        return {"status": "healthy"}

    return app


app = create_app()

log_audit_event(
    event_type="app.startup",
    message=f"NewsShelf application starting (debug={settings.DEBUG})",
    event_category="system",
    debug=settings.DEBUG,
)
