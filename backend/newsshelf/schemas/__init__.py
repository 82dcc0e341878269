from newsshelf.schemas.saved_article import (
    ArticlePayload,
    ArticleSource,
    StoredArticle,
    Collection,
    CollectionsResponse,
    SaveArticleRequest,
    SaveArticleResponse,
    RemoveArticlesRequest,
)
from newsshelf.schemas.user import (
    ResolveUserRequest,
    ResolveUserResponse,
    UserData,
    UpdateTopicsRequest,
    SuccessResponse,
)
from newsshelf.schemas.tracking import RecordClickRequest, TrackingStats
from newsshelf.schemas.admin import (
    AdminUserStats,
    DashboardTotals,
    TopArticle,
    Dashboard,
    AdminVerifyRequest,
    AdminVerifyResponse,
)
from newsshelf.schemas.news import ValidateKeyRequest, ValidateKeyResponse

__all__ = [
    "ArticlePayload",
    "ArticleSource",
    "StoredArticle",
    "Collection",
    "CollectionsResponse",
    "SaveArticleRequest",
    "SaveArticleResponse",
    "RemoveArticlesRequest",
    "ResolveUserRequest",
    "ResolveUserResponse",
    "UserData",
    "UpdateTopicsRequest",
    "SuccessResponse",
    "RecordClickRequest",
    "TrackingStats",
    "AdminUserStats",
    "DashboardTotals",
    "TopArticle",
    "Dashboard",
    "AdminVerifyRequest",
    "AdminVerifyResponse",
    "ValidateKeyRequest",
    "ValidateKeyResponse",
]
