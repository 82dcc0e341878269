from pydantic import BaseModel
from datetime import datetime
from typing import List, Optional


class AdminUserStats(BaseModel):
    id: str
    api_key: str  # Masked, never the full credential
    created_at: Optional[datetime] = None
    clicks: int = 0
    articles_viewed: int = 0
    topics: List[str] = []


class DashboardTotals(BaseModel):
    total_users: int = 0
    total_clicks: int = 0
    total_articles_viewed: int = 0


class TopArticle(BaseModel):
    url: str
    view_count: int


class Dashboard(BaseModel):
    users: List[AdminUserStats] = []
    stats: DashboardTotals
    top_articles: List[TopArticle] = []


class AdminVerifyRequest(BaseModel):
    api_key: Optional[str] = None


class AdminVerifyResponse(BaseModel):
    is_admin: bool
