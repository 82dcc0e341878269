from pydantic import BaseModel, Field


class RecordClickRequest(BaseModel):
    user_id: str = Field(min_length=1)
    article_url: str = Field(min_length=1)


class TrackingStats(BaseModel):
    seen: int = 0
    clicks: int = 0
