from pydantic import BaseModel, Field
from typing import List


class ResolveUserRequest(BaseModel):
    news_api_key: str = Field(min_length=1)


class ResolveUserResponse(BaseModel):
    user_id: str
    is_new_user: bool


class UserData(BaseModel):
    id: str
    news_api_key: str
    preferred_topics: List[str] = []
    articles_seen: List[str] = []
    total_clicks: int = 0


class UpdateTopicsRequest(BaseModel):
    user_id: str = Field(min_length=1)
    topics: List[str]


class SuccessResponse(BaseModel):
    success: bool = True
