from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional, List, Union


def _require_text(value: str, field: str) -> str:
    # Names are case-sensitive and kept verbatim; only blank input is rejected
    if not value or not value.strip():
        raise ValueError(f"{field} cannot be empty")
    return value


class ArticleSource(BaseModel):
    id: Optional[str] = None
    name: str = ""


class ArticlePayload(BaseModel):
    """An article as returned by the news-search API (camelCase accepted)."""

    url: str = Field(min_length=1)
    title: str = ""
    description: Optional[str] = None
    url_to_image: Optional[str] = Field(default=None, alias="urlToImage")
    source: Union[ArticleSource, str, None] = None
    published_at: Optional[datetime] = Field(default=None, alias="publishedAt")

    class Config:
        populate_by_name = True

    @property
    def source_name(self) -> str:
        if isinstance(self.source, ArticleSource):
            return self.source.name
        return self.source or ""


class StoredArticle(BaseModel):
    """Snapshot of an article at save time; one element of the document array."""

    url: str
    title: str
    description: Optional[str] = None
    url_to_image: Optional[str] = None
    source: str = ""
    published_at: Optional[datetime] = None
    saved_at: datetime
    collection_name: str

    @property
    def dedup_key(self) -> tuple:
        return (self.url, self.collection_name)


class Collection(BaseModel):
    collection_name: str
    articles: List[StoredArticle]


class CollectionsResponse(BaseModel):
    collections: List[Collection] = []


class SaveArticleRequest(BaseModel):
    user_id: str = Field(min_length=1)
    article: ArticlePayload
    collection_name: str

    @field_validator("collection_name")
    @classmethod
    def validate_collection_name(cls, v: str) -> str:
        return _require_text(v, "Collection name")


class SaveArticleResponse(BaseModel):
    success: bool = True
    already_exists: bool = False


class RemoveArticlesRequest(BaseModel):
    """Remove one article, or a whole collection when delete_collection is set."""

    user_id: str = Field(min_length=1)
    collection_name: str
    article_url: Optional[str] = None
    delete_collection: bool = False

    @field_validator("collection_name")
    @classmethod
    def validate_collection_name(cls, v: str) -> str:
        return _require_text(v, "Collection name")
