from .user import User
from .preferred_topics import PreferredTopics
from .articles_seen import ArticlesSeen
from .saved_article import SavedArticles

__all__ = [
    "User",
    "PreferredTopics",
    "ArticlesSeen",
    "SavedArticles",
]
