"""
Typed view over a user's saved-article document array.

Stored rows keep every saved article as an opaque JSON string. This module
parses those strings once at the storage boundary and hands the stores a
container with insertion, predicate-based removal and grouping.

Corrupt-entry policy: an element that does not parse as a StoredArticle is
hidden from reads and from the duplicate check, but every mutation writes it
back byte-for-byte in its original position. Nothing here repairs or deletes
an unparseable element.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional
from pydantic import ValidationError
import logging

from newsshelf.schemas.saved_article import StoredArticle

logger = logging.getLogger(__name__)


@dataclass
class DocumentEntry:
    raw: Any
    article: Optional[StoredArticle] = None

    @property
    def is_corrupt(self) -> bool:
        return self.article is None


def parse_entry(raw: Any) -> DocumentEntry:
    if not isinstance(raw, (str, bytes)):
        return DocumentEntry(raw=raw)
    try:
        return DocumentEntry(raw=raw, article=StoredArticle.model_validate_json(raw))
    except ValidationError:
        return DocumentEntry(raw=raw)


class DocumentArray:
    """Ordered container of saved-article documents for one user."""

    def __init__(self, entries: Optional[List[DocumentEntry]] = None):
        self.entries: List[DocumentEntry] = entries or []

    @classmethod
    def load(cls, raw_entries: Optional[Iterable[Any]], owner: str = "") -> "DocumentArray":
        array = cls([parse_entry(raw) for raw in (raw_entries or [])])
        if array.corrupt_count:
            logger.warning(
                f"User {owner}: {array.corrupt_count} unparseable saved-article "
                "entries hidden from view"
            )
        return array

    @property
    def articles(self) -> List[StoredArticle]:
        return [entry.article for entry in self.entries if entry.article is not None]

    @property
    def corrupt_count(self) -> int:
        return sum(1 for entry in self.entries if entry.is_corrupt)

    def __len__(self) -> int:
        return len(self.entries)

    def contains(self, url: str, collection_name: str) -> bool:
        return any(article.dedup_key == (url, collection_name) for article in self.articles)

    def append(self, article: StoredArticle) -> None:
        self.entries.append(DocumentEntry(raw=article.model_dump_json(), article=article))

    def remove_where(self, predicate: Callable[[StoredArticle], bool]) -> int:
        """Drop parsed entries matching predicate; return how many were dropped."""
        kept = [
            entry
            for entry in self.entries
            if entry.is_corrupt or not predicate(entry.article)
        ]
        removed = len(self.entries) - len(kept)
        self.entries = kept
        return removed

    def grouped(self) -> Dict[str, List[StoredArticle]]:
        """Group parsed articles by collection name, keeping insertion order."""
        groups: Dict[str, List[StoredArticle]] = {}
        for article in self.articles:
            groups.setdefault(article.collection_name, []).append(article)
        return groups

    def dump(self) -> List[Any]:
        return [entry.raw for entry in self.entries]
