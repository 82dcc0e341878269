"""Tests for the typed document-array container."""

import pytest
from datetime import datetime, timezone
from newsshelf.schemas.saved_article import StoredArticle
from newsshelf.services.document_array import DocumentArray, parse_entry


def _article(url, collection_name):
    return StoredArticle(
        url=url,
        title="Title",
        source="Example News",
        saved_at=datetime.now(timezone.utc),
        collection_name=collection_name,
    )


@pytest.mark.unit
class TestDocumentArray:
    """Test parsing, grouping and removal on DocumentArray."""

    def test_parse_entry_valid(self, stored_document):
        entry = parse_entry(stored_document("https://a", "Reading"))

        assert not entry.is_corrupt
        assert entry.article.url == "https://a"
        assert entry.article.collection_name == "Reading"

    @pytest.mark.parametrize(
        "raw",
        ["not json", '{"url": "https://a"}', "[1, 2]", 42, None],
    )
    def test_parse_entry_corrupt(self, raw):
        entry = parse_entry(raw)

        assert entry.is_corrupt
        assert entry.raw == raw

    def test_load_hides_corrupt_entries(self, stored_document):
        array = DocumentArray.load(
            ["garbage", stored_document("https://a", "Reading")], owner="u1"
        )

        assert len(array) == 2
        assert array.corrupt_count == 1
        assert [a.url for a in array.articles] == ["https://a"]

    def test_grouped_keeps_insertion_order(self, stored_document):
        array = DocumentArray.load(
            [
                stored_document("https://a", "Reading"),
                stored_document("https://b", "Later"),
                stored_document("https://c", "Reading"),
            ]
        )

        grouped = array.grouped()

        assert list(grouped.keys()) == ["Reading", "Later"]
        assert [a.url for a in grouped["Reading"]] == ["https://a", "https://c"]
        assert [a.url for a in grouped["Later"]] == ["https://b"]

    def test_collection_names_are_case_sensitive(self):
        array = DocumentArray()
        array.append(_article("https://a", "Tech"))
        array.append(_article("https://a", "tech"))

        assert list(array.grouped().keys()) == ["Tech", "tech"]
        assert array.contains("https://a", "Tech")
        assert not array.contains("https://a", "TECH")

    def test_remove_where_retains_corrupt_entries_in_place(self, stored_document):
        raw = [
            stored_document("https://a", "Reading"),
            "garbage",
            stored_document("https://b", "Reading"),
        ]
        array = DocumentArray.load(raw)

        removed = array.remove_where(lambda a: a.url == "https://a")

        assert removed == 1
        assert array.dump() == raw[1:]

    def test_append_serializes_round_trippable_document(self):
        array = DocumentArray()
        array.append(_article("https://a", "Reading"))

        reloaded = DocumentArray.load(array.dump())

        assert reloaded.corrupt_count == 0
        assert reloaded.articles[0].dedup_key == ("https://a", "Reading")
