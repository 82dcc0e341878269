"""Tests for AdminAggregator dashboard statistics."""

import pytest
from datetime import datetime, timezone, timedelta
from unittest.mock import patch
from newsshelf.core.admin import is_admin_key
from newsshelf.core.logging_config import mask_credential
from newsshelf.services.admin_aggregator import AdminAggregator


@pytest.mark.unit
class TestAdminAggregator:
    """Test per-user stats, totals and top articles."""

    def test_top_articles_scenario(self, db_session, make_user):
        make_user("key_user_1", seen=["a", "b"])
        make_user("key_user_2", seen=["b", "c"])
        make_user("key_user_3", seen=["b"])

        dashboard = AdminAggregator(db_session).dashboard()

        top = [(t.url, t.view_count) for t in dashboard.top_articles]
        assert top[0] == ("b", 3)
        assert sorted(top[1:]) == [("a", 1), ("c", 1)]

    def test_ties_keep_encounter_order(self, db_session, make_user):
        make_user("key_user_1", seen=["x", "y", "z"])

        dashboard = AdminAggregator(db_session).dashboard()

        assert [t.url for t in dashboard.top_articles] == ["x", "y", "z"]

    def test_top_articles_limited(self, db_session, make_user):
        make_user("key_user_1", seen=[f"https://example.com/{i}" for i in range(15)])

        assert len(AdminAggregator(db_session).dashboard().top_articles) == 10
        assert len(AdminAggregator(db_session, top_n=3).dashboard().top_articles) == 3

    def test_per_user_stats_and_totals(self, db_session, make_user):
        now = datetime.now(timezone.utc)
        older = make_user(
            "abcdefghijklmnop",
            seen=["a", "b"],
            clicks=7,
            topics=["AI"],
            created_at=now - timedelta(days=2),
        )
        newer = make_user(
            "zyxwvutsrqponmlk", seen=["a"], clicks=1, created_at=now - timedelta(days=1)
        )

        dashboard = AdminAggregator(db_session).dashboard()

        # Newest first
        assert [u.id for u in dashboard.users] == [newer.id, older.id]
        older_stats = dashboard.users[1]
        assert older_stats.api_key == "abcdefgh..."
        assert older_stats.clicks == 7
        assert older_stats.articles_viewed == 2
        assert older_stats.topics == ["AI"]
        assert dashboard.stats.total_users == 2
        assert dashboard.stats.total_clicks == 8
        assert dashboard.stats.total_articles_viewed == 3

    def test_full_credential_never_exposed(self, db_session, make_user):
        for key in ["secret_credential_value", "abc", "12345678"]:
            make_user(key, seen=[])

        dashboard = AdminAggregator(db_session).dashboard()

        for user_stats in dashboard.users:
            assert user_stats.api_key not in {
                "secret_credential_value",
                "abc",
                "12345678",
            }
            assert not user_stats.api_key.startswith(("abc", "12345678"))
        assert sorted(u.api_key for u in dashboard.users) == [
            "1234...",
            "a...",
            "secret_c...",
        ]

    def test_user_without_side_rows_is_included_with_zeros(self, db_session, make_user):
        make_user("bare_user_key")

        dashboard = AdminAggregator(db_session).dashboard()

        assert dashboard.stats.total_users == 1
        user_stats = dashboard.users[0]
        assert (user_stats.clicks, user_stats.articles_viewed, user_stats.topics) == (
            0,
            0,
            [],
        )

    def test_side_table_failure_degrades(self, db_session, make_user):
        make_user("key_user_1", seen=["a"], clicks=3)
        aggregator = AdminAggregator(db_session)

        with patch.object(aggregator, "_read_all", return_value=[]):
            dashboard = aggregator.dashboard()

        assert dashboard.stats.total_users == 1
        assert dashboard.stats.total_clicks == 0
        assert dashboard.top_articles == []

    def test_empty_dashboard(self, db_session):
        dashboard = AdminAggregator(db_session).dashboard()

        assert dashboard.users == []
        assert dashboard.stats.total_users == 0
        assert dashboard.top_articles == []


@pytest.mark.unit
class TestAdminKey:
    """Test the admin capability check."""

    def test_is_admin_key(self):
        assert is_admin_key("test_admin_key") is True
        assert is_admin_key("wrong") is False
        assert is_admin_key("") is False
        assert is_admin_key(None) is False


@pytest.mark.unit
class TestMaskCredential:
    """Test credential masking for display."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("abcdefghijklmnop", "abcdefgh..."),
            ("12345678", "1234..."),
            ("abc", "a..."),
            ("x", "..."),
            ("", "N/A"),
            (None, "N/A"),
        ],
    )
    def test_mask_credential(self, value, expected):
        assert mask_credential(value) == expected
