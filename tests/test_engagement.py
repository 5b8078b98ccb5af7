from datetime import datetime, timedelta, UTC
import pytest
from blogmod.services.engagement import age_in_hours, like_toggle_score, trending_score

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)

class TestTrendingScore:
    def test_fresh_blog_is_not_decayed(self):
        created = NOW - timedelta(hours=6)
        assert trending_score(2, 1, 10, created, NOW) == pytest.approx(2 * 3 + 1 * 2 + 10 * 0.1)

    def test_older_blog_is_divided_by_age_in_days(self):
        created = NOW - timedelta(days=4)
        assert trending_score(2, 1, 10, created, NOW) == pytest.approx(9.0 / 4)

    def test_no_engagement(self):
        assert trending_score(0, 0, 0, NOW, NOW) == 0

    def test_naive_created_at_is_utc(self):
        created = (NOW - timedelta(days=2)).replace(tzinfo=None)
        assert age_in_hours(created, NOW) == pytest.approx(48)

class TestLikeToggleScore:
    def test_new_blog(self):
        assert like_toggle_score(1, 0, NOW, NOW) == pytest.approx(2)

    def test_decay(self):
        created = NOW - timedelta(days=10)
        assert like_toggle_score(3, 4, created, NOW) == pytest.approx(10 * 0.5)

    def test_decay_floor(self):
        created = NOW - timedelta(days=365)
        assert like_toggle_score(1, 0, created, NOW) == pytest.approx(2 * 0.1)

    def test_formulas_differ(self):
        created = NOW - timedelta(days=2)
        assert like_toggle_score(5, 10, created, NOW) != trending_score(5, 0, 10, created, NOW)
