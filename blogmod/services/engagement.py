"""Trending score computation.

Two formulas are in use:

* `trending_score` is the general formula, applied whenever a blog's views
  (or likes outside the like toggle) change.
* `like_toggle_score` is the time-decay formula applied by the like toggle.

Both are pure: the caller passes `now` so results are reproducible.
"""
from datetime import datetime, UTC


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (as read back from SQLite) as UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def age_in_hours(created_at: datetime, now: datetime) -> float:
    return (as_utc(now) - as_utc(created_at)).total_seconds() / 3600


def trending_score(
    likes_count: int,
    comments_count: int,
    views: int,
    created_at: datetime,
    now: datetime,
) -> float:
    """(likes*3 + comments*2 + views*0.1) / max(1, age_hours/24)"""
    age_factor = max(1.0, age_in_hours(created_at, now) / 24)
    return (likes_count * 3 + comments_count * 2 + views * 0.1) / age_factor


def like_toggle_score(likes_count: int, views: int, created_at: datetime, now: datetime) -> float:
    """(likes*2 + views) * max(0.1, 1/(1 + age_days*0.1))"""
    age_in_days = age_in_hours(created_at, now) / 24
    time_decay = max(0.1, 1 / (1 + age_in_days * 0.1))
    return (likes_count * 2 + views) * time_decay
