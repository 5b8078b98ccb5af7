"""Read-only analytics for the moderation dashboard.

All counts are read inside one session transaction. Writes landing while the
aggregation runs may make the numbers slightly stale, never inconsistent
with the stored rows.
"""
from datetime import datetime, timedelta, UTC
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from blogmod.core import config
from blogmod.models.blog import Blog, BlogStatus
from blogmod.models.comment import Comment
from blogmod.models.user import User


def get_overview(session: Session) -> dict:
    users = session.execute(
        select(
            func.count(User.id).label("total"),
            func.count(User.id).filter(User.is_active.is_(True)).label("active"),
        )
    ).one()

    blogs_by_status = {status: 0 for status in BlogStatus}
    for status, count in session.execute(select(Blog.status, func.count(Blog.id)).group_by(Blog.status)):
        blogs_by_status[status] = count

    comments = session.execute(
        select(
            func.count(Comment.id).label("total"),
            func.count(Comment.id).filter(Comment.is_active.is_(True)).label("active"),
            func.count(Comment.id)
            .filter(Comment.is_active.is_(True), Comment.is_reported.is_(True))
            .label("reported"),
        )
    ).one()

    total_users = users.total or 0
    active_users = users.active or 0
    total_comments = comments.total or 0
    active_comments = comments.active or 0
    return {
        "total_users": total_users,
        "active_users": active_users,
        "inactive_users": total_users - active_users,
        "total_blogs": sum(blogs_by_status.values()),
        "draft_blogs": blogs_by_status[BlogStatus.DRAFT],
        "pending_blogs": blogs_by_status[BlogStatus.PENDING],
        "published_blogs": blogs_by_status[BlogStatus.APPROVED],
        "rejected_blogs": blogs_by_status[BlogStatus.REJECTED],
        "hidden_blogs": blogs_by_status[BlogStatus.HIDDEN],
        "total_comments": total_comments,
        "active_comments": active_comments,
        "deleted_comments": total_comments - active_comments,
        "reported_comments": comments.reported or 0,
    }


def get_recent_activity(session: Session, now: datetime) -> dict:
    since = now - timedelta(days=config.ANALYTICS_WINDOW_DAYS)
    return {
        "window_days": config.ANALYTICS_WINDOW_DAYS,
        "new_users": session.scalar(select(func.count(User.id)).where(User.created_at >= since)) or 0,
        "new_blogs": session.scalar(select(func.count(Blog.id)).where(Blog.created_at >= since)) or 0,
        "new_comments": session.scalar(select(func.count(Comment.id)).where(Comment.created_at >= since)) or 0,
    }


def get_top_authors(session: Session, limit: int = config.LEADERBOARD_SIZE) -> list[dict]:
    """Authors with the most approved blogs"""
    blog_count = func.count(Blog.id).label("blog_count")
    rows = session.execute(
        select(Blog.author_id, blog_count)
        .where(Blog.status == BlogStatus.APPROVED)
        .group_by(Blog.author_id)
        .order_by(blog_count.desc())
        .limit(limit)
    ).all()

    authors = {
        user.id: user
        for user in session.scalars(select(User).where(User.id.in_([row.author_id for row in rows])))
    }
    return [
        {
            "author_id": row.author_id,
            "username": authors[row.author_id].username if row.author_id in authors else None,
            "email": authors[row.author_id].email if row.author_id in authors else None,
            "blog_count": row.blog_count,
        }
        for row in rows
    ]


def get_popular_blogs(session: Session, limit: int = config.LEADERBOARD_SIZE) -> list[Blog]:
    return list(session.scalars(
        select(Blog)
        .where(Blog.status == BlogStatus.APPROVED)
        .order_by(Blog.likes_count.desc(), Blog.views.desc())
        .limit(limit)
    ))


def get_dashboard_analytics(session: Session, now: Optional[datetime] = None) -> dict:
    now = now or datetime.now(UTC)
    return {
        "overview": get_overview(session),
        "recent_activity": get_recent_activity(session, now),
        "top_authors": get_top_authors(session),
        "popular_blogs": get_popular_blogs(session),
    }
