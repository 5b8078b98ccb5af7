"""
Read side of blogs: single-blog reads, filtered listings and the review queue.

Visibility rules:
- anonymous readers and other users only ever see approved blogs;
- an author asking for their own blogs sees every status;
- admins may filter by any status, or by `all`.
"""
import math
from typing import Optional

from sqlalchemy import case, exists, func, or_, select
from sqlalchemy.orm import Session

from blogmod.core.errors import NotAuthorized, ValidationError
from blogmod.core.permissions import blog_permissions, project_blog
from blogmod.models.blog import Blog, BlogLike, BlogStatus
from blogmod.models.comment import Comment
from blogmod.models.user import User
from blogmod.services.blog_lifecycle import get_blog, record_view

ALL_STATUSES = "all"
SORT_OPTIONS = ("latest", "popular", "trending", "relevance")


def build_pagination(total: int, page: int, limit: int) -> dict:
    total_pages = math.ceil(total / limit) if limit else 0
    return {
        "current_page": page,
        "total_pages": total_pages,
        "total": total,
        "limit": limit,
        "has_next": page < total_pages,
        "has_prev": page > 1,
    }


def comments_count_by_blog(session: Session, blog_ids: list[str]) -> dict[str, int]:
    if not blog_ids:
        return {}
    rows = session.execute(
        select(Comment.blog_id, func.count(Comment.id))
        .where(Comment.blog_id.in_(blog_ids), Comment.is_active.is_(True))
        .group_by(Comment.blog_id)
    )
    return {blog_id: count for blog_id, count in rows}


def liked_blog_ids(session: Session, user: Optional[User], blog_ids: list[str]) -> set[str]:
    if user is None or not blog_ids:
        return set()
    return set(session.scalars(
        select(BlogLike.blog_id).where(BlogLike.user_id == user.id, BlogLike.blog_id.in_(blog_ids))
    ))


def get_blog_for_viewer(session: Session, blog_id: str, viewer: Optional[User]) -> dict:
    """Read one blog, counting the view when it is a public read"""
    blog = get_blog(session, blog_id)
    permissions = blog_permissions(viewer, blog)
    if not permissions.can_view:
        raise NotAuthorized("Blog not available for viewing")

    record_view(session, blog, viewer)
    return project_blog(
        blog,
        permissions,
        has_liked=bool(liked_blog_ids(session, viewer, [blog.id])),
        comments_count=comments_count_by_blog(session, [blog.id]).get(blog.id, 0),
    )


def _parse_status(status: Optional[str]) -> Optional[str]:
    if status is None or status == ALL_STATUSES:
        return status
    try:
        return BlogStatus(status).value
    except ValueError:
        raise ValidationError(
            f"Status must be one of: {', '.join(s.value for s in BlogStatus)}, {ALL_STATUSES}"
        )


def _search_relevance(search: str):
    """Weighted text match: title 3, tags 2, content 1"""
    in_title = Blog.title.icontains(search, autoescape=True)
    # match decoded tag values, not the stored JSON text
    tag = func.json_each(Blog.tags).table_valued("value").alias("tag")
    in_tags = exists(select(tag.c.value).where(tag.c.value.icontains(search, autoescape=True)))
    in_content = Blog.content.icontains(search, autoescape=True)
    relevance = (
        case((in_title, 3), else_=0)
        + case((in_tags, 2), else_=0)
        + case((in_content, 1), else_=0)
    )
    return or_(in_title, in_tags, in_content), relevance


def list_blogs(
    session: Session,
    viewer: Optional[User],
    page: int,
    limit: int,
    status: Optional[str] = None,
    author: Optional[str] = None,
    category: Optional[str] = None,
    search: Optional[str] = None,
    sort: Optional[str] = None,
) -> dict:
    """Visibility-filtered, sorted and paginated blog listing"""
    requested_status = _parse_status(status)
    is_admin = viewer is not None and viewer.is_admin
    is_own = viewer is not None and author is not None and author == viewer.id

    if is_admin:
        effective_status = requested_status or BlogStatus.APPROVED.value
    elif is_own:
        effective_status = requested_status or ALL_STATUSES
    else:
        effective_status = BlogStatus.APPROVED.value

    criteria = []
    if effective_status != ALL_STATUSES:
        criteria.append(Blog.status == BlogStatus(effective_status))
    if author:
        criteria.append(Blog.author_id == author)
    if category:
        criteria.append(Blog.category == category)

    relevance = None
    search = (search or "").strip() or None
    if search:
        matches, relevance = _search_relevance(search)
        criteria.append(matches)

    if sort is None:
        sort = "relevance" if search else "latest"
    if sort not in SORT_OPTIONS:
        raise ValidationError(f"Sort must be one of: {', '.join(SORT_OPTIONS)}")
    # relevance needs a search term
    if sort == "relevance" and not search:
        sort = "latest"

    if sort in ("popular", "trending"):
        order_by = (Blog.trending_score.desc(), Blog.published_at.desc())
    elif sort == "relevance":
        order_by = (relevance.desc(), Blog.published_at.desc())
    else:
        order_by = (Blog.created_at.desc(),)

    total = session.scalar(select(func.count(Blog.id)).where(*criteria)) or 0
    blogs = list(session.scalars(
        select(Blog)
        .where(*criteria)
        .order_by(*order_by)
        .offset((page - 1) * limit)
        .limit(limit)
    ))

    blog_ids = [blog.id for blog in blogs]
    comment_counts = comments_count_by_blog(session, blog_ids)
    liked = liked_blog_ids(session, viewer, blog_ids)
    items = [
        project_blog(
            blog,
            blog_permissions(viewer, blog),
            has_liked=blog.id in liked,
            comments_count=comment_counts.get(blog.id, 0),
            include_content=False,
        )
        for blog in blogs
    ]
    return {
        "blogs": items,
        "pagination": build_pagination(total, page, limit),
        "filters": {
            "status": effective_status,
            "author": author,
            "category": category,
            "search": search,
            "sort": sort,
        },
    }


def list_pending_blogs(session: Session, admin: User, page: int, limit: int) -> dict:
    """Review queue, newest submissions first"""
    criteria = (Blog.status == BlogStatus.PENDING,)
    total = session.scalar(select(func.count(Blog.id)).where(*criteria)) or 0
    blogs = session.scalars(
        select(Blog)
        .where(*criteria)
        .order_by(Blog.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return {
        "blogs": [project_blog(blog, blog_permissions(admin, blog)) for blog in blogs],
        "pagination": build_pagination(total, page, limit),
        "filters": {"status": BlogStatus.PENDING.value},
    }
