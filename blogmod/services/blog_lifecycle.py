"""Blog lifecycle: creation, moderation transitions, edits, deletion and engagement counters.

Every operation validates first, then applies its changes to the loaded
entity and commits once, so a refused operation leaves nothing behind.
"""
import logging
from datetime import datetime, UTC
from typing import Any, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from blogmod.core import config
from blogmod.core.errors import InvalidState, NotAuthorized, NotFound, SelfAction, ValidationError
from blogmod.core.permissions import blog_permissions
from blogmod.models.blog import Blog, BlogLike, BlogStatus
from blogmod.models.comment import Comment, CommentReport
from blogmod.models.user import User
from blogmod.services.engagement import like_toggle_score, trending_score

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("title", "content", "category", "tags", "featured_image")


def get_blog(session: Session, blog_id: str) -> Blog:
    blog = session.get(Blog, blog_id)
    if blog is None:
        raise NotFound("Blog not found")
    return blog


def validate_blog_fields(title: str, content: str, tags: Optional[list] = None, category: Optional[str] = None) -> None:
    """Guard shared by create, submit and update"""
    title = (title or "").strip()
    content = (content or "").strip()
    if not config.TITLE_MIN_LENGTH <= len(title) <= config.TITLE_MAX_LENGTH:
        raise ValidationError(
            f"Title must be between {config.TITLE_MIN_LENGTH}-{config.TITLE_MAX_LENGTH} characters"
        )
    if len(content) < config.CONTENT_MIN_LENGTH:
        raise ValidationError(f"Content must be at least {config.CONTENT_MIN_LENGTH} characters")
    if tags is not None and len(tags) > config.MAX_TAGS:
        raise ValidationError(f"Cannot have more than {config.MAX_TAGS} tags")
    if category is not None and len(category) > config.CATEGORY_MAX_LENGTH:
        raise ValidationError(f"Category cannot exceed {config.CATEGORY_MAX_LENGTH} characters")


def count_active_comments(session: Session, blog_id: str) -> int:
    return session.scalar(
        select(func.count(Comment.id)).where(Comment.blog_id == blog_id, Comment.is_active.is_(True))
    ) or 0


def has_liked(session: Session, blog_id: str, user: Optional[User]) -> bool:
    if user is None:
        return False
    return session.scalar(
        select(BlogLike.id).where(BlogLike.blog_id == blog_id, BlogLike.user_id == user.id)
    ) is not None


def create_blog(
    session: Session,
    author: User,
    title: str,
    content: str,
    category: str = "",
    tags: Optional[list] = None,
    featured_image: Optional[str] = None,
    submit: bool = True,
) -> Blog:
    """Create a blog; submitting puts it straight into the review queue"""
    tags = list(tags or [])
    validate_blog_fields(title, content, tags, category)

    blog = Blog(
        author_id=author.id,
        title=title.strip(),
        content=content,
        category=(category or "").strip(),
        tags=tags,
        featured_image=featured_image,
        status=BlogStatus.PENDING if submit else BlogStatus.DRAFT,
    )
    session.add(blog)
    session.commit()
    session.refresh(blog)
    logger.info(f"Blog created: id={blog.id}, author={author.id}, status={blog.status.value}")
    return blog


def submit_blog(session: Session, blog_id: str, actor: User) -> Blog:
    """draft -> pending"""
    blog = get_blog(session, blog_id)
    permissions = blog_permissions(actor, blog)
    if not permissions.is_privileged:
        raise NotAuthorized("Not authorized to submit this blog")
    if blog.status != BlogStatus.DRAFT:
        raise InvalidState("Only draft blogs can be submitted for review")
    validate_blog_fields(blog.title, blog.content, blog.tags, blog.category)

    blog.status = BlogStatus.PENDING
    session.commit()
    session.refresh(blog)
    logger.info(f"Blog submitted for review: id={blog.id}")
    return blog


def approve_blog(session: Session, blog_id: str, admin_notes: Optional[str] = None) -> Blog:
    """pending -> approved"""
    blog = get_blog(session, blog_id)
    if blog.status != BlogStatus.PENDING:
        logger.warning(f"Refused to approve blog {blog.id} in status {blog.status.value}")
        raise InvalidState("Only pending blogs can be approved")

    blog.status = BlogStatus.APPROVED
    blog.published_at = datetime.now(UTC)
    blog.admin_notes = admin_notes or ""
    blog.rejection_reason = None
    session.commit()
    session.refresh(blog)
    logger.info(f"Blog approved: id={blog.id}")
    return blog


def reject_blog(session: Session, blog_id: str, reason: Optional[str], admin_notes: Optional[str] = None) -> Blog:
    """pending -> rejected, a reason is mandatory"""
    reason = (reason or "").strip()
    if not reason:
        raise ValidationError("Rejection reason is required")
    if not config.REJECTION_REASON_MIN_LENGTH <= len(reason) <= config.REJECTION_REASON_MAX_LENGTH:
        raise ValidationError(
            f"Rejection reason must be between {config.REJECTION_REASON_MIN_LENGTH}-"
            f"{config.REJECTION_REASON_MAX_LENGTH} characters"
        )

    blog = get_blog(session, blog_id)
    if blog.status != BlogStatus.PENDING:
        logger.warning(f"Refused to reject blog {blog.id} in status {blog.status.value}")
        raise InvalidState("Only pending blogs can be rejected")

    blog.status = BlogStatus.REJECTED
    blog.rejection_reason = reason
    blog.admin_notes = admin_notes or ""
    blog.published_at = None
    session.commit()
    session.refresh(blog)
    logger.info(f"Blog rejected: id={blog.id}")
    return blog


def hide_blog(session: Session, blog_id: str, admin_notes: Optional[str] = None) -> Blog:
    """approved -> hidden"""
    blog = get_blog(session, blog_id)
    if blog.status != BlogStatus.APPROVED:
        raise InvalidState("Only published blogs can be hidden")

    blog.status = BlogStatus.HIDDEN
    if admin_notes is not None:
        blog.admin_notes = admin_notes
    session.commit()
    session.refresh(blog)
    logger.info(f"Blog hidden: id={blog.id}")
    return blog


def restore_blog(session: Session, blog_id: str) -> Blog:
    """hidden -> approved, the original publication date is kept"""
    blog = get_blog(session, blog_id)
    if blog.status != BlogStatus.HIDDEN:
        raise InvalidState("Only hidden blogs can be restored")

    blog.status = BlogStatus.APPROVED
    if blog.published_at is None:
        blog.published_at = datetime.now(UTC)
    session.commit()
    session.refresh(blog)
    logger.info(f"Blog restored: id={blog.id}")
    return blog


def update_blog(session: Session, blog_id: str, actor: User, fields: dict[str, Any]) -> Blog:
    """Apply an edit; an owner editing a rejected blog sends it back to draft"""
    blog = get_blog(session, blog_id)
    permissions = blog_permissions(actor, blog)
    if not permissions.is_privileged:
        raise NotAuthorized("Not authorized to update this blog")
    if blog.status == BlogStatus.PENDING:
        raise InvalidState("Cannot update blog while under review")
    if not permissions.can_edit:
        if blog.status == BlogStatus.APPROVED:
            raise InvalidState("Cannot update published blog. Contact admin if changes are needed.")
        raise InvalidState(f"Cannot update blog in {blog.status.value} status")

    changes = {key: value for key, value in fields.items() if key in EDITABLE_FIELDS and value is not None}
    merged = {key: changes.get(key, getattr(blog, key)) for key in EDITABLE_FIELDS}
    validate_blog_fields(merged["title"], merged["content"], merged["tags"], merged["category"])

    for key, value in changes.items():
        setattr(blog, key, list(value) if key == "tags" else value)

    if blog.status == BlogStatus.REJECTED and not actor.is_admin:
        blog.status = BlogStatus.DRAFT
        blog.rejection_reason = None
        blog.admin_notes = None

    session.commit()
    session.refresh(blog)
    return blog


def delete_blog(session: Session, blog_id: str, actor: User) -> None:
    """Remove a blog together with its comments, reports and likes"""
    blog = get_blog(session, blog_id)
    permissions = blog_permissions(actor, blog)
    if not permissions.is_privileged:
        raise NotAuthorized("Not authorized to delete this blog")
    if not permissions.can_delete:
        if blog.status == BlogStatus.PENDING:
            raise InvalidState("Cannot delete blog while under review. Contact admin if needed.")
        if blog.status == BlogStatus.APPROVED:
            raise InvalidState("Cannot delete published blog. Contact admin to remove published content.")
        raise InvalidState(f"Cannot delete blog in {blog.status.value} status")

    comment_ids = select(Comment.id).where(Comment.blog_id == blog.id)
    for statement in (
        delete(CommentReport).where(CommentReport.comment_id.in_(comment_ids)),
        delete(Comment).where(Comment.blog_id == blog.id),
        delete(BlogLike).where(BlogLike.blog_id == blog.id),
    ):
        session.execute(statement.execution_options(synchronize_session=False))
    session.delete(blog)
    session.commit()
    logger.info(f"Blog deleted: id={blog_id}, by={actor.id}")


def toggle_like(session: Session, blog_id: str, user: User) -> tuple[Blog, bool]:
    """Like or unlike; returns the blog and whether the user now likes it"""
    blog = get_blog(session, blog_id)
    if blog.status != BlogStatus.APPROVED:
        raise InvalidState("Only published blogs can be liked")
    if blog.author_id == user.id:
        raise SelfAction("Cannot like your own blog")

    existing = session.scalar(
        select(BlogLike).where(BlogLike.blog_id == blog.id, BlogLike.user_id == user.id)
    )
    if existing is not None:
        session.delete(existing)
    else:
        session.add(BlogLike(blog_id=blog.id, user_id=user.id))
    try:
        session.flush()
    except IntegrityError:
        session.rollback()
        raise InvalidState("Like is already being processed, please retry")

    # likes_count is recomputed from the likes set in a single statement
    now = datetime.now(UTC)
    likes_total = select(func.count(BlogLike.id)).where(BlogLike.blog_id == blog.id).scalar_subquery()
    session.execute(
        update(Blog)
        .where(Blog.id == blog.id)
        .values(likes_count=likes_total, last_activity=now)
        .execution_options(synchronize_session=False)
    )
    session.refresh(blog)
    blog.trending_score = like_toggle_score(blog.likes_count, blog.views, blog.created_at, now)
    session.commit()
    session.refresh(blog)
    return blog, existing is None


def record_view(session: Session, blog: Blog, viewer: Optional[User]) -> bool:
    """Count a view of a published blog by anyone but its author"""
    if blog.status != BlogStatus.APPROVED:
        return False
    if viewer is not None and viewer.id == blog.author_id:
        return False

    now = datetime.now(UTC)
    session.execute(
        update(Blog)
        .where(Blog.id == blog.id)
        .values(views=Blog.views + 1, last_activity=now)
        .execution_options(synchronize_session=False)
    )
    session.refresh(blog)
    blog.trending_score = trending_score(
        blog.likes_count, count_active_comments(session, blog.id), blog.views, blog.created_at, now
    )
    session.commit()
    session.refresh(blog)
    return True


def touch_last_activity(session: Session, blog_id: str) -> None:
    """Post-commit side effect of comment activity on the owning blog"""
    session.execute(
        update(Blog)
        .where(Blog.id == blog_id)
        .values(last_activity=datetime.now(UTC))
        .execution_options(synchronize_session=False)
    )
    session.commit()
