"""
Comment threads: replies with bounded depth, soft delete and reporting.

Comments are only ever added to published blogs. Depth is fixed when the
comment is created. Soft-deleted comments stay in the table for audit but
are invisible to every read in this module.
"""
import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from blogmod.core import config
from blogmod.core.errors import (
    DepthExceeded,
    DuplicateReport,
    InvalidState,
    NotAuthorized,
    NotFound,
    SelfAction,
    ValidationError,
)
from blogmod.models.blog import Blog, BlogStatus
from blogmod.models.comment import Comment, CommentReport
from blogmod.models.user import User
from blogmod.schemas.comment import CommentResponse, CommentThread, ReportRecord, ReportedCommentResponse
from blogmod.services.blog_lifecycle import touch_last_activity
from blogmod.services.feed import build_pagination

logger = logging.getLogger(__name__)


def _clean_content(content: str) -> str:
    content = (content or "").strip()
    if not config.COMMENT_MIN_LENGTH <= len(content) <= config.COMMENT_MAX_LENGTH:
        raise ValidationError(
            f"Comment must be between {config.COMMENT_MIN_LENGTH}-{config.COMMENT_MAX_LENGTH} characters"
        )
    return content


def get_active_comment(session: Session, comment_id: str) -> Comment:
    comment = session.get(Comment, comment_id)
    if comment is None or not comment.is_active:
        raise NotFound("Comment not found")
    return comment


def get_visible_comment(session: Session, comment_id: str, viewer: Optional[User]) -> Comment:
    """Active comment on a published blog; its author and admins also reach comments of unpublished blogs"""
    comment = get_active_comment(session, comment_id)
    if viewer is not None and (viewer.is_admin or viewer.id == comment.author_id):
        return comment
    blog = session.get(Blog, comment.blog_id)
    if blog is None or blog.status != BlogStatus.APPROVED:
        raise NotFound("Comment not found")
    return comment


def _ensure_can_modify(comment: Comment, actor: User, action: str) -> None:
    if comment.author_id != actor.id and not actor.is_admin:
        raise NotAuthorized(f"Not authorized to {action} this comment")


def add_comment(
    session: Session,
    blog_id: str,
    author: User,
    content: str,
    parent_comment_id: Optional[str] = None,
) -> Comment:
    """Add a comment or a reply; the reply depth is checked before anything is stored"""
    content = _clean_content(content)

    blog = session.get(Blog, blog_id)
    if blog is None:
        raise NotFound("Blog not found")
    if blog.status != BlogStatus.APPROVED:
        raise InvalidState("Comments can only be added to published blogs")

    depth = 0
    if parent_comment_id:
        parent = session.get(Comment, parent_comment_id)
        if parent is None or not parent.is_active or parent.blog_id != blog_id:
            raise NotFound("Parent comment not found")
        depth = parent.depth + 1
        if depth > config.MAX_COMMENT_DEPTH:
            raise DepthExceeded(f"Maximum reply depth is {config.MAX_COMMENT_DEPTH} levels")

    comment = Comment(
        blog_id=blog_id,
        author_id=author.id,
        parent_comment_id=parent_comment_id or None,
        content=content,
        depth=depth,
    )
    session.add(comment)
    session.commit()

    touch_last_activity(session, blog_id)
    session.refresh(comment)
    return comment


def edit_comment(session: Session, comment_id: str, actor: User, content: str) -> Comment:
    """Change the text of a comment; parent and depth never change"""
    comment = get_visible_comment(session, comment_id, actor)
    _ensure_can_modify(comment, actor, "update")
    comment.content = _clean_content(content)
    session.commit()

    touch_last_activity(session, comment.blog_id)
    session.refresh(comment)
    return comment


def soft_delete_comment(session: Session, comment_id: str, actor: User) -> None:
    comment = get_visible_comment(session, comment_id, actor)
    _ensure_can_modify(comment, actor, "delete")
    comment.is_active = False
    blog_id = comment.blog_id
    session.commit()

    touch_last_activity(session, blog_id)
    logger.info(f"Comment soft-deleted: id={comment_id}, by={actor.id}")


def report_comment(session: Session, comment_id: str, reporter: User, reason: Optional[str] = None) -> Comment:
    """Flag a comment for moderation; each user may report a comment once"""
    comment = get_visible_comment(session, comment_id, reporter)
    if comment.author_id == reporter.id:
        raise SelfAction("Cannot report your own comment")

    already_reported = session.scalar(
        select(CommentReport.id).where(
            CommentReport.comment_id == comment.id,
            CommentReport.user_id == reporter.id,
        )
    )
    if already_reported is not None:
        raise DuplicateReport()

    session.add(CommentReport(
        comment_id=comment.id,
        user_id=reporter.id,
        reason=(reason or "").strip() or config.DEFAULT_REPORT_REASON,
    ))
    comment.is_reported = True
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise DuplicateReport()
    session.refresh(comment)
    logger.info(f"Comment reported: id={comment.id}, by={reporter.id}")
    return comment


def list_reports(session: Session, comment_id: str) -> list[CommentReport]:
    return list(session.scalars(
        select(CommentReport)
        .where(CommentReport.comment_id == comment_id)
        .order_by(CommentReport.reported_at.asc())
    ))


def list_for_blog(session: Session, blog_id: str, page: int, limit: int) -> dict:
    """Top-level comments, newest first, each with its direct replies in chronological order"""
    blog = session.get(Blog, blog_id)
    if blog is None or blog.status != BlogStatus.APPROVED:
        raise NotFound("Blog not found or not published")

    top_level = (
        Comment.blog_id == blog_id,
        Comment.is_active.is_(True),
        Comment.parent_comment_id.is_(None),
    )
    total = session.scalar(select(func.count(Comment.id)).where(*top_level)) or 0
    comments = list(session.scalars(
        select(Comment)
        .where(*top_level)
        .order_by(Comment.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    ))

    replies_by_parent: dict[str, list[Comment]] = {comment.id: [] for comment in comments}
    if comments:
        replies = session.scalars(
            select(Comment)
            .where(
                Comment.parent_comment_id.in_(list(replies_by_parent)),
                Comment.is_active.is_(True),
            )
            .order_by(Comment.created_at.asc())
        )
        for reply in replies:
            replies_by_parent[reply.parent_comment_id].append(reply)

    threads = [
        CommentThread(
            **CommentResponse.model_validate(comment).model_dump(),
            replies=[CommentResponse.model_validate(reply) for reply in replies_by_parent[comment.id]],
        )
        for comment in comments
    ]
    return {"comments": threads, "pagination": build_pagination(total, page, limit)}


def list_user_comments(session: Session, user: User, page: int, limit: int) -> dict:
    criteria = (Comment.author_id == user.id, Comment.is_active.is_(True))
    total = session.scalar(select(func.count(Comment.id)).where(*criteria)) or 0
    comments = session.scalars(
        select(Comment)
        .where(*criteria)
        .order_by(Comment.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return {
        "comments": [CommentResponse.model_validate(comment) for comment in comments],
        "pagination": build_pagination(total, page, limit),
    }


def list_reported_comments(session: Session, page: int, limit: int) -> dict:
    """Active comments with at least one report, most recently touched first"""
    criteria = (Comment.is_reported.is_(True), Comment.is_active.is_(True))
    total = session.scalar(select(func.count(Comment.id)).where(*criteria)) or 0
    comments = list(session.scalars(
        select(Comment)
        .where(*criteria)
        .order_by(Comment.updated_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    ))
    return {
        "comments": [
            ReportedCommentResponse(
                **CommentResponse.model_validate(comment).model_dump(),
                reported_by=[ReportRecord.model_validate(report) for report in list_reports(session, comment.id)],
            )
            for comment in comments
        ],
        "pagination": build_pagination(total, page, limit),
    }
