from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from blogmod.core.config import COMMENTS_PAGE_SIZE, MAX_PAGE_SIZE
from blogmod.core.security import get_current_active_user, get_optional_current_user
from blogmod.db.database import get_session
from blogmod.models.user import User
from blogmod.schemas.comment import CommentCreate, CommentListResponse, CommentResponse, CommentUpdate, ReportCreate
from blogmod.services import comment_thread

# Comments nested under a blog: /blogs/{blog_id}/comments
blog_comments_router = APIRouter()
# Single comments: /comments/{comment_id}
router = APIRouter()

@blog_comments_router.post("", response_model=CommentResponse, status_code=status.HTTP_201_CREATED, summary="Comment on a blog")
def create_comment(
    blog_id: str,
    comment_in: CommentCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_active_user)
):
    """Add a comment to a published blog, or reply to one of its comments"""
    return comment_thread.add_comment(
        session,
        blog_id,
        current_user,
        comment_in.content,
        parent_comment_id=comment_in.parent_comment_id,
    )

@blog_comments_router.get("", response_model=CommentListResponse, summary="List comments of a blog")
def list_comments(
    blog_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(COMMENTS_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    session: Session = Depends(get_session)
):
    """Top-level comments, newest first, with their direct replies"""
    return comment_thread.list_for_blog(session, blog_id, page, limit)

@router.get("/{comment_id}", response_model=CommentResponse, summary="Get a comment")
def get_comment(
    comment_id: str,
    session: Session = Depends(get_session),
    current_user: User | None = Depends(get_optional_current_user)
):
    """Get a comment of a published blog"""
    return comment_thread.get_visible_comment(session, comment_id, current_user)

@router.put("/{comment_id}", response_model=CommentResponse, summary="Update a comment")
def update_comment(
    comment_id: str,
    comment_update: CommentUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_active_user)
):
    """Update a comment (author or admin)"""
    return comment_thread.edit_comment(session, comment_id, current_user, comment_update.content)

@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a comment")
def delete_comment(
    comment_id: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_active_user)
):
    """Soft-delete a comment (author or admin); replies stay in place"""
    comment_thread.soft_delete_comment(session, comment_id, current_user)
    return None

@router.post("/{comment_id}:reportComment", response_model=CommentResponse, summary="Report a comment")
def report_comment(
    comment_id: str,
    report_in: ReportCreate | None = None,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_active_user)
):
    """Report a comment for moderation; a user may report each comment once"""
    reason = report_in.reason if report_in else None
    return comment_thread.report_comment(session, comment_id, current_user, reason)
