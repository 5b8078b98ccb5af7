from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from blogmod.core.config import COMMENTS_PAGE_SIZE, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from blogmod.core.permissions import blog_permissions, project_blog
from blogmod.core.security import get_current_admin
from blogmod.db.database import get_session
from blogmod.models.user import User
from blogmod.schemas.blog import ApproveRequest, BlogListResponse, BlogResponse, RejectRequest
from blogmod.schemas.comment import ReportedCommentListResponse
from blogmod.schemas.dashboard import DashboardAnalytics
from blogmod.schemas.user import UserInDB, UserListResponse
from blogmod.services import blog_lifecycle, comment_thread, dashboard, feed, user_admin

router = APIRouter()

def _admin_view(blog, admin: User, session: Session) -> dict:
    return project_blog(
        blog,
        blog_permissions(admin, blog),
        comments_count=blog_lifecycle.count_active_comments(session, blog.id),
    )

@router.get("/blogs/pending", response_model=BlogListResponse, response_model_exclude_unset=True, summary="Review queue")
def list_pending_blogs(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    session: Session = Depends(get_session),
    current_admin: User = Depends(get_current_admin)
):
    """List blogs waiting for review, newest first"""
    return feed.list_pending_blogs(session, current_admin, page, limit)

@router.post("/blogs/{blog_id}:approveBlog", response_model=BlogResponse, summary="Approve a pending blog")
def approve_blog(
    blog_id: str,
    approve_in: ApproveRequest | None = None,
    session: Session = Depends(get_session),
    current_admin: User = Depends(get_current_admin)
):
    """Publish a pending blog"""
    admin_notes = approve_in.admin_notes if approve_in else None
    blog = blog_lifecycle.approve_blog(session, blog_id, admin_notes)
    return _admin_view(blog, current_admin, session)

@router.post("/blogs/{blog_id}:rejectBlog", response_model=BlogResponse, summary="Reject a pending blog")
def reject_blog(
    blog_id: str,
    reject_in: RejectRequest,
    session: Session = Depends(get_session),
    current_admin: User = Depends(get_current_admin)
):
    """Reject a pending blog with a reason the author gets to read"""
    blog = blog_lifecycle.reject_blog(session, blog_id, reject_in.rejection_reason, reject_in.admin_notes)
    return _admin_view(blog, current_admin, session)

@router.post("/blogs/{blog_id}:hideBlog", response_model=BlogResponse, summary="Hide a published blog")
def hide_blog(
    blog_id: str,
    hide_in: ApproveRequest | None = None,
    session: Session = Depends(get_session),
    current_admin: User = Depends(get_current_admin)
):
    admin_notes = hide_in.admin_notes if hide_in else None
    blog = blog_lifecycle.hide_blog(session, blog_id, admin_notes)
    return _admin_view(blog, current_admin, session)

@router.post("/blogs/{blog_id}:restoreBlog", response_model=BlogResponse, summary="Restore a hidden blog")
def restore_blog(
    blog_id: str,
    session: Session = Depends(get_session),
    current_admin: User = Depends(get_current_admin)
):
    blog = blog_lifecycle.restore_blog(session, blog_id)
    return _admin_view(blog, current_admin, session)

@router.get("/users", response_model=UserListResponse, summary="List users")
def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    search: Optional[str] = None,
    status: Optional[str] = Query(None, description="`active` or `inactive`"),
    session: Session = Depends(get_session),
    current_admin: User = Depends(get_current_admin)
):
    return user_admin.list_users(session, page, limit, search=search, status=status)

@router.post("/users/{user_id}:toggleStatus", response_model=UserInDB, summary="Activate or deactivate a user")
def toggle_user_status(
    user_id: str,
    session: Session = Depends(get_session),
    current_admin: User = Depends(get_current_admin)
):
    """Flip a user's active flag; admins cannot deactivate themselves or other admins"""
    return user_admin.toggle_user_status(session, current_admin, user_id)

@router.get("/comments/reported", response_model=ReportedCommentListResponse, summary="List reported comments")
def list_reported_comments(
    page: int = Query(1, ge=1),
    limit: int = Query(COMMENTS_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    session: Session = Depends(get_session),
    current_admin: User = Depends(get_current_admin)
):
    return comment_thread.list_reported_comments(session, page, limit)

@router.get("/analytics", response_model=DashboardAnalytics, summary="Moderation dashboard")
def get_analytics(
    session: Session = Depends(get_session),
    current_admin: User = Depends(get_current_admin)
):
    """Platform counts, recent activity and leaderboards"""
    return dashboard.get_dashboard_analytics(session)
