from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from blogmod.core.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from blogmod.core.permissions import blog_permissions, project_blog
from blogmod.core.security import get_current_active_user, get_optional_current_user
from blogmod.db.database import get_session
from blogmod.models.user import User
from blogmod.schemas.blog import BlogCreate, BlogListResponse, BlogResponse, BlogSort, BlogUpdate, LikeResponse
from blogmod.services import blog_lifecycle, feed
from typing import Optional

router = APIRouter()

@router.post("", response_model=BlogResponse, response_model_exclude_unset=True, status_code=status.HTTP_201_CREATED, summary="Create a new blog")
def create_blog(
    blog_in: BlogCreate,
    current_user: User = Depends(get_current_active_user),
    session: Session = Depends(get_session)
):
    """Create a new blog, submitted for review unless `submit` is false"""
    blog = blog_lifecycle.create_blog(
        session,
        current_user,
        title=blog_in.title,
        content=blog_in.content,
        category=blog_in.category,
        tags=blog_in.tags,
        featured_image=blog_in.featured_image,
        submit=blog_in.submit,
    )
    return project_blog(blog, blog_permissions(current_user, blog))

@router.get("", response_model=BlogListResponse, response_model_exclude_unset=True, summary="List blogs")
def list_blogs(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    status: Optional[str] = Query(None, description="Blog status, or `all` (admins and own blogs only)"),
    author: Optional[str] = Query(None, description="Author ID"),
    category: Optional[str] = None,
    search: Optional[str] = None,
    sort: Optional[BlogSort] = None,
    session: Session = Depends(get_session),
    current_user: User | None = Depends(get_optional_current_user)
):
    """List blogs visible to the caller"""
    return feed.list_blogs(
        session,
        current_user,
        page,
        limit,
        status=status,
        author=author,
        category=category,
        search=search,
        sort=sort,
    )

@router.get("/{blog_id}", response_model=BlogResponse, response_model_exclude_unset=True, summary="Get a specific blog")
def get_blog(
    blog_id: str,
    session: Session = Depends(get_session),
    current_user: User | None = Depends(get_optional_current_user)
):
    """Get a specific blog, counting a view for published blogs read by anyone but the author"""
    return feed.get_blog_for_viewer(session, blog_id, current_user)

@router.put("/{blog_id}", response_model=BlogResponse, response_model_exclude_unset=True, summary="Update a blog")
def update_blog(
    blog_id: str,
    blog_update: BlogUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_active_user)
):
    """Update a blog. Editing a rejected blog moves it back to draft."""
    blog = blog_lifecycle.update_blog(
        session, blog_id, current_user, blog_update.model_dump(exclude_unset=True)
    )
    return project_blog(
        blog,
        blog_permissions(current_user, blog),
        comments_count=blog_lifecycle.count_active_comments(session, blog.id),
    )

@router.delete("/{blog_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a blog and all its comments")
def delete_blog(
    blog_id: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_active_user)
):
    """Delete a blog and all its comments"""
    blog_lifecycle.delete_blog(session, blog_id, current_user)
    return None

@router.post("/{blog_id}:submitBlog", response_model=BlogResponse, response_model_exclude_unset=True, summary="Submit a draft for review")
def submit_blog(
    blog_id: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_active_user)
):
    """Move a draft into the review queue"""
    blog = blog_lifecycle.submit_blog(session, blog_id, current_user)
    return project_blog(blog, blog_permissions(current_user, blog))

@router.post("/{blog_id}:toggleLike", response_model=LikeResponse, summary="Like or unlike a blog")
def toggle_like(
    blog_id: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_active_user)
):
    """Like a published blog, or remove an existing like"""
    blog, liked = blog_lifecycle.toggle_like(session, blog_id, current_user)
    return {
        "id": blog.id,
        "title": blog.title,
        "likes_count": blog.likes_count,
        "has_liked": liked,
        "trending_score": blog.trending_score,
    }
