"""Who may see or change a blog, and what they get to see of it."""
from dataclasses import dataclass
from typing import Any

from blogmod.models.blog import Blog, BlogStatus
from blogmod.models.user import User

# Statuses in which an owner may still change their own blog
OWNER_MUTABLE_STATUSES = (BlogStatus.DRAFT, BlogStatus.REJECTED)


@dataclass(frozen=True)
class BlogPermissions:
    can_view: bool
    can_edit: bool
    can_delete: bool
    is_owner: bool
    is_admin: bool

    @property
    def is_privileged(self) -> bool:
        """Owner or admin: sees moderation fields"""
        return self.is_owner or self.is_admin


def blog_permissions(viewer: User | None, blog: Blog) -> BlogPermissions:
    """Capability set of `viewer` on `blog`; `viewer` is None for anonymous readers"""
    is_admin = viewer is not None and viewer.is_admin
    is_owner = viewer is not None and viewer.id == blog.author_id

    if is_admin:
        # Nobody edits a blog that is under review
        can_edit = blog.status != BlogStatus.PENDING
        can_delete = True
    elif is_owner:
        can_edit = blog.status in OWNER_MUTABLE_STATUSES
        can_delete = blog.status in OWNER_MUTABLE_STATUSES
    else:
        can_edit = can_delete = False

    return BlogPermissions(
        can_view=blog.status == BlogStatus.APPROVED or is_owner or is_admin,
        can_edit=can_edit,
        can_delete=can_delete,
        is_owner=is_owner,
        is_admin=is_admin,
    )


def project_blog(
    blog: Blog,
    permissions: BlogPermissions,
    *,
    has_liked: bool = False,
    comments_count: int = 0,
    include_content: bool = True,
) -> dict[str, Any]:
    """Render a blog for a viewer; moderation fields only reach owner and admins"""
    data = {
        "id": blog.id,
        "author_id": blog.author_id,
        "title": blog.title,
        "category": blog.category,
        "tags": list(blog.tags or []),
        "featured_image": blog.featured_image,
        "status": blog.status,
        "likes_count": blog.likes_count,
        "views": blog.views,
        "trending_score": blog.trending_score,
        "comments_count": comments_count,
        "has_liked": has_liked,
        "published_at": blog.published_at,
        "last_activity": blog.last_activity,
        "created_at": blog.created_at,
        "updated_at": blog.updated_at,
    }
    if include_content:
        data["content"] = blog.content
    if permissions.is_privileged:
        data["rejection_reason"] = blog.rejection_reason
        data["admin_notes"] = blog.admin_notes
    return data
