from datetime import datetime
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field
from blogmod.core import config
from blogmod.models.blog import BlogStatus
from blogmod.schemas.pagination import Pagination

class BlogBase(BaseModel):
    """Blog fields supplied by the author"""
    title: str = Field(..., min_length=config.TITLE_MIN_LENGTH, max_length=config.TITLE_MAX_LENGTH)
    content: str = Field(..., min_length=config.CONTENT_MIN_LENGTH)
    category: str = Field(default="", max_length=config.CATEGORY_MAX_LENGTH)
    tags: List[str] = Field(default_factory=list, max_length=config.MAX_TAGS)
    featured_image: Optional[str] = Field(default=None, pattern=config.FEATURED_IMAGE_PATTERN)

    class Config:
        str_strip_whitespace = True

class BlogCreate(BlogBase):
    """Create blog request; `submit=False` keeps the blog as a draft"""
    submit: bool = Field(default=True, description="Submit for review right away")

class BlogUpdate(BaseModel):
    """Update blog request, only the fields sent are changed"""
    title: Optional[str] = Field(default=None, min_length=config.TITLE_MIN_LENGTH, max_length=config.TITLE_MAX_LENGTH)
    content: Optional[str] = Field(default=None, min_length=config.CONTENT_MIN_LENGTH)
    category: Optional[str] = Field(default=None, max_length=config.CATEGORY_MAX_LENGTH)
    tags: Optional[List[str]] = Field(default=None, max_length=config.MAX_TAGS)
    featured_image: Optional[str] = Field(default=None, pattern=config.FEATURED_IMAGE_PATTERN)

    class Config:
        str_strip_whitespace = True

class BlogSummary(BaseModel):
    """Blog as shown in listings"""
    id: str
    author_id: str
    title: str
    category: str
    tags: List[str]
    featured_image: Optional[str] = None
    status: BlogStatus
    likes_count: int
    views: int
    trending_score: float
    comments_count: int = 0
    has_liked: bool = False
    published_at: Optional[datetime] = None
    last_activity: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    rejection_reason: Optional[str] = None
    admin_notes: Optional[str] = None

class BlogResponse(BlogSummary):
    """Full blog"""
    content: str

class BlogListResponse(BaseModel):
    blogs: List[BlogSummary]
    pagination: Pagination
    filters: Dict[str, Any]

class ApproveRequest(BaseModel):
    admin_notes: Optional[str] = Field(default=None, max_length=config.ADMIN_NOTES_MAX_LENGTH)

class RejectRequest(BaseModel):
    # length bounds are checked by reject_blog
    rejection_reason: Optional[str] = None
    admin_notes: Optional[str] = Field(default=None, max_length=config.ADMIN_NOTES_MAX_LENGTH)

class LikeResponse(BaseModel):
    id: str
    title: str
    likes_count: int
    has_liked: bool
    trending_score: float

BlogSort = Literal["latest", "popular", "trending", "relevance"]
