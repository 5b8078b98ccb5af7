from datetime import datetime
from pydantic import BaseModel, Field
from typing import List, Optional
from blogmod.core import config
from blogmod.schemas.pagination import Pagination

class CommentBase(BaseModel):
    """Comment base model"""
    content: str = Field(..., min_length=config.COMMENT_MIN_LENGTH, max_length=config.COMMENT_MAX_LENGTH, description="Comment content")

    class Config:
        str_strip_whitespace = True

class CommentCreate(CommentBase):
    """Create comment request model"""
    parent_comment_id: Optional[str] = Field(default=None, description="Comment being replied to")

class CommentUpdate(CommentBase):
    """Update comment request model"""
    pass

class CommentResponse(BaseModel):
    """Comment response model"""
    id: str = Field(..., description="Comment ID")
    blog_id: str = Field(..., description="Blog ID")
    author_id: str = Field(..., description="Author ID")
    parent_comment_id: Optional[str] = Field(default=None, description="Parent comment ID")
    content: str = Field(..., description="Comment content")
    depth: int = Field(..., description="Nesting level, 0 for top-level comments")
    is_reported: bool = Field(default=False, description="Whether anyone reported the comment")
    created_at: datetime = Field(..., description="Creation time")
    updated_at: datetime = Field(..., description="Last update time")

    class Config:
        from_attributes = True

class CommentThread(CommentResponse):
    """Top-level comment with its direct replies"""
    replies: List[CommentResponse] = Field(default_factory=list)

class CommentListResponse(BaseModel):
    comments: List[CommentThread]
    pagination: Pagination

class ReportCreate(BaseModel):
    reason: Optional[str] = Field(default=None, max_length=500, description="Why the comment is reported")

class ReportRecord(BaseModel):
    user_id: str
    reason: str
    reported_at: datetime

    class Config:
        from_attributes = True

class ReportedCommentResponse(CommentResponse):
    reported_by: List[ReportRecord] = Field(default_factory=list)

class UserCommentListResponse(BaseModel):
    comments: List[CommentResponse]
    pagination: Pagination

class ReportedCommentListResponse(BaseModel):
    comments: List[ReportedCommentResponse]
    pagination: Pagination
