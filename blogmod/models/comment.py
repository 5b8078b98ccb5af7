from datetime import datetime, timezone as tz
from typing import Optional
from sqlalchemy import Boolean, DateTime, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from blogmod.db.database import Base
import uuid

class Comment(Base):
    """Comment model

    Comments are never hard-deleted by their authors: a soft delete flips
    `is_active` and the row stays for audit.
    """
    __tablename__ = "comments"
    __table_args__ = (
        Index("ix_comments_blog_active_created", "blog_id", "is_active", "created_at"),
        Index("ix_comments_parent_active", "parent_comment_id", "is_active"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    blog_id: Mapped[str] = mapped_column(String(36), index=True)  # Not using foreign key, only storing ID
    author_id: Mapped[str] = mapped_column(String(36), index=True)  # Not using foreign key, only storing ID
    parent_comment_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    content: Mapped[str] = mapped_column(Text)
    depth: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_reported: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(tz.utc))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=lambda: datetime.now(tz.utc),
        onupdate=lambda: datetime.now(tz.utc)
    )

class CommentReport(Base):
    """One user's report against a comment"""
    __tablename__ = "comment_reports"
    __table_args__ = (
        UniqueConstraint("comment_id", "user_id", name="uq_comment_reports_comment_user"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    comment_id: Mapped[str] = mapped_column(String(36), index=True)
    user_id: Mapped[str] = mapped_column(String(36))
    reason: Mapped[str] = mapped_column(String(500))
    reported_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(tz.utc))
