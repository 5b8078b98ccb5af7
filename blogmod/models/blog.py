from datetime import datetime, UTC
from enum import Enum as PyEnum
import uuid
from sqlalchemy import DateTime, Enum, Float, Index, Integer, JSON, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from blogmod.db.database import Base

class BlogStatus(str, PyEnum):
    """Blog status"""
    DRAFT = "draft"         # Work in progress, only visible to the author and admins
    PENDING = "pending"     # Submitted, awaiting an admin decision, read-only for the author
    APPROVED = "approved"   # Published, visible to everyone, can be liked and commented
    REJECTED = "rejected"   # Sent back by an admin with a reason, editable by the author
    HIDDEN = "hidden"       # Taken down by an admin after publication

class Blog(Base):
    """Blog model"""
    __tablename__ = "blogs"
    __table_args__ = (
        Index("ix_blogs_status_published_at", "status", "published_at"),
        Index("ix_blogs_author_status", "author_id", "status"),
        Index("ix_blogs_status_trending", "status", "trending_score"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    author_id: Mapped[str] = mapped_column(String(36), index=True)  # Not using foreign key, only storing ID
    title: Mapped[str] = mapped_column(String(200))
    content: Mapped[str] = mapped_column(Text)
    category: Mapped[str] = mapped_column(String(50), default="", index=True)
    tags: Mapped[list] = mapped_column(JSON, default=list)
    featured_image: Mapped[str] = mapped_column(String, nullable=True)
    status: Mapped[BlogStatus] = mapped_column(Enum(BlogStatus), default=BlogStatus.DRAFT, nullable=False, index=True)
    likes_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    views: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    trending_score: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    last_activity: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(UTC))
    published_at: Mapped[datetime] = mapped_column(DateTime, nullable=True)
    rejection_reason: Mapped[str] = mapped_column(String(500), nullable=True)
    admin_notes: Mapped[str] = mapped_column(String(1000), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(UTC), index=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC)
    )

class BlogLike(Base):
    """Membership row of a blog's likes set"""
    __tablename__ = "blog_likes"
    __table_args__ = (
        UniqueConstraint("blog_id", "user_id", name="uq_blog_likes_blog_user"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    blog_id: Mapped[str] = mapped_column(String(36), index=True)
    user_id: Mapped[str] = mapped_column(String(36), index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(UTC))
