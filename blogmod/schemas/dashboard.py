from datetime import datetime
from typing import List
from pydantic import BaseModel

class DashboardOverview(BaseModel):
    total_users: int
    active_users: int
    inactive_users: int
    total_blogs: int
    draft_blogs: int
    pending_blogs: int
    published_blogs: int
    rejected_blogs: int
    hidden_blogs: int
    total_comments: int
    active_comments: int
    deleted_comments: int
    reported_comments: int

class RecentActivity(BaseModel):
    window_days: int
    new_users: int
    new_blogs: int
    new_comments: int

class TopAuthor(BaseModel):
    author_id: str
    username: str | None = None
    email: str | None = None
    blog_count: int

class PopularBlog(BaseModel):
    id: str
    title: str
    author_id: str
    likes_count: int
    views: int
    created_at: datetime

    class Config:
        from_attributes = True

class DashboardAnalytics(BaseModel):
    overview: DashboardOverview
    recent_activity: RecentActivity
    top_authors: List[TopAuthor]
    popular_blogs: List[PopularBlog]
