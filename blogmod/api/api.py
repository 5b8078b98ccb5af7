from fastapi import APIRouter
from blogmod.api.endpoints import (
    users,
    blogs,
    comments,
    admin
)

api_router = APIRouter()

api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(blogs.router, prefix="/blogs", tags=["blogs"])
api_router.include_router(comments.blog_comments_router, prefix="/blogs/{blog_id}/comments", tags=["comments"])
api_router.include_router(comments.router, prefix="/comments", tags=["comments"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
