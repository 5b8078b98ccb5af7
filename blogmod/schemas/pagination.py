from pydantic import BaseModel, Field

class Pagination(BaseModel):
    """Pagination metadata"""
    current_page: int = Field(..., description="Current page, 1-based")
    total_pages: int = Field(..., description="ceil(total / limit)")
    total: int = Field(..., description="Total number of matching items")
    limit: int = Field(..., description="Page size")
    has_next: bool
    has_prev: bool
