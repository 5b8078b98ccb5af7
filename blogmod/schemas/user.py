from datetime import datetime
from typing import List
from pydantic import BaseModel, EmailStr, Field
from blogmod.models.user import UserRole
from blogmod.schemas.pagination import Pagination

class UserBase(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    bio: str | None = None

class UserCreate(UserBase):
    password: str = Field(..., min_length=8)

class UserLogin(BaseModel):
    username: str
    password: str

class UserUpdate(BaseModel):
    bio: str | None = None

class UserInDB(UserBase):
    id: str
    role: UserRole
    is_active: bool
    created_at: datetime
    last_login: datetime | None = None

    class Config:
        from_attributes = True

class UserResponse(UserInDB):
    pass

class UserListResponse(BaseModel):
    users: List[UserResponse]
    pagination: Pagination

class Token(BaseModel):
    access_token: str
    token_type: str
