from datetime import datetime, timedelta, timezone
from typing import Annotated
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session
from blogmod.core.config import ACCESS_TOKEN_EXPIRE_MINUTES, COMMENTS_PAGE_SIZE, MAX_PAGE_SIZE
from blogmod.core.security import (
    get_password_hash,
    verify_password,
    create_access_token,
    get_current_user,
    get_current_active_user,
)
from blogmod.db.database import get_session
from blogmod.models.user import User
from blogmod.schemas.comment import UserCommentListResponse
from blogmod.schemas.user import UserCreate, UserResponse, Token, UserUpdate, UserLogin
from blogmod.services import comment_thread

router = APIRouter()

@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    user_in: UserCreate,
    session: Annotated[Session, Depends(get_session)]
) -> User:
    """Create a new user"""
    # Check if username already exists
    if session.scalar(select(User).where(User.username == user_in.username)):
        raise HTTPException(
            status_code=400,
            detail="Username already exists"
        )

    # Check if email already exists
    if session.scalar(select(User).where(User.email == user_in.email)):
        raise HTTPException(
            status_code=400,
            detail="Email already registered"
        )

    user = User(
        username=user_in.username,
        email=user_in.email,
        password_hash=get_password_hash(user_in.password),
        bio=user_in.bio
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user

@router.post("/login", response_model=Token)
def login(
    user_in: UserLogin,
    session: Annotated[Session, Depends(get_session)]
) -> dict:
    """Login a user"""
    user = session.scalar(select(User).where(User.username == user_in.username))

    if not user or not verify_password(user_in.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # Update last login time
    user.last_login = datetime.now(timezone.utc)
    session.commit()

    access_token = create_access_token(
        data={"sub": user.username},
        expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    return {"access_token": access_token, "token_type": "bearer"}

@router.get("/me", response_model=UserResponse)
def read_users_me(
    current_user: Annotated[User, Depends(get_current_user)]
) -> User:
    """Get the current user"""
    return current_user

@router.put("/me", response_model=UserResponse)
def update_user_me(
    user_update: UserUpdate,
    current_user: Annotated[User, Depends(get_current_active_user)],
    session: Annotated[Session, Depends(get_session)]
) -> User:
    """Update the current user"""
    if user_update.bio is not None:
        current_user.bio = user_update.bio
    session.commit()
    session.refresh(current_user)
    return current_user

@router.get("/me/comments", response_model=UserCommentListResponse, summary="List my active comments")
def list_my_comments(
    current_user: Annotated[User, Depends(get_current_user)],
    session: Annotated[Session, Depends(get_session)],
    page: int = Query(1, ge=1),
    limit: int = Query(COMMENTS_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
):
    """List the current user's comments, newest first"""
    return comment_thread.list_user_comments(session, current_user, page, limit)
