"""Admin management of user accounts."""
import logging
from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from blogmod.core.errors import NotAuthorized, NotFound, SelfAction, ValidationError
from blogmod.models.user import User
from blogmod.services.feed import build_pagination

logger = logging.getLogger(__name__)

USER_STATUS_FILTERS = ("active", "inactive")


def list_users(
    session: Session,
    page: int,
    limit: int,
    search: Optional[str] = None,
    status: Optional[str] = None,
) -> dict:
    criteria = []
    if search:
        criteria.append(or_(
            User.username.icontains(search, autoescape=True),
            User.email.icontains(search, autoescape=True),
        ))
    if status is not None:
        if status not in USER_STATUS_FILTERS:
            raise ValidationError("Status must be one of: active, inactive")
        criteria.append(User.is_active.is_(status == "active"))

    total = session.scalar(select(func.count(User.id)).where(*criteria)) or 0
    users = session.scalars(
        select(User)
        .where(*criteria)
        .order_by(User.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return {"users": list(users), "pagination": build_pagination(total, page, limit)}


def toggle_user_status(session: Session, admin: User, user_id: str) -> User:
    """Activate or deactivate an account"""
    if user_id == admin.id:
        raise SelfAction("Cannot modify your own account status")

    user = session.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    if user.is_admin and user.is_active:
        raise NotAuthorized("Cannot deactivate other admin accounts")

    user.is_active = not user.is_active
    session.commit()
    session.refresh(user)
    logger.info(f"User {'activated' if user.is_active else 'deactivated'}: id={user.id}, by={admin.id}")
    return user
