"""
FastAPI dependencies shared by API routers

Core functions:
1. get_current_user - resolves the requesting user from request headers
2. get_category_actions - category action layer bound to the request

Identity comes from the X-User-Id header set by the fronting application;
users are provisioned on first use.
"""

import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from finance_categories.core.redis_client import RedisClient, get_redis
from finance_categories.crud import user as crud_user
from finance_categories.db.session import get_db
from finance_categories.models.user import User
from finance_categories.services.category_actions import CategoryActions

logger = logging.getLogger(__name__)


def get_current_user(
    db: Session = Depends(get_db),
    x_user_id: Optional[str] = Header(None),
    x_user_email: Optional[str] = Header(None),
    x_user_name: Optional[str] = Header(None),
) -> User:
    """
    FastAPI dependency to get current user

    Usage:
    @app.get("/protected")
    def protected_endpoint(user: User = Depends(get_current_user)):
        return {"message": f"Hello, {user.name}!"}
    """
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-User-Id header required",
        )

    try:
        return crud_user.get_or_create(db, x_user_id, email=x_user_email, name=x_user_name)
    except IntegrityError:
        logger.warning(f"Cannot provision user {x_user_id}: email {x_user_email} is taken")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email is already registered to another user",
        )


async def get_category_actions(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    redis: Optional[RedisClient] = Depends(get_redis),
) -> CategoryActions:
    """Category actions bound to the requesting user"""
    return CategoryActions(db=db, user_id=current_user.id, cache=redis)
