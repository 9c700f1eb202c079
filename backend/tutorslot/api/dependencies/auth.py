# backend/tutorslot/api/dependencies/auth.py
"""
Authentication dependencies.

The token only identifies the account; the role is read from the store on
every request and handed to services as an explicit ``Actor``.
"""

import asyncio
import logging

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...core.exceptions import RepositoryException
from ...core.messages import get_user_message
from ...models.user import User
from ...principal import Actor
from ...repositories.factory import RepositoryFactory
from .database import get_db

logger = logging.getLogger(__name__)


async def get_current_active_user(
    current_user_email: str = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> User:
    """
    Resolve the signed-in, active user.

    Raises:
        HTTPException: 401 if the account no longer exists or is deactivated
    """
    repository = RepositoryFactory.create_user_repository(db)
    try:
        user = await asyncio.to_thread(repository.get_by_email, current_user_email)
    except RepositoryException as e:
        logger.error(f"User lookup failed for {current_user_email}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"message": get_user_message("STORAGE_ERROR"), "code": "STORAGE_ERROR"},
            headers={"Retry-After": "2"},
        )

    if user is None or not user.is_active:
        logger.warning(f"Token presented for unknown or inactive user: {current_user_email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": get_user_message("AUTH_REQUIRED"), "code": "AUTH_REQUIRED"},
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def get_current_actor(user: User = Depends(get_current_active_user)) -> Actor:
    return Actor.from_user(user)
