# backend/tutorslot/repositories/user_repository.py
"""
User Repository for the tutoring reservation backend.

Also serves as the role lookup: given a uid, resolve the account's role.
"""

import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.enums import RoleName
from ..core.exceptions import RepositoryException
from ..models.user import User
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """Repository for user accounts and profiles."""

    def __init__(self, db: Session):
        super().__init__(db, User)
        self.logger = logging.getLogger(__name__)

    def get_by_email(self, email: str) -> Optional[User]:
        """Case-insensitive lookup by email."""
        try:
            return self.db.query(User).filter(func.lower(User.email) == email.lower()).first()
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting user by email: {str(e)}")
            raise RepositoryException(f"Failed to get user by email: {str(e)}")

    def get_role(self, user_id: str) -> Optional[RoleName]:
        """Resolve a user's role, or None when the user does not exist."""
        try:
            row = self.db.query(User.role).filter(User.id == user_id).first()
        except SQLAlchemyError as e:
            self.logger.error(f"Error resolving role of {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to resolve role: {str(e)}")
        if row is None:
            return None
        return RoleName(row[0])
