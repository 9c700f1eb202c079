# backend/tutorslot/repositories/factory.py
"""
Repository Factory for the tutoring reservation backend.

Provides centralized creation of repository instances,
ensuring consistent initialization and dependency injection.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

if TYPE_CHECKING:
    from .reservation_repository import ReservationRepository
    from .user_repository import UserRepository


class RepositoryFactory:
    """
    Factory class for creating repository instances.

    Centralizes repository creation to ensure consistent initialization
    and makes it easy to swap implementations if needed.
    """

    @staticmethod
    def create_reservation_repository(db: Session) -> "ReservationRepository":
        """Create repository for reservation operations."""
        from .reservation_repository import ReservationRepository

        return ReservationRepository(db)

    @staticmethod
    def create_user_repository(db: Session) -> "UserRepository":
        """Create repository for user accounts and role lookup."""
        from .user_repository import UserRepository

        return UserRepository(db)
