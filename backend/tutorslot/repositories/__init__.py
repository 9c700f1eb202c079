"""
Repository layer for the tutoring reservation backend.

All data access goes through these classes; services never query the
session directly.
"""

from .base_repository import BaseRepository, IRepository
from .factory import RepositoryFactory
from .reservation_repository import ReservationRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "IRepository",
    "RepositoryFactory",
    "ReservationRepository",
    "UserRepository",
]
