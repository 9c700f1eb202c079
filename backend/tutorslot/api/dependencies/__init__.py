# backend/tutorslot/api/dependencies/__init__.py
"""
Central export point for all dependencies.

This module re-exports all dependencies from submodules
for convenient access throughout the application.
"""

from .auth import get_current_active_user, get_current_actor
from .database import get_db
from .services import (
    get_auth_service,
    get_availability_service,
    get_quota_service,
    get_reservation_service,
    get_user_service,
)

__all__ = [
    # Auth
    "get_current_active_user",
    "get_current_actor",
    # Database
    "get_db",
    # Services
    "get_auth_service",
    "get_availability_service",
    "get_quota_service",
    "get_reservation_service",
    "get_user_service",
]
