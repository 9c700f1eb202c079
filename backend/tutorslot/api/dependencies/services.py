# backend/tutorslot/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

This module provides factory functions that create service instances
with their required dependencies properly injected.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from ...services.auth_service import AuthService
from ...services.availability_service import AvailabilityService
from ...services.quota_service import QuotaService
from ...services.reservation_service import ReservationService
from ...services.user_service import UserService
from .database import get_db


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(db)


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)


def get_quota_service(db: Session = Depends(get_db)) -> QuotaService:
    return QuotaService(db)


def get_availability_service(db: Session = Depends(get_db)) -> AvailabilityService:
    return AvailabilityService(db)


def get_reservation_service(
    db: Session = Depends(get_db),
    quota_service: QuotaService = Depends(get_quota_service),
) -> ReservationService:
    """
    Get reservation service instance.

    The quota service shares the request's session so quota reads and the
    booking insert see the same transaction.
    """
    return ReservationService(db, quota_service=quota_service)
