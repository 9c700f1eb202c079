# backend/tutorslot/routes/v1/__init__.py
"""
API v1 Routes

Versioned API endpoints under /api/v1.
"""

from . import auth, availability, courses, reservations, teachers, users

__all__ = [
    "auth",
    "availability",
    "courses",
    "reservations",
    "teachers",
    "users",
]
