# backend/tutorslot/core/constants.py
"""
Application-wide constants for the tutoring reservation backend.
"""

BRAND_NAME = "TutorSlot"
API_TITLE = f"{BRAND_NAME} API"
API_DESCRIPTION = "Lesson reservations for a tutoring school"
API_VERSION = "1.0.0"

API_V1_PREFIX = "/api/v1"

# Reservation constraints
MAX_NOTES_LENGTH = 1000
MINUTES_PER_HOUR = 60

# Wall-clock times on the wire
TIME_FORMAT = "%H:%M"

# Saturday, Sunday (datetime.date.weekday())
WEEKEND_DAYS = (5, 6)
