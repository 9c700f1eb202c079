"""TutorSlot: lesson reservations for a tutoring school."""
