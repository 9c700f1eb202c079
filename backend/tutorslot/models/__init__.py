from .reservation import Reservation, ReservationSlotClaim, ReservationStatus
from .user import User

__all__ = ["Reservation", "ReservationSlotClaim", "ReservationStatus", "User"]
