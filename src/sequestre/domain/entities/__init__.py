"""
Domain entities.
"""

from sequestre.domain.entities.booking_record import (
    BookingRecord,
    BookingStatus,
    booking_id,
)

__all__ = ["BookingRecord", "BookingStatus", "booking_id"]
