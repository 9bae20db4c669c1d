"""
BookingRecord entity - a hold created while booking a listing.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from sequestre.domain.value_objects.escrow_key import EscrowKey


class BookingStatus(str, Enum):
    """Booking states, derived from time and the released flag."""

    HELD = "held"
    RELEASABLE = "releasable"
    RELEASED = "released"


def booking_id(listing_id: str, release_ts: int) -> str:
    """Key under which callers persist a booking."""
    return f"{listing_id}-{release_ts}"


@dataclass(frozen=True)
class BookingRecord:
    """
    Booking owned and persisted by the caller.

    Business rules:
    - Status is derived, never stored
    - RELEASABLE exactly when now >= release_ts and not yet released
    - The escrow client never mutates records; callers replace the
      stored record with ``mark_released()`` after a successful release
    """

    listing_id: str
    escrow_key: EscrowKey
    total_amount: str
    released: bool = False
    signature: Optional[str] = None

    @property
    def id(self) -> str:
        """Persistence key."""
        return booking_id(self.listing_id, self.escrow_key.release_ts)

    def status(self, now: int) -> BookingStatus:
        """
        Derive booking status at unix time ``now``.

        Args:
            now: Current unix seconds
        """
        if self.released:
            return BookingStatus.RELEASED
        if now >= self.escrow_key.release_ts:
            return BookingStatus.RELEASABLE
        return BookingStatus.HELD

    def mark_released(self, signature: str) -> "BookingRecord":
        """Return a copy recording a completed release."""
        return replace(self, released=True, signature=signature)
