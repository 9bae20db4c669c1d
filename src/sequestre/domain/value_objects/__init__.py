"""
Domain value objects.
"""

from sequestre.domain.value_objects.escrow_instruction import (
    OPEN_DISCRIMINATOR,
    RELEASE_DISCRIMINATOR,
    EscrowInstruction,
    OpenEscrow,
    ReleaseEscrow,
)
from sequestre.domain.value_objects.escrow_key import EscrowKey

__all__ = [
    "EscrowKey",
    "EscrowInstruction",
    "OpenEscrow",
    "ReleaseEscrow",
    "OPEN_DISCRIMINATOR",
    "RELEASE_DISCRIMINATOR",
]
