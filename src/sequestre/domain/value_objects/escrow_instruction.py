"""
Escrow program instructions.

Each variant maps to an 8-byte discriminator followed by its packed
little-endian arguments. The discriminators are fixed by the deployed
program.
"""

from dataclasses import dataclass
from typing import Union

U64_MAX = 2**64 - 1
I64_MIN = -(2**63)
I64_MAX = 2**63 - 1

OPEN_DISCRIMINATOR = bytes([0xAF, 0xAF, 0x6D, 0x1F, 0x0D, 0x98, 0x9B, 0xED])
RELEASE_DISCRIMINATOR = bytes([0xFD, 0xF9, 0x0F, 0xCE, 0x1C, 0x7F, 0xC1, 0xF1])


@dataclass(frozen=True)
class OpenEscrow:
    """Move ``amount`` base units into a new escrow until ``release_ts``."""

    amount: int
    release_ts: int

    discriminator = OPEN_DISCRIMINATOR

    def __post_init__(self):
        """Validate integer ranges."""
        if not 0 <= self.amount <= U64_MAX:
            raise ValueError(f"amount out of u64 range: {self.amount}")
        if not I64_MIN <= self.release_ts <= I64_MAX:
            raise ValueError(f"release_ts out of i64 range: {self.release_ts}")


@dataclass(frozen=True)
class ReleaseEscrow:
    """Pay the vault out to the beneficiary and close the escrow."""

    discriminator = RELEASE_DISCRIMINATOR


EscrowInstruction = Union[OpenEscrow, ReleaseEscrow]
