"""
EscrowKey value object - identity of one escrow instance.
"""

from dataclasses import dataclass

from solders.pubkey import Pubkey

from sequestre.utils.validation import parse_pubkey

I64_MIN = -(2**63)
I64_MAX = 2**63 - 1


@dataclass(frozen=True)
class EscrowKey:
    """
    Value object identifying one escrow.

    Business rules:
    - (initializer, beneficiary, mint, release_ts) fully determines the
      escrow address
    - release_ts must fit a signed 64-bit integer (it is a PDA seed)
    - Immutable once created
    """

    initializer: Pubkey
    beneficiary: Pubkey
    mint: Pubkey
    release_ts: int

    def __post_init__(self):
        """Validate release timestamp range."""
        if not I64_MIN <= self.release_ts <= I64_MAX:
            raise ValueError(f"release_ts out of i64 range: {self.release_ts}")

    @classmethod
    def from_strings(
        cls,
        initializer: str,
        beneficiary: str,
        mint: str,
        release_ts: int,
    ) -> "EscrowKey":
        """
        Build key from base58 addresses.

        Raises:
            InvalidAddressException: If any address is malformed
        """
        return cls(
            initializer=parse_pubkey(initializer, "initializer"),
            beneficiary=parse_pubkey(beneficiary, "beneficiary"),
            mint=parse_pubkey(mint, "mint"),
            release_ts=int(release_ts),
        )

    def seed_timestamp(self) -> bytes:
        """Release timestamp as the 8-byte little-endian PDA seed."""
        return self.release_ts.to_bytes(8, "little", signed=True)
