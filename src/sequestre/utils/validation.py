"""
Validation helpers for Solana addresses.
"""

from solders.pubkey import Pubkey

from sequestre.domain.exceptions import InvalidAddressException

BASE58_CHARS = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"


def validate_solana_address(address: str) -> bool:
    """
    Validate Solana address format.

    Solana addresses are base58-encoded 32-byte public keys, typically
    32-44 characters.

    Examples:
        >>> validate_solana_address("11111111111111111111111111111111")
        True
        >>> validate_solana_address("invalid")
        False
    """
    if not address or not isinstance(address, str):
        return False

    if len(address) < 32 or len(address) > 44:
        return False

    if not all(c in BASE58_CHARS for c in address):
        return False

    return True


def parse_pubkey(address, field: str = "address") -> Pubkey:
    """
    Parse a base58 address into a Pubkey.

    Args:
        address: Base58 string (a Pubkey is returned unchanged)
        field: Name used in the error message

    Raises:
        InvalidAddressException: If the string is not a valid public key
    """
    if isinstance(address, Pubkey):
        return address

    if not validate_solana_address(address):
        raise InvalidAddressException(
            f"Invalid {field}: {address!r}",
            details={"field": field, "address": address},
        )

    try:
        return Pubkey.from_string(address)
    except ValueError as e:
        raise InvalidAddressException(
            f"Invalid {field}: {address!r} ({e})",
            details={"field": field, "address": address},
        ) from e
