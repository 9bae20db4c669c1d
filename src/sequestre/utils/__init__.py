"""
Conversion and validation helpers.
"""

from sequestre.utils.amounts import base_units_to_decimal, decimal_to_base_units
from sequestre.utils.timestamps import (
    local_datetime_to_unix_seconds,
    unix_seconds_to_local_datetime,
)
from sequestre.utils.validation import parse_pubkey, validate_solana_address

__all__ = [
    "decimal_to_base_units",
    "base_units_to_decimal",
    "local_datetime_to_unix_seconds",
    "unix_seconds_to_local_datetime",
    "parse_pubkey",
    "validate_solana_address",
]
