"""
Unit tests for address validation.

Usage:
    pytest tests/unit/utils/test_validation.py
"""

import pytest
from solders.pubkey import Pubkey

from sequestre.domain.exceptions import InvalidAddressException
from sequestre.utils.validation import parse_pubkey, validate_solana_address

TOKEN_PROGRAM = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"


class TestValidateSolanaAddress:
    def test_valid_addresses(self):
        assert validate_solana_address(TOKEN_PROGRAM)
        assert validate_solana_address("11111111111111111111111111111111")

    @pytest.mark.parametrize(
        "address",
        ["", "short", "0" * 44, "O" * 32, "l" * 40, None, 12345],
    )
    def test_invalid_addresses(self, address):
        assert not validate_solana_address(address)


class TestParsePubkey:
    def test_parses_base58(self):
        assert parse_pubkey(TOKEN_PROGRAM) == Pubkey.from_string(TOKEN_PROGRAM)

    def test_pubkey_passthrough(self):
        key = Pubkey.new_unique()
        assert parse_pubkey(key) is key

    def test_invalid_raises_with_field_name(self):
        """Test the error names the offending field."""
        with pytest.raises(InvalidAddressException) as exc_info:
            parse_pubkey("not-an-address", "beneficiary")

        assert "beneficiary" in exc_info.value.message
        assert exc_info.value.details["field"] == "beneficiary"
