"""
Escrow program deployment parameters.
"""

from dataclasses import dataclass

from solders.pubkey import Pubkey
from solders.system_program import ID as SYSTEM_PROGRAM_ID
from spl.token.constants import ASSOCIATED_TOKEN_PROGRAM_ID, TOKEN_PROGRAM_ID

from sequestre.domain.exceptions import (
    ConfigurationException,
    InvalidAddressException,
)
from sequestre.utils.validation import parse_pubkey

__all__ = [
    "EscrowProgram",
    "TOKEN_PROGRAM_ID",
    "ASSOCIATED_TOKEN_PROGRAM_ID",
    "SYSTEM_PROGRAM_ID",
]


@dataclass(frozen=True)
class EscrowProgram:
    """
    Which escrow program and token mint a client talks to.

    Built once per deployment and passed to every component.
    """

    program_id: Pubkey
    mint: Pubkey
    decimals: int = 6

    @classmethod
    def from_strings(
        cls, program_id: str, mint: str, decimals: int = 6
    ) -> "EscrowProgram":
        """
        Parse program and mint ids.

        Raises:
            ConfigurationException: If either id is missing or malformed
        """
        if not program_id:
            raise ConfigurationException("Missing escrow program id")
        if not mint:
            raise ConfigurationException("Missing token mint")

        try:
            return cls(
                program_id=parse_pubkey(program_id, "program_id"),
                mint=parse_pubkey(mint, "mint"),
                decimals=decimals,
            )
        except InvalidAddressException as e:
            raise ConfigurationException(e.message, details=e.details) from e

    @classmethod
    def from_settings(cls, settings) -> "EscrowProgram":
        """Build from a SequestreConfig."""
        return cls.from_strings(
            settings.program_id,
            settings.usdc_mint,
            settings.usdc_decimals,
        )
