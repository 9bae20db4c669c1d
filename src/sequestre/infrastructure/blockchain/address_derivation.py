"""
Deterministic address derivation for the escrow program.

Both derivations are pure and network-free: any caller can precompute the
escrow, vault and token accounts of a booking without ledger access.
"""

from typing import List, NamedTuple, Sequence

from solders.pubkey import Pubkey
from spl.token.instructions import get_associated_token_address

from sequestre.domain.exceptions import (
    DerivationExhaustedException,
    InvalidAddressException,
)
from sequestre.domain.value_objects.escrow_key import EscrowKey

ESCROW_SEED = b"escrow"
MAX_SEED_LENGTH = 32
MAX_SEEDS = 16


class DerivedAddress(NamedTuple):
    """Program derived address and the bump seed that produced it."""

    address: Pubkey
    bump: int


def escrow_seeds(key: EscrowKey) -> List[bytes]:
    """
    Seeds of the escrow PDA.

    Seeds: [b"escrow", initializer, beneficiary, mint, release_ts (i64 LE)]
    """
    return [
        ESCROW_SEED,
        bytes(key.initializer),
        bytes(key.beneficiary),
        bytes(key.mint),
        key.seed_timestamp(),
    ]


def find_program_address(seeds: Sequence[bytes], program_id: Pubkey) -> DerivedAddress:
    """
    Search bumps from 255 down for an off-curve program address.

    Same result as ``Pubkey.find_program_address`` but reports exhaustion
    as an exception instead of aborting the interpreter.

    Raises:
        ValueError: If there are too many seeds or a seed is too long
        DerivationExhaustedException: If no bump yields an off-curve address
    """
    if len(seeds) >= MAX_SEEDS:
        raise ValueError(f"Too many seeds: {len(seeds)} (max {MAX_SEEDS - 1})")
    for seed in seeds:
        if len(seed) > MAX_SEED_LENGTH:
            raise ValueError(f"Seed longer than {MAX_SEED_LENGTH} bytes: {len(seed)}")

    for bump in range(255, -1, -1):
        try:
            address = Pubkey.create_program_address([*seeds, bytes([bump])], program_id)
        except Exception:
            # PubkeyError (not exported by solders): address is on the curve
            continue
        return DerivedAddress(address, bump)

    raise DerivationExhaustedException(
        "No viable bump seed for program address",
        details={"program_id": str(program_id)},
    )


def derive_escrow_address(
    initializer: Pubkey,
    beneficiary: Pubkey,
    mint: Pubkey,
    release_ts: int,
    program_id: Pubkey,
) -> DerivedAddress:
    """
    Derive the escrow account for one booking.

    Args:
        initializer: Wallet that funds the escrow
        beneficiary: Wallet that receives the funds on release
        mint: Token mint held in escrow
        release_ts: Unix seconds after which release is allowed
        program_id: Escrow program id

    Returns:
        DerivedAddress(address, bump)

    Raises:
        DerivationExhaustedException: If no bump is viable (broken program id)
    """
    key = EscrowKey(initializer, beneficiary, mint, release_ts)
    return derive_escrow_address_for_key(key, program_id)


def derive_escrow_address_for_key(key: EscrowKey, program_id: Pubkey) -> DerivedAddress:
    """Derive the escrow account for an EscrowKey."""
    return find_program_address(escrow_seeds(key), program_id)


def derive_token_account(
    owner: Pubkey,
    mint: Pubkey,
    allow_off_curve_owner: bool = False,
) -> Pubkey:
    """
    Derive the associated token account of ``owner`` for ``mint``.

    Args:
        owner: Wallet or PDA owning the token account
        mint: Token mint
        allow_off_curve_owner: Must be True when the owner is a PDA
            (escrow addresses are off-curve by construction)

    Raises:
        InvalidAddressException: If owner is off-curve and not allowed
    """
    if not allow_off_curve_owner and not owner.is_on_curve():
        raise InvalidAddressException(
            f"Token account owner {owner} is off-curve",
            details={"owner": str(owner)},
        )

    return get_associated_token_address(owner, mint)


def derive_vault_account(escrow: Pubkey, mint: Pubkey) -> Pubkey:
    """Token account owned by the escrow PDA that holds the funds."""
    return derive_token_account(escrow, mint, allow_off_curve_owner=True)
