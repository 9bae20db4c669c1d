"""
Binary encoding of escrow program instructions.

Layout (little-endian):
    Open:    discriminator (8) | amount u64 (8) | release_ts i64 (8)
    Release: discriminator (8)

Account order and signer/writable flags are part of the wire contract with
the deployed program and must not change.
"""

import struct

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey

from sequestre.domain.value_objects.escrow_instruction import (
    OPEN_DISCRIMINATOR,
    RELEASE_DISCRIMINATOR,
    EscrowInstruction,
    OpenEscrow,
    ReleaseEscrow,
)
from sequestre.infrastructure.blockchain.program import (
    ASSOCIATED_TOKEN_PROGRAM_ID,
    SYSTEM_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
)

OPEN_ARGS = struct.Struct("<Qq")
OPEN_DATA_LENGTH = len(OPEN_DISCRIMINATOR) + OPEN_ARGS.size
RELEASE_DATA_LENGTH = len(RELEASE_DISCRIMINATOR)


def encode(instruction: EscrowInstruction) -> bytes:
    """
    Serialize an escrow instruction to its payload bytes.

    Returns:
        24 bytes for OpenEscrow, 8 bytes for ReleaseEscrow
    """
    if isinstance(instruction, OpenEscrow):
        return OPEN_DISCRIMINATOR + OPEN_ARGS.pack(
            instruction.amount, instruction.release_ts
        )
    if isinstance(instruction, ReleaseEscrow):
        return RELEASE_DISCRIMINATOR
    raise TypeError(f"Not an escrow instruction: {instruction!r}")


def decode(data: bytes) -> EscrowInstruction:
    """
    Parse payload bytes back into an escrow instruction.

    Raises:
        ValueError: On unknown discriminator or wrong payload length
    """
    data = bytes(data)
    tag = data[:8]

    if tag == OPEN_DISCRIMINATOR:
        if len(data) != OPEN_DATA_LENGTH:
            raise ValueError(f"Open payload must be {OPEN_DATA_LENGTH} bytes")
        amount, release_ts = OPEN_ARGS.unpack(data[8:])
        return OpenEscrow(amount=amount, release_ts=release_ts)

    if tag == RELEASE_DISCRIMINATOR:
        if len(data) != RELEASE_DATA_LENGTH:
            raise ValueError(f"Release payload must be {RELEASE_DATA_LENGTH} bytes")
        return ReleaseEscrow()

    raise ValueError(f"Unknown instruction discriminator: {tag.hex()}")


def _program_accounts() -> list:
    return [
        AccountMeta(TOKEN_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(ASSOCIATED_TOKEN_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
    ]


def build_open_instruction(
    program_id: Pubkey,
    initializer: Pubkey,
    beneficiary: Pubkey,
    mint: Pubkey,
    escrow: Pubkey,
    initializer_token_account: Pubkey,
    vault: Pubkey,
    amount: int,
    release_ts: int,
) -> Instruction:
    """Build the program instruction that opens (funds) an escrow."""
    accounts = [
        AccountMeta(initializer, is_signer=True, is_writable=True),
        AccountMeta(beneficiary, is_signer=False, is_writable=False),
        AccountMeta(mint, is_signer=False, is_writable=False),
        AccountMeta(escrow, is_signer=False, is_writable=True),
        AccountMeta(initializer_token_account, is_signer=False, is_writable=True),
        AccountMeta(vault, is_signer=False, is_writable=True),
        *_program_accounts(),
    ]
    data = encode(OpenEscrow(amount=int(amount), release_ts=int(release_ts)))
    return Instruction(program_id, data, accounts)


def build_release_instruction(
    program_id: Pubkey,
    payer: Pubkey,
    beneficiary: Pubkey,
    mint: Pubkey,
    escrow: Pubkey,
    vault: Pubkey,
    beneficiary_token_account: Pubkey,
) -> Instruction:
    """Build the program instruction that releases an escrow."""
    accounts = [
        AccountMeta(payer, is_signer=True, is_writable=True),
        AccountMeta(beneficiary, is_signer=False, is_writable=False),
        AccountMeta(mint, is_signer=False, is_writable=False),
        AccountMeta(escrow, is_signer=False, is_writable=True),
        AccountMeta(vault, is_signer=False, is_writable=True),
        AccountMeta(beneficiary_token_account, is_signer=False, is_writable=True),
        *_program_accounts(),
    ]
    return Instruction(program_id, encode(ReleaseEscrow()), accounts)
