"""Solana escrow program adapters."""

from sequestre.infrastructure.blockchain.address_derivation import (
    DerivedAddress,
    derive_escrow_address,
    derive_escrow_address_for_key,
    derive_token_account,
    derive_vault_account,
)
from sequestre.infrastructure.blockchain.confirmation_monitor import (
    ConfirmationMonitor,
)
from sequestre.infrastructure.blockchain.instruction_encoder import (
    build_open_instruction,
    build_release_instruction,
    decode,
    encode,
)
from sequestre.infrastructure.blockchain.program import EscrowProgram
from sequestre.infrastructure.blockchain.solana_rpc_client import SolanaRPCClient
from sequestre.infrastructure.blockchain.transaction_assembler import (
    EscrowAccounts,
    PendingTransaction,
    TransactionAssembler,
)

__all__ = [
    "DerivedAddress",
    "derive_escrow_address",
    "derive_escrow_address_for_key",
    "derive_token_account",
    "derive_vault_account",
    "encode",
    "decode",
    "build_open_instruction",
    "build_release_instruction",
    "EscrowProgram",
    "SolanaRPCClient",
    "EscrowAccounts",
    "PendingTransaction",
    "TransactionAssembler",
    "ConfirmationMonitor",
]
