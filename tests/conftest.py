"""
Test fixtures and configuration.
"""

from unittest.mock import AsyncMock

import pytest
from solders.hash import Hash
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from sequestre.domain.value_objects.escrow_key import EscrowKey
from sequestre.infrastructure.blockchain.program import EscrowProgram
from sequestre.infrastructure.blockchain.solana_rpc_client import SolanaRPCClient
from sequestre.reporter import SystemReporter

DEVNET_USDC_MINT = "4zMMC9srt5Ri5X14GAgXhaHii3GnPAEERYPJgZJDncDU"

# 2026-07-01T00:00:00Z
RELEASE_TS = 1782864000


@pytest.fixture
def reporter() -> SystemReporter:
    """Quiet reporter for tests."""
    return SystemReporter(name="sequestre-test", verbose=0)


@pytest.fixture
def program() -> EscrowProgram:
    """Escrow program with a throwaway program id and the devnet mint."""
    return EscrowProgram(
        program_id=Pubkey.new_unique(),
        mint=Pubkey.from_string(DEVNET_USDC_MINT),
        decimals=6,
    )


@pytest.fixture
def initializer() -> Keypair:
    return Keypair()


@pytest.fixture
def beneficiary() -> Keypair:
    return Keypair()


@pytest.fixture
def escrow_key(initializer, beneficiary, program) -> EscrowKey:
    return EscrowKey(
        initializer=initializer.pubkey(),
        beneficiary=beneficiary.pubkey(),
        mint=program.mint,
        release_ts=RELEASE_TS,
    )


@pytest.fixture
def mock_rpc() -> AsyncMock:
    """
    RPC client mock answering like a healthy ledger.

    Balance 1,000 USDC, fresh blockhash valid until height 1,000, current
    height 900, signatures confirmed on first poll.
    """
    rpc = AsyncMock(spec=SolanaRPCClient)
    rpc.get_token_account_balance.return_value = 1_000_000_000
    rpc.get_latest_blockhash.return_value = (Hash.new_unique(), 1_000)
    rpc.get_block_height.return_value = 900
    rpc.send_raw_transaction.return_value = "SubmittedSignature111"
    rpc.get_signature_status.return_value = {
        "slot": 1,
        "confirmations": 1,
        "err": None,
        "confirmationStatus": "confirmed",
    }
    rpc.get_transaction_logs.return_value = []
    return rpc
