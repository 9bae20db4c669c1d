"""
Unit tests for TransactionAssembler and PendingTransaction.

Usage:
    pytest tests/unit/infrastructure/test_transaction_assembler.py
"""

import pytest
from solders.hash import Hash
from solders.pubkey import Pubkey

from sequestre.domain.exceptions import (
    InsufficientFundsException,
    InvalidAddressException,
    RPCException,
    SubmissionFailedException,
)
from sequestre.domain.value_objects import OpenEscrow, ReleaseEscrow
from sequestre.domain.value_objects.escrow_key import EscrowKey
from sequestre.infrastructure.blockchain.instruction_encoder import decode
from sequestre.infrastructure.blockchain.program import ASSOCIATED_TOKEN_PROGRAM_ID
from sequestre.infrastructure.blockchain.transaction_assembler import (
    PendingTransaction,
    TransactionAssembler,
)


@pytest.fixture
def assembler(program, mock_rpc, reporter) -> TransactionAssembler:
    return TransactionAssembler(program=program, rpc_client=mock_rpc, reporter=reporter)


class TestPendingTransaction:
    """Build -> attach blockhash -> freeze lifecycle."""

    def _instruction(self, program, escrow_key, assembler):
        return assembler.build_release(escrow_key, escrow_key.initializer).instructions[0]

    def test_freeze_requires_blockhash(self, program, escrow_key, assembler):
        pending = PendingTransaction(fee_payer=escrow_key.initializer)
        pending.add(self._instruction(program, escrow_key, assembler))

        with pytest.raises(ValueError):
            pending.freeze()

    def test_freeze_requires_instructions(self, escrow_key):
        pending = PendingTransaction(fee_payer=escrow_key.initializer)
        pending.attach_blockhash(Hash.new_unique(), 10)

        with pytest.raises(ValueError):
            pending.freeze()

    def test_freeze_once(self, program, escrow_key, assembler):
        """Test a frozen transaction cannot be frozen or extended again."""
        pending = PendingTransaction(fee_payer=escrow_key.initializer)
        pending.add(self._instruction(program, escrow_key, assembler))
        blockhash = Hash.new_unique()
        pending.attach_blockhash(blockhash, 10)

        transaction = pending.freeze()

        assert transaction.message.recent_blockhash == blockhash
        assert transaction.message.account_keys[0] == escrow_key.initializer
        with pytest.raises(ValueError):
            pending.freeze()
        with pytest.raises(ValueError):
            pending.add(self._instruction(program, escrow_key, assembler))
        with pytest.raises(ValueError):
            pending.attach_blockhash(Hash.new_unique(), 20)


class TestTransactionAssembler:
    """Unit tests for TransactionAssembler."""

    # ================================================================
    # Building
    # ================================================================

    def test_accounts_for(self, assembler, escrow_key):
        accounts = assembler.accounts_for(escrow_key)

        assert not accounts.escrow.is_on_curve()
        assert 0 <= accounts.bump <= 255
        assert accounts.vault != accounts.initializer_token_account

    def test_open_order(self, assembler, escrow_key, program):
        """Test vault creation precedes the open instruction."""
        accounts = assembler.accounts_for(escrow_key)

        pending = assembler.build_open(escrow_key, 120_000_000)

        create_vault, open_ix = pending.instructions
        assert create_vault.program_id == ASSOCIATED_TOKEN_PROGRAM_ID
        assert bytes(create_vault.data) == bytes([1])
        assert create_vault.accounts[0].pubkey == escrow_key.initializer
        assert create_vault.accounts[1].pubkey == accounts.vault
        assert create_vault.accounts[2].pubkey == accounts.escrow

        assert open_ix.program_id == program.program_id
        assert decode(open_ix.data) == OpenEscrow(120_000_000, escrow_key.release_ts)
        assert open_ix.accounts[3].pubkey == accounts.escrow
        assert pending.fee_payer == escrow_key.initializer

    def test_open_accepts_off_curve_beneficiary(self, assembler, escrow_key):
        """Test a hold may pay into a PDA-owned beneficiary."""
        pda, _ = Pubkey.find_program_address([b"multisig"], Pubkey.new_unique())
        key = EscrowKey(escrow_key.initializer, pda, escrow_key.mint, escrow_key.release_ts)

        pending = assembler.build_open(key, 1)

        assert pending.instructions[1].accounts[1].pubkey == pda

    def test_release_rejects_off_curve_beneficiary(self, assembler, escrow_key):
        pda, _ = Pubkey.find_program_address([b"multisig"], Pubkey.new_unique())
        key = EscrowKey(escrow_key.initializer, pda, escrow_key.mint, escrow_key.release_ts)

        with pytest.raises(InvalidAddressException):
            assembler.build_release(key, escrow_key.initializer)

    def test_release_builds_regardless_of_time(self, assembler, escrow_key):
        """Test release construction does not look at the clock."""
        payer = Pubkey.new_unique()

        pending = assembler.build_release(escrow_key, payer)

        (release_ix,) = pending.instructions
        assert decode(release_ix.data) == ReleaseEscrow()
        assert release_ix.accounts[0].pubkey == payer
        assert pending.fee_payer == payer

    # ================================================================
    # Ledger interaction
    # ================================================================

    async def test_check_funds_short_balance(self, assembler, mock_rpc, escrow_key):
        mock_rpc.get_token_account_balance.return_value = 100
        accounts = assembler.accounts_for(escrow_key)

        with pytest.raises(InsufficientFundsException) as exc_info:
            await assembler.check_funds(accounts.initializer_token_account, 120)

        assert exc_info.value.details["balance"] == 100
        assert exc_info.value.details["required"] == 120

    async def test_check_funds_exact_balance_passes(self, assembler, mock_rpc, escrow_key):
        mock_rpc.get_token_account_balance.return_value = 120
        accounts = assembler.accounts_for(escrow_key)

        assert await assembler.check_funds(accounts.initializer_token_account, 120) == 120

    async def test_check_funds_unreadable_account(self, assembler, mock_rpc, escrow_key):
        """Test a missing token account reads as insufficient funds."""
        mock_rpc.get_token_account_balance.side_effect = RPCException(
            "RPC error: could not find account"
        )
        accounts = assembler.accounts_for(escrow_key)

        with pytest.raises(InsufficientFundsException):
            await assembler.check_funds(accounts.initializer_token_account, 1)

    async def test_assemble_open_checks_funds_before_blockhash(
        self, assembler, mock_rpc, escrow_key
    ):
        mock_rpc.get_token_account_balance.return_value = 0

        with pytest.raises(InsufficientFundsException):
            await assembler.assemble_open(escrow_key, 1)

        mock_rpc.get_latest_blockhash.assert_not_awaited()

    async def test_assemble_open_attaches_blockhash(self, assembler, mock_rpc, escrow_key):
        blockhash = Hash.new_unique()
        mock_rpc.get_latest_blockhash.return_value = (blockhash, 4242)

        pending = await assembler.assemble_open(escrow_key, 5)

        assert pending.blockhash == blockhash
        assert pending.last_valid_block_height == 4242
        mock_rpc.get_latest_blockhash.assert_awaited_once_with("processed")

    async def test_blockhash_failure_is_submission_failure(
        self, assembler, mock_rpc, escrow_key
    ):
        mock_rpc.get_latest_blockhash.side_effect = RPCException("RPC timeout")

        with pytest.raises(SubmissionFailedException):
            await assembler.assemble_release(escrow_key, escrow_key.initializer)
