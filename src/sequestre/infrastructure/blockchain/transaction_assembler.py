"""
Transaction assembly for escrow flows.

Orders instructions, checks the initializer can cover the hold, and attaches
a fresh blockhash and fee payer so the transaction is ready for a signer.
"""

from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional

from solders.hash import Hash
from solders.instruction import Instruction
from solders.message import Message
from solders.pubkey import Pubkey
from solders.transaction import Transaction
from spl.token.instructions import create_idempotent_associated_token_account

from sequestre.domain.exceptions import (
    InsufficientFundsException,
    RPCException,
    SubmissionFailedException,
)
from sequestre.domain.value_objects.escrow_key import EscrowKey
from sequestre.infrastructure.blockchain.address_derivation import (
    derive_escrow_address_for_key,
    derive_token_account,
    derive_vault_account,
)
from sequestre.infrastructure.blockchain.instruction_encoder import (
    build_open_instruction,
    build_release_instruction,
)
from sequestre.infrastructure.blockchain.program import EscrowProgram
from sequestre.infrastructure.blockchain.solana_rpc_client import SolanaRPCClient
from sequestre.reporter import SystemReporter, get_reporter


class EscrowAccounts(NamedTuple):
    """
    Accounts a hold touches, derived offline.

    The beneficiary's token account is only needed on release and is
    derived there, so a hold may target an off-curve beneficiary.
    """

    escrow: Pubkey
    bump: int
    vault: Pubkey
    initializer_token_account: Pubkey


@dataclass
class PendingTransaction:
    """
    Transaction under construction.

    Lifecycle: created empty, instructions added in execution order,
    blockhash attached, frozen once for signing, then discarded.
    """

    fee_payer: Pubkey
    instructions: List[Instruction] = field(default_factory=list)
    blockhash: Optional[Hash] = None
    last_valid_block_height: Optional[int] = None
    frozen: bool = False

    def add(self, *instructions: Instruction) -> "PendingTransaction":
        """Append instructions; they execute in the order added."""
        if self.frozen:
            raise ValueError("Transaction already frozen for signing")
        self.instructions.extend(instructions)
        return self

    def attach_blockhash(self, blockhash: Hash, last_valid_block_height: int) -> None:
        """Attach the freshness token."""
        if self.frozen:
            raise ValueError("Transaction already frozen for signing")
        self.blockhash = blockhash
        self.last_valid_block_height = last_valid_block_height

    def freeze(self) -> Transaction:
        """
        Produce the unsigned transaction handed to the signer.

        Raises:
            ValueError: If already frozen, empty, or missing a blockhash
        """
        if self.frozen:
            raise ValueError("Transaction already frozen; build a new one")
        if not self.instructions:
            raise ValueError("Transaction has no instructions")
        if self.blockhash is None:
            raise ValueError("Blockhash must be attached before signing")

        self.frozen = True
        message = Message.new_with_blockhash(
            self.instructions, self.fee_payer, self.blockhash
        )
        return Transaction.new_unsigned(message)


class TransactionAssembler:
    """
    Builds signer-ready escrow transactions.

    Building is pure; only the balance pre-check and the blockhash fetch
    touch the ledger.
    """

    def __init__(
        self,
        program: EscrowProgram,
        rpc_client: SolanaRPCClient,
        reporter: Optional[SystemReporter] = None,
        blockhash_commitment: str = "processed",
        balance_commitment: str = "confirmed",
    ):
        """
        Initialize assembler.

        Args:
            program: Escrow program and mint
            rpc_client: Ledger handle
            reporter: Logger (defaults to the package reporter)
            blockhash_commitment: Commitment for getLatestBlockhash
            balance_commitment: Commitment for the balance pre-check
        """
        self.program = program
        self.rpc = rpc_client
        self.reporter = reporter or get_reporter()
        self.blockhash_commitment = blockhash_commitment
        self.balance_commitment = balance_commitment

    def accounts_for(self, key: EscrowKey) -> EscrowAccounts:
        """Derive escrow, vault and the initializer's token account."""
        escrow, bump = derive_escrow_address_for_key(key, self.program.program_id)
        return EscrowAccounts(
            escrow=escrow,
            bump=bump,
            vault=derive_vault_account(escrow, key.mint),
            initializer_token_account=derive_token_account(
                key.initializer, key.mint
            ),
        )

    def build_open(self, key: EscrowKey, amount: int) -> PendingTransaction:
        """
        Build the Open flow: create vault account (idempotent), then Open.

        The vault must exist before the program instruction writes to it.
        """
        accounts = self.accounts_for(key)

        pending = PendingTransaction(fee_payer=key.initializer)
        pending.add(
            create_idempotent_associated_token_account(
                key.initializer, accounts.escrow, key.mint
            ),
            build_open_instruction(
                program_id=self.program.program_id,
                initializer=key.initializer,
                beneficiary=key.beneficiary,
                mint=key.mint,
                escrow=accounts.escrow,
                initializer_token_account=accounts.initializer_token_account,
                vault=accounts.vault,
                amount=amount,
                release_ts=key.release_ts,
            ),
        )
        self.reporter.debug(
            f"Built open for escrow {accounts.escrow} (bump {accounts.bump})",
            context="Assembler",
        )
        return pending

    def build_release(self, key: EscrowKey, payer: Pubkey) -> PendingTransaction:
        """
        Build the Release flow. Time-gating is left to the caller.

        Raises:
            InvalidAddressException: If the beneficiary is off-curve
        """
        accounts = self.accounts_for(key)
        beneficiary_token_account = derive_token_account(key.beneficiary, key.mint)

        pending = PendingTransaction(fee_payer=payer)
        pending.add(
            build_release_instruction(
                program_id=self.program.program_id,
                payer=payer,
                beneficiary=key.beneficiary,
                mint=key.mint,
                escrow=accounts.escrow,
                vault=accounts.vault,
                beneficiary_token_account=beneficiary_token_account,
            )
        )
        self.reporter.debug(
            f"Built release for escrow {accounts.escrow}", context="Assembler"
        )
        return pending

    async def check_funds(self, token_account: Pubkey, amount: int) -> int:
        """
        Ensure a token account holds at least ``amount`` base units.

        Returns:
            Current balance

        Raises:
            InsufficientFundsException: If the account is unreadable or short
        """
        try:
            balance = await self.rpc.get_token_account_balance(
                str(token_account), commitment=self.balance_commitment
            )
        except RPCException as e:
            raise InsufficientFundsException(
                f"Initializer token account missing or unreadable: {token_account}",
                details={"token_account": str(token_account), "error": e.message},
            ) from e

        if balance < amount:
            raise InsufficientFundsException(
                f"Insufficient funds: have {balance}, need {amount}",
                details={
                    "token_account": str(token_account),
                    "balance": balance,
                    "required": amount,
                },
            )
        return balance

    async def attach_freshness(self, pending: PendingTransaction) -> None:
        """
        Fetch a blockhash and attach it.

        Raises:
            SubmissionFailedException: If the ledger cannot be reached
        """
        try:
            blockhash, last_valid = await self.rpc.get_latest_blockhash(
                self.blockhash_commitment
            )
        except RPCException as e:
            raise SubmissionFailedException(
                f"Could not fetch blockhash: {e.message}", details=e.details
            ) from e

        pending.attach_blockhash(blockhash, last_valid)
        self.reporter.debug(
            f"Blockhash {blockhash} valid until height {last_valid}",
            context="Assembler",
        )

    async def assemble_open(self, key: EscrowKey, amount: int) -> PendingTransaction:
        """Pre-check funds, build the Open flow and attach a blockhash."""
        accounts = self.accounts_for(key)
        await self.check_funds(accounts.initializer_token_account, amount)

        pending = self.build_open(key, amount)
        await self.attach_freshness(pending)
        return pending

    async def assemble_release(self, key: EscrowKey, payer: Pubkey) -> PendingTransaction:
        """Build the Release flow and attach a blockhash."""
        pending = self.build_release(key, payer)
        await self.attach_freshness(pending)
        return pending
