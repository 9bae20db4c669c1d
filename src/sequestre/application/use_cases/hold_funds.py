"""
Hold Funds use case.

Books a stay by moving the total into a time-locked escrow: derive
accounts, pre-check the balance, build [create vault, open], sign, submit,
confirm.
"""

from typing import Any, Optional

from sequestre.domain.exceptions import EscrowClientException
from sequestre.domain.value_objects.escrow_key import EscrowKey
from sequestre.infrastructure.blockchain.confirmation_monitor import (
    ConfirmationMonitor,
)
from sequestre.infrastructure.blockchain.transaction_assembler import (
    EscrowAccounts,
    TransactionAssembler,
)
from sequestre.infrastructure.monitoring.metrics import record_flow
from sequestre.infrastructure.wallet.signer_dispatch import SignerDispatch
from sequestre.reporter import SystemReporter, get_reporter


class HoldFunds:
    """
    Open an escrow funded by the initializer.

    Business rules:
    - Initializer token account must hold at least the amount, checked
      before the wallet is asked to sign
    - Vault account creation (idempotent) precedes the open instruction
    - Each failure is reported once; nothing is retried
    """

    def __init__(
        self,
        assembler: TransactionAssembler,
        dispatcher: SignerDispatch,
        monitor: ConfirmationMonitor,
        reporter: Optional[SystemReporter] = None,
        metrics_enabled: bool = True,
    ):
        """
        Initialize use case with dependencies.

        Args:
            assembler: Builds and funds-checks the transaction
            dispatcher: Gets the transaction signed and submitted
            monitor: Waits for confirmation
            reporter: Logger
            metrics_enabled: Record flow outcome counters
        """
        self.assembler = assembler
        self.dispatcher = dispatcher
        self.monitor = monitor
        self.reporter = reporter or get_reporter()
        self.metrics_enabled = metrics_enabled

    def escrow_key(self, initializer: str, beneficiary: str, release_ts: int) -> EscrowKey:
        """Key for a hold in the configured mint."""
        return EscrowKey.from_strings(
            initializer,
            beneficiary,
            str(self.assembler.program.mint),
            release_ts,
        )

    def preview(
        self, initializer: str, beneficiary: str, release_ts: int
    ) -> EscrowAccounts:
        """Accounts a hold would use, derived without network access."""
        return self.assembler.accounts_for(
            self.escrow_key(initializer, beneficiary, release_ts)
        )

    async def execute(
        self,
        wallet: Any,
        initializer: str,
        beneficiary: str,
        amount_base: str,
        release_ts: int,
    ) -> str:
        """
        Execute the hold.

        Args:
            wallet: Signing wallet of the initializer
            initializer: Initializer address (base58)
            beneficiary: Beneficiary address (base58)
            amount_base: Amount in base units (string or int)
            release_ts: Unix seconds after which release is allowed

        Returns:
            Confirmed transaction signature

        Raises:
            InvalidAddressException: Malformed address
            InsufficientFundsException: Balance pre-check failed
            SignerUnavailableException: Wallet cannot sign
            SignerRejectedException: User declined
            SubmissionFailedException: Ledger rejected the transaction
            StaleFreshnessTokenException: Blockhash expired first
            ConfirmationTimeoutException: Not confirmed in time
        """
        try:
            key = self.escrow_key(initializer, beneficiary, release_ts)
            amount = int(amount_base)

            self.reporter.info(
                f"Holding {amount} base units for {key.beneficiary} "
                f"until {key.release_ts}",
                context="HoldFunds",
            )

            pending = await self.assembler.assemble_open(key, amount)
            transaction = pending.freeze()
            signature = await self.dispatcher.submit(wallet, transaction)
            await self.monitor.wait(signature, pending.last_valid_block_height)

        except EscrowClientException as e:
            self.reporter.error(
                f"Hold failed ({type(e).__name__}): {e.message}", context="HoldFunds"
            )
            self._record(type(e).__name__)
            raise

        self.reporter.info(f"Hold confirmed: {signature}", context="HoldFunds")
        self._record("success")
        return signature

    def _record(self, outcome: str) -> None:
        if self.metrics_enabled:
            record_flow("hold", outcome)
