"""
Release Funds use case.

Pays an escrow out to its beneficiary. The connected wallet pays the fee
and signs; whether the release time has passed is checked by the caller
and enforced on-chain, never here.
"""

from typing import Any, Optional

from sequestre.domain.exceptions import EscrowClientException
from sequestre.domain.value_objects.escrow_key import EscrowKey
from sequestre.infrastructure.blockchain.confirmation_monitor import (
    ConfirmationMonitor,
)
from sequestre.infrastructure.blockchain.transaction_assembler import (
    TransactionAssembler,
)
from sequestre.infrastructure.monitoring.metrics import record_flow
from sequestre.infrastructure.wallet.signer_dispatch import SignerDispatch
from sequestre.infrastructure.wallet.wallet_session import ensure_connected
from sequestre.reporter import SystemReporter, get_reporter
from sequestre.utils.validation import parse_pubkey


class ReleaseFunds:
    """Release an escrow to its beneficiary."""

    def __init__(
        self,
        assembler: TransactionAssembler,
        dispatcher: SignerDispatch,
        monitor: ConfirmationMonitor,
        reporter: Optional[SystemReporter] = None,
        metrics_enabled: bool = True,
    ):
        self.assembler = assembler
        self.dispatcher = dispatcher
        self.monitor = monitor
        self.reporter = reporter or get_reporter()
        self.metrics_enabled = metrics_enabled

    async def execute(
        self,
        wallet: Any,
        initializer: str,
        beneficiary: str,
        release_ts: int,
    ) -> str:
        """
        Execute the release.

        Connects the wallet if it has no active account; that account is
        the fee payer and signer.

        Returns:
            Confirmed transaction signature

        Raises:
            InvalidAddressException: Malformed address
            SignerUnavailableException: No wallet or no signing capability
            SignerRejectedException: User declined
            SubmissionFailedException: Ledger rejected the transaction
            StaleFreshnessTokenException: Blockhash expired first
            ConfirmationTimeoutException: Not confirmed in time
        """
        try:
            payer = parse_pubkey(await ensure_connected(wallet), "payer")
            key = EscrowKey.from_strings(
                initializer,
                beneficiary,
                str(self.assembler.program.mint),
                release_ts,
            )

            self.reporter.info(
                f"Releasing escrow of {key.initializer} to {key.beneficiary}",
                context="ReleaseFunds",
            )

            pending = await self.assembler.assemble_release(key, payer)
            transaction = pending.freeze()
            signature = await self.dispatcher.submit(wallet, transaction)
            await self.monitor.wait(signature, pending.last_valid_block_height)

        except EscrowClientException as e:
            self.reporter.error(
                f"Release failed ({type(e).__name__}): {e.message}",
                context="ReleaseFunds",
            )
            self._record(type(e).__name__)
            raise

        self.reporter.info(f"Release confirmed: {signature}", context="ReleaseFunds")
        self._record("success")
        return signature

    def _record(self, outcome: str) -> None:
        if self.metrics_enabled:
            record_flow("release", outcome)
