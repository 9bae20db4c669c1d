"""
Server-assisted hold and release.

Alternative deployment of the same contract: the escrow API builds the
transaction, the client only checks it, signs it and waits for it. Kept
apart from HoldFunds/ReleaseFunds so each path stays byte-compatible with
the program on its own.
"""

from typing import Any, Optional

from solders.transaction import Transaction

from sequestre.domain.exceptions import EscrowApiException, EscrowClientException
from sequestre.domain.value_objects.escrow_instruction import OpenEscrow
from sequestre.domain.value_objects.escrow_key import EscrowKey
from sequestre.infrastructure.blockchain.address_derivation import (
    derive_escrow_address_for_key,
)
from sequestre.infrastructure.blockchain.confirmation_monitor import (
    ConfirmationMonitor,
)
from sequestre.infrastructure.blockchain.instruction_encoder import decode
from sequestre.infrastructure.blockchain.program import EscrowProgram
from sequestre.infrastructure.bridge.escrow_api_client import EscrowApiClient
from sequestre.infrastructure.monitoring.metrics import record_flow
from sequestre.infrastructure.wallet.signer_dispatch import SignerDispatch
from sequestre.reporter import SystemReporter, get_reporter

# Position of the escrow account in the open instruction's account list.
ESCROW_ACCOUNT_INDEX = 3
# Accounts the open instruction takes.
OPEN_ACCOUNT_COUNT = 9


def verify_prepared_hold(
    transaction: Transaction,
    program: EscrowProgram,
    key: EscrowKey,
    amount: int,
) -> None:
    """
    Check a server-built hold opens the escrow we asked for.

    Raises:
        EscrowApiException: If no matching open instruction is present
    """
    message = transaction.message
    account_keys = message.account_keys
    expected_escrow, _ = derive_escrow_address_for_key(key, program.program_id)

    for ix in message.instructions:
        if account_keys[ix.program_id_index] != program.program_id:
            continue

        try:
            instruction = decode(bytes(ix.data))
        except ValueError as e:
            raise EscrowApiException(f"Unrecognized program instruction: {e}") from e

        if instruction != OpenEscrow(amount=amount, release_ts=key.release_ts):
            raise EscrowApiException(
                f"Prepared instruction {instruction} does not match request"
            )

        indices = bytes(ix.accounts)
        if len(indices) != OPEN_ACCOUNT_COUNT:
            raise EscrowApiException(
                f"Prepared open instruction has {len(indices)} accounts, "
                f"expected {OPEN_ACCOUNT_COUNT}"
            )

        escrow = account_keys[indices[ESCROW_ACCOUNT_INDEX]]
        if escrow != expected_escrow:
            raise EscrowApiException(
                f"Prepared escrow {escrow} differs from derived {expected_escrow}"
            )
        return

    raise EscrowApiException("Prepared transaction has no escrow instruction")


class ServerAssistedHold:
    """Hold funds using a server-prepared transaction."""

    def __init__(
        self,
        api_client: EscrowApiClient,
        program: EscrowProgram,
        dispatcher: SignerDispatch,
        monitor: ConfirmationMonitor,
        reporter: Optional[SystemReporter] = None,
        metrics_enabled: bool = True,
    ):
        self.api = api_client
        self.program = program
        self.dispatcher = dispatcher
        self.monitor = monitor
        self.reporter = reporter or get_reporter()
        self.metrics_enabled = metrics_enabled

    async def execute(
        self,
        wallet: Any,
        initializer: str,
        beneficiary: str,
        amount_base: str,
        release_ts: int,
    ) -> str:
        """
        Prepare via API, verify, sign, submit and confirm.

        Returns:
            Confirmed transaction signature
        """
        try:
            key = EscrowKey.from_strings(
                initializer, beneficiary, str(self.program.mint), release_ts
            )
            amount = int(amount_base)

            prepared = await self.api.prepare_hold(
                initializer, beneficiary, str(amount), release_ts
            )
            verify_prepared_hold(prepared.transaction, self.program, key, amount)

            signature = await self.dispatcher.submit(wallet, prepared.transaction)
            await self.monitor.wait(signature, prepared.last_valid_block_height)

        except EscrowClientException as e:
            self.reporter.error(
                f"Server-assisted hold failed ({type(e).__name__}): {e.message}",
                context="ServerAssistedHold",
            )
            self._record(type(e).__name__)
            raise

        self._record("success")
        return signature

    def _record(self, outcome: str) -> None:
        if self.metrics_enabled:
            record_flow("server_hold", outcome)


class ServerAssistedRelease:
    """Release funds through the API, which signs and submits."""

    def __init__(
        self,
        api_client: EscrowApiClient,
        monitor: ConfirmationMonitor,
        reporter: Optional[SystemReporter] = None,
        metrics_enabled: bool = True,
    ):
        self.api = api_client
        self.monitor = monitor
        self.reporter = reporter or get_reporter()
        self.metrics_enabled = metrics_enabled

    async def execute(self, initializer: str, beneficiary: str, release_ts: int) -> str:
        """
        Request the release and wait for its confirmation.

        Returns:
            Confirmed transaction signature
        """
        try:
            signature = await self.api.release(initializer, beneficiary, release_ts)
            self.reporter.info(
                f"API submitted release {signature}", context="ServerAssistedRelease"
            )
            await self.monitor.wait(signature)

        except EscrowClientException as e:
            self.reporter.error(
                f"Server-assisted release failed ({type(e).__name__}): {e.message}",
                context="ServerAssistedRelease",
            )
            self._record(type(e).__name__)
            raise

        self._record("success")
        return signature

    def _record(self, outcome: str) -> None:
        if self.metrics_enabled:
            record_flow("server_release", outcome)
