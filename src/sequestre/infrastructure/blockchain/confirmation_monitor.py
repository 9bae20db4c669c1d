"""
Confirmation monitor.

Waits for a submitted signature to reach the configured commitment and, on
any failure, attaches the transaction's execution log to the error.
"""

import asyncio
from typing import Any, Dict, List, Optional

from sequestre.domain.exceptions import (
    ConfirmationTimeoutException,
    RPCException,
    StaleFreshnessTokenException,
    SubmissionFailedException,
)
from sequestre.infrastructure.blockchain.solana_rpc_client import SolanaRPCClient
from sequestre.infrastructure.monitoring.metrics import confirmation_seconds
from sequestre.reporter import SystemReporter, get_reporter

COMMITMENT_RANK = {"processed": 0, "confirmed": 1, "finalized": 2}


class ConfirmationMonitor:
    """
    Polls signature status until finality, expiry or timeout.

    Never resubmits and never renews the blockhash: an expired blockhash
    means the caller restarts the flow from scratch.
    """

    def __init__(
        self,
        rpc_client: SolanaRPCClient,
        reporter: Optional[SystemReporter] = None,
        commitment: str = "confirmed",
        timeout: float = 60.0,
        poll_interval: float = 1.0,
    ):
        """
        Initialize monitor.

        Args:
            rpc_client: Ledger handle
            reporter: Logger (defaults to the package reporter)
            commitment: Level that counts as final
            timeout: Upper bound on the wait, in seconds
            poll_interval: Delay between status polls, in seconds
        """
        if commitment not in COMMITMENT_RANK:
            raise ValueError(f"Unknown commitment: {commitment}")

        self.rpc = rpc_client
        self.reporter = reporter or get_reporter()
        self.commitment = commitment
        self.timeout = timeout
        self.poll_interval = poll_interval

    def _reached(self, status: Dict[str, Any]) -> bool:
        level = status.get("confirmationStatus")
        if level is None:
            return False
        return COMMITMENT_RANK.get(level, -1) >= COMMITMENT_RANK[self.commitment]

    async def fetch_logs(self, signature: str) -> List[str]:
        """
        Fetch execution logs, best-effort.

        Returns:
            Log lines, or an empty list if they cannot be fetched
        """
        try:
            return await self.rpc.get_transaction_logs(signature)
        except RPCException as e:
            self.reporter.warning(
                f"No logs for {signature}: {e.message}", context="Confirmation"
            )
            return []

    async def wait(
        self,
        signature: str,
        last_valid_block_height: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Wait for ``signature`` to reach the configured commitment.

        Args:
            signature: Submitted transaction signature
            last_valid_block_height: Expiry height of the transaction's
                blockhash, if known

        Returns:
            Final signature status

        Raises:
            SubmissionFailedException: Transaction failed on-chain or the
                ledger could not be polled
            StaleFreshnessTokenException: Blockhash expired first
            ConfirmationTimeoutException: Bound elapsed first
        """
        loop = asyncio.get_running_loop()
        started = loop.time()
        deadline = started + self.timeout

        self.reporter.info(
            f"Waiting for {signature} ({self.commitment})", context="Confirmation"
        )

        while True:
            try:
                status = await self.rpc.get_signature_status(signature)
                if status is not None:
                    if status.get("err") is not None:
                        raise SubmissionFailedException(
                            f"Transaction {signature} failed: {status['err']}",
                            details={"signature": signature, "err": status["err"]},
                            logs=await self.fetch_logs(signature),
                        )
                    if self._reached(status):
                        elapsed = loop.time() - started
                        confirmation_seconds.observe(elapsed)
                        self.reporter.info(
                            f"Confirmed {signature} in {elapsed:.1f}s",
                            context="Confirmation",
                        )
                        return status

                if last_valid_block_height is not None:
                    height = await self.rpc.get_block_height(self.commitment)
                    if height > last_valid_block_height:
                        raise StaleFreshnessTokenException(
                            f"Blockhash expired before {signature} confirmed",
                            details={
                                "signature": signature,
                                "block_height": height,
                                "last_valid_block_height": last_valid_block_height,
                            },
                            logs=await self.fetch_logs(signature),
                        )

            except RPCException as e:
                raise SubmissionFailedException(
                    f"Could not poll {signature}: {e.message}",
                    details={"signature": signature, **e.details},
                    logs=await self.fetch_logs(signature),
                ) from e

            if loop.time() >= deadline:
                raise ConfirmationTimeoutException(
                    f"Transaction {signature} not confirmed within {self.timeout}s",
                    details={"signature": signature, "timeout": self.timeout},
                    logs=await self.fetch_logs(signature),
                )

            await asyncio.sleep(self.poll_interval)
