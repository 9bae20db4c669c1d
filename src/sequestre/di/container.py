"""
Dependency Injection container for Sequestre.

Builds every component from one SequestreConfig. The RPC client it creates
is the single ledger handle shared by the flows it builds; close it with
``await container.close()``.
"""

from typing import Optional

from sequestre.application.use_cases import (
    HoldFunds,
    ReleaseFunds,
    ServerAssistedHold,
    ServerAssistedRelease,
)
from sequestre.config.settings import SequestreConfig
from sequestre.domain.exceptions import ConfigurationException
from sequestre.infrastructure.blockchain import (
    ConfirmationMonitor,
    EscrowProgram,
    SolanaRPCClient,
    TransactionAssembler,
)
from sequestre.infrastructure.bridge import EscrowApiClient
from sequestre.infrastructure.wallet import SignerDispatch
from sequestre.reporter import SystemReporter


class Container:
    """
    Dependency Injection container.

    Components are created on first access and reused afterwards.
    """

    def __init__(
        self,
        settings: SequestreConfig,
        rpc_client: Optional[SolanaRPCClient] = None,
        reporter: Optional[SystemReporter] = None,
    ):
        """
        Initialize container with settings.

        Args:
            settings: Application settings
            rpc_client: Ledger handle to use instead of building one
            reporter: Logger to use instead of building one
        """
        self.settings = settings
        self._rpc_client = rpc_client
        self._reporter = reporter
        self._program: Optional[EscrowProgram] = None
        self._escrow_api_client: Optional[EscrowApiClient] = None

    @property
    def reporter(self) -> SystemReporter:
        if self._reporter is None:
            self._reporter = SystemReporter.from_settings(self.settings)
        return self._reporter

    @property
    def program(self) -> EscrowProgram:
        """
        Escrow program and mint.

        Raises:
            ConfigurationException: If program or mint id is missing/malformed
        """
        if self._program is None:
            self._program = EscrowProgram.from_settings(self.settings)
        return self._program

    @property
    def rpc_client(self) -> SolanaRPCClient:
        if self._rpc_client is None:
            self._rpc_client = SolanaRPCClient.from_settings(self.settings)
        return self._rpc_client

    @property
    def escrow_api_client(self) -> EscrowApiClient:
        if not self.settings.escrow_api_url:
            raise ConfigurationException("Missing escrow_api_url")
        if self._escrow_api_client is None:
            self._escrow_api_client = EscrowApiClient(
                self.settings.escrow_api_url,
                total_timeout=self.settings.timeouts.rpc_call * 3,
            )
        return self._escrow_api_client

    def assembler(self) -> TransactionAssembler:
        return TransactionAssembler(
            program=self.program,
            rpc_client=self.rpc_client,
            reporter=self.reporter,
            blockhash_commitment=self.settings.blockhash_commitment,
            balance_commitment=self.settings.commitment,
        )

    def dispatcher(self) -> SignerDispatch:
        return SignerDispatch(
            rpc_client=self.rpc_client,
            reporter=self.reporter,
            preflight_commitment=self.settings.blockhash_commitment,
        )

    def monitor(self) -> ConfirmationMonitor:
        return ConfirmationMonitor(
            rpc_client=self.rpc_client,
            reporter=self.reporter,
            commitment=self.settings.commitment,
            timeout=self.settings.timeouts.confirmation,
            poll_interval=self.settings.timeouts.poll_interval,
        )

    def hold_funds(self) -> HoldFunds:
        return HoldFunds(
            assembler=self.assembler(),
            dispatcher=self.dispatcher(),
            monitor=self.monitor(),
            reporter=self.reporter,
            metrics_enabled=self.settings.metrics_enabled,
        )

    def release_funds(self) -> ReleaseFunds:
        return ReleaseFunds(
            assembler=self.assembler(),
            dispatcher=self.dispatcher(),
            monitor=self.monitor(),
            reporter=self.reporter,
            metrics_enabled=self.settings.metrics_enabled,
        )

    def server_assisted_hold(self) -> ServerAssistedHold:
        return ServerAssistedHold(
            api_client=self.escrow_api_client,
            program=self.program,
            dispatcher=self.dispatcher(),
            monitor=self.monitor(),
            reporter=self.reporter,
            metrics_enabled=self.settings.metrics_enabled,
        )

    def server_assisted_release(self) -> ServerAssistedRelease:
        return ServerAssistedRelease(
            api_client=self.escrow_api_client,
            monitor=self.monitor(),
            reporter=self.reporter,
            metrics_enabled=self.settings.metrics_enabled,
        )

    async def close(self) -> None:
        """Close network sessions."""
        if self._rpc_client is not None:
            await self._rpc_client.close()
        if self._escrow_api_client is not None:
            await self._escrow_api_client.close()
