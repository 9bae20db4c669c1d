"""
Signer dispatch.

Normalizes the two wallet capability shapes into one outcome: the
transaction was submitted and here is its signature.

Priority order:
1. sign-and-submit: wallet signs and submits, returns the signature
2. sign-only: wallet signs, we serialize and submit over RPC
"""

from typing import Any, List, Optional, Union

from solders.transaction import Transaction

from sequestre.domain.exceptions import (
    EscrowClientException,
    RPCException,
    SignerRejectedException,
    SignerUnavailableException,
    SubmissionFailedException,
)
from sequestre.infrastructure.blockchain.solana_rpc_client import SolanaRPCClient
from sequestre.reporter import SystemReporter, get_reporter


def _preflight_logs(error: RPCException) -> List[str]:
    """Simulation logs the RPC node returns when preflight fails."""
    rpc_error = error.details.get("error")
    if not isinstance(rpc_error, dict):
        return []
    data = rpc_error.get("data")
    if not isinstance(data, dict):
        return []
    return list(data.get("logs") or [])


class SignAndSubmitSigner:
    """Wallet that signs and submits in one call."""

    kind = "sign-and-submit"

    def __init__(self, wallet: Any):
        self.wallet = wallet

    async def submit(
        self,
        transaction: Transaction,
        rpc_client: SolanaRPCClient,
        preflight_commitment: str = "processed",
    ) -> str:
        try:
            result = await self.wallet.sign_and_send_transaction(transaction)
        except EscrowClientException:
            raise
        except Exception as e:
            raise SignerRejectedException(str(e), details={"signer": self.kind}) from e

        signature = (
            result.get("signature")
            if isinstance(result, dict)
            else getattr(result, "signature", None)
        )
        if not signature:
            raise SubmissionFailedException(
                "Wallet returned no signature", details={"result": repr(result)}
            )
        return str(signature)


class SignOnlySigner:
    """Wallet that only signs; submission goes over RPC."""

    kind = "sign-only"

    def __init__(self, wallet: Any):
        self.wallet = wallet

    async def submit(
        self,
        transaction: Transaction,
        rpc_client: SolanaRPCClient,
        preflight_commitment: str = "processed",
    ) -> str:
        try:
            signed = await self.wallet.sign_transaction(transaction)
        except EscrowClientException:
            raise
        except Exception as e:
            raise SignerRejectedException(str(e), details={"signer": self.kind}) from e

        try:
            return await rpc_client.send_raw_transaction(
                bytes(signed), preflight_commitment=preflight_commitment
            )
        except RPCException as e:
            raise SubmissionFailedException(
                f"Transaction rejected: {e.message}",
                details=e.details,
                logs=_preflight_logs(e),
            ) from e


Signer = Union[SignAndSubmitSigner, SignOnlySigner]


def resolve_signer(wallet: Any) -> Signer:
    """
    Pick the wallet's best signing capability.

    Raises:
        SignerUnavailableException: If the wallet can neither sign-and-submit
            nor sign
    """
    if wallet is not None:
        if callable(getattr(wallet, "sign_and_send_transaction", None)):
            return SignAndSubmitSigner(wallet)
        if callable(getattr(wallet, "sign_transaction", None)):
            return SignOnlySigner(wallet)

    raise SignerUnavailableException("Wallet cannot sign transactions")


class SignerDispatch:
    """Submits frozen transactions through whichever signer a wallet offers."""

    def __init__(
        self,
        rpc_client: SolanaRPCClient,
        reporter: Optional[SystemReporter] = None,
        preflight_commitment: str = "processed",
    ):
        self.rpc = rpc_client
        self.reporter = reporter or get_reporter()
        self.preflight_commitment = preflight_commitment

    async def submit(self, wallet: Any, transaction: Transaction) -> str:
        """
        Have the wallet sign ``transaction`` and get it submitted.

        Returns:
            Transaction signature

        Raises:
            SignerUnavailableException: Wallet has no signing capability
            SignerRejectedException: Wallet declined; message is the wallet's
            SubmissionFailedException: Ledger rejected the signed transaction
        """
        signer = resolve_signer(wallet)
        self.reporter.info(f"Requesting {signer.kind} signature", context="Signer")

        try:
            signature = await signer.submit(
                transaction,
                self.rpc,
                preflight_commitment=self.preflight_commitment,
            )
        except SignerRejectedException as e:
            self.reporter.warning(f"Signer rejected: {e.message}", context="Signer")
            raise

        self.reporter.info(f"Submitted {signature}", context="Signer")
        return signature
