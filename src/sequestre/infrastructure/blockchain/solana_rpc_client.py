"""
Solana JSON-RPC client.

Thin async transport for the handful of ledger calls escrow flows need.
No retries: every call is made once and any failure is raised as
RPCException for the caller to classify.
"""

import asyncio
import base64
from typing import Any, Dict, List, Optional, Tuple

import aiohttp
from solders.hash import Hash

from sequestre.domain.exceptions import RPCException
from sequestre.infrastructure.monitoring.metrics import rpc_requests_total


class SolanaRPCClient:
    """
    Explicitly constructed ledger handle.

    Holds the endpoint URL and one lazily opened HTTP session; create one
    per application and pass it to every flow. Close with ``close()`` or
    use as an async context manager.
    """

    def __init__(self, rpc_url: str, rpc_timeout: float = 10.0):
        """
        Initialize Solana RPC client.

        Args:
            rpc_url: JSON-RPC endpoint URL
            rpc_timeout: Per-request HTTP timeout in seconds
        """
        self.rpc_url = rpc_url
        self.rpc_timeout = rpc_timeout
        self._session: Optional[aiohttp.ClientSession] = None
        self._request_id = 0

    @classmethod
    def from_settings(cls, settings) -> "SolanaRPCClient":
        """Build from a SequestreConfig."""
        return cls(
            rpc_url=settings.solana_rpc_url,
            rpc_timeout=settings.timeouts.rpc_call,
        )

    async def __aenter__(self) -> "SolanaRPCClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.rpc_timeout),
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def call_rpc(
        self,
        method: str,
        params: Optional[list] = None,
    ) -> Any:
        """
        Call a JSON-RPC method.

        Args:
            method: RPC method name
            params: Optional method parameters

        Returns:
            The ``result`` member of the response

        Raises:
            RPCException: On transport error, timeout or RPC error object
        """
        if not self.rpc_url:
            raise RPCException("Solana RPC URL not configured")

        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params or [],
        }

        try:
            session = await self._get_session()
            async with session.post(self.rpc_url, json=payload) as response:
                response.raise_for_status()
                data = await response.json()

        except aiohttp.ClientError as e:
            rpc_requests_total.labels(method=method, status="transport_error").inc()
            raise RPCException(
                f"RPC connection error: {str(e)}",
                details={"method": method},
            ) from e
        except asyncio.TimeoutError as e:
            rpc_requests_total.labels(method=method, status="timeout").inc()
            raise RPCException(
                f"RPC timeout: {method}",
                details={"method": method, "timeout": self.rpc_timeout},
            ) from e

        if "error" in data:
            rpc_requests_total.labels(method=method, status="rpc_error").inc()
            error = data["error"]
            message = error.get("message", error) if isinstance(error, dict) else error
            raise RPCException(
                f"RPC error: {message}",
                details={"method": method, "error": error},
            )

        rpc_requests_total.labels(method=method, status="success").inc()
        return data.get("result")

    async def get_token_account_balance(
        self, address: str, commitment: str = "confirmed"
    ) -> int:
        """
        Get token account balance in base units.

        Raises:
            RPCException: If the account does not exist or the call fails
        """
        result = await self.call_rpc(
            "getTokenAccountBalance",
            [address, {"commitment": commitment}],
        )
        return int(result["value"]["amount"])

    async def get_latest_blockhash(
        self, commitment: str = "processed"
    ) -> Tuple[Hash, int]:
        """
        Fetch a recent blockhash.

        Returns:
            Tuple of (blockhash, last_valid_block_height)
        """
        result = await self.call_rpc(
            "getLatestBlockhash",
            [{"commitment": commitment}],
        )
        value = result["value"]
        return Hash.from_string(value["blockhash"]), int(value["lastValidBlockHeight"])

    async def get_block_height(self, commitment: str = "confirmed") -> int:
        """Current block height."""
        result = await self.call_rpc("getBlockHeight", [{"commitment": commitment}])
        return int(result)

    async def send_raw_transaction(
        self,
        raw_transaction: bytes,
        preflight_commitment: str = "processed",
    ) -> str:
        """
        Submit a signed, serialized transaction.

        Returns:
            Transaction signature (base58)
        """
        encoded = base64.b64encode(raw_transaction).decode("utf-8")
        return await self.call_rpc(
            "sendTransaction",
            [
                encoded,
                {
                    "encoding": "base64",
                    "preflightCommitment": preflight_commitment,
                },
            ],
        )

    async def get_signature_status(self, signature: str) -> Optional[Dict[str, Any]]:
        """
        Get the status of one signature.

        Returns:
            Status dict (``confirmationStatus``, ``err``, ...) or None if the
            ledger has not seen the signature yet
        """
        result = await self.call_rpc(
            "getSignatureStatuses",
            [[signature], {"searchTransactionHistory": False}],
        )
        statuses = result.get("value") or []
        return statuses[0] if statuses else None

    async def get_transaction_logs(
        self, signature: str, commitment: str = "confirmed"
    ) -> List[str]:
        """
        Fetch execution log lines of a transaction.

        Returns:
            Log lines, empty if the ledger has no record of the transaction
        """
        result = await self.call_rpc(
            "getTransaction",
            [
                signature,
                {
                    "encoding": "json",
                    "commitment": commitment,
                    "maxSupportedTransactionVersion": 0,
                },
            ],
        )
        if not result:
            return []
        meta = result.get("meta") or {}
        return list(meta.get("logMessages") or [])
