"""
Escrow API client.

HTTP client for the server-assisted deployment, where a backend derives
addresses, encodes instructions and returns an unsigned transaction.
"""

import asyncio
import base64
import binascii
from dataclasses import dataclass
from typing import Optional

import aiohttp
from solders.transaction import Transaction

from sequestre.domain.exceptions import EscrowApiException


@dataclass(frozen=True)
class PreparedTransaction:
    """Server-built unsigned transaction and its blockhash expiry."""

    transaction: Transaction
    last_valid_block_height: Optional[int]


def decode_transaction(encoded: str) -> Transaction:
    """
    Decode a base64 wire transaction.

    Raises:
        EscrowApiException: If the payload is not a valid transaction
    """
    try:
        return Transaction.from_bytes(base64.b64decode(encoded, validate=True))
    except (binascii.Error, ValueError) as e:
        raise EscrowApiException(f"Invalid prepared transaction: {e}") from e


class EscrowApiClient:
    """
    Escrow API HTTP client.

    One request per call, no retries.
    """

    def __init__(
        self,
        api_url: str,
        total_timeout: float = 30.0,
        connect_timeout: float = 10.0,
    ):
        """
        Initialize Escrow API client.

        Args:
            api_url: Escrow API base URL
            total_timeout: Total request timeout
            connect_timeout: Connection timeout
        """
        self.api_url = api_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(
            total=total_timeout,
            connect=connect_timeout,
        )
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    async def close(self) -> None:
        """Close HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def _post(self, endpoint: str, payload: dict, operation: str) -> dict:
        """
        POST JSON and return the decoded body.

        Raises:
            EscrowApiException: On non-200 status or network failure
        """
        session = await self._get_session()
        url = f"{self.api_url}{endpoint}"

        try:
            async with session.post(url, json=payload) as response:
                if response.status != 200:
                    error_text = await response.text()
                    raise EscrowApiException(
                        f"Failed to {operation}: {error_text}",
                        status_code=response.status,
                    )
                return await response.json()

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise EscrowApiException(f"Failed to {operation}: {e}") from e

    async def prepare_hold(
        self,
        initializer: str,
        beneficiary: str,
        amount: str,
        release_ts: int,
    ) -> PreparedTransaction:
        """
        Ask the API to build an unsigned hold transaction.

        Args:
            initializer: Initializer address (base58)
            beneficiary: Beneficiary address (base58)
            amount: Amount in base units
            release_ts: Unix seconds

        Returns:
            PreparedTransaction for the wallet to sign
        """
        data = await self._post(
            "/hold",
            {
                "initializer": initializer,
                "beneficiary": beneficiary,
                "amount": str(amount),
                "releaseTs": int(release_ts),
            },
            operation="prepare hold",
        )
        if "tx" not in data:
            raise EscrowApiException("Hold response has no transaction")

        return PreparedTransaction(
            transaction=decode_transaction(data["tx"]),
            last_valid_block_height=data.get("lastValidBlockHeight"),
        )

    async def release(
        self,
        initializer: str,
        beneficiary: str,
        release_ts: int,
    ) -> str:
        """
        Ask the API to release an escrow.

        Returns:
            Signature of the server-submitted release transaction
        """
        data = await self._post(
            "/release",
            {
                "initializer": initializer,
                "beneficiary": beneficiary,
                "releaseTs": int(release_ts),
            },
            operation="release",
        )
        if not data.get("signature"):
            raise EscrowApiException("Release response has no signature")
        return data["signature"]
