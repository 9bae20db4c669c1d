"""Server-assisted escrow API."""

from sequestre.infrastructure.bridge.escrow_api_client import (
    EscrowApiClient,
    PreparedTransaction,
    decode_transaction,
)

__all__ = ["EscrowApiClient", "PreparedTransaction", "decode_transaction"]
