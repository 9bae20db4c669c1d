"""
Escrow client exceptions.

Every failure of a hold or release flow is reported once, as one of the
exceptions below, and the flow terminates.
"""

from typing import List, Optional


class EscrowClientException(Exception):
    """Base exception for escrow client operations."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationException(EscrowClientException):
    """Program or mint identifier missing or malformed."""


class InvalidAddressException(EscrowClientException):
    """Account address string is not a valid public key."""


class DerivationExhaustedException(EscrowClientException):
    """No bump seed produced an off-curve escrow address."""


class InsufficientFundsException(EscrowClientException):
    """Initializer token account is missing or holds too little."""


class RPCException(EscrowClientException):
    """Ledger RPC call failed."""


class TransactionException(EscrowClientException):
    """
    Submitted transaction did not reach finality.

    Carries the on-chain execution log lines fetched for diagnostics
    (empty when none could be fetched).
    """

    def __init__(
        self,
        message: str,
        details: Optional[dict] = None,
        logs: Optional[List[str]] = None,
    ):
        super().__init__(message, details)
        self.logs = list(logs or [])


class SubmissionFailedException(TransactionException):
    """Network or ledger rejected the transaction."""


class ConfirmationTimeoutException(TransactionException):
    """Finality not observed within the confirmation bound."""


class StaleFreshnessTokenException(TransactionException):
    """Blockhash expired before the transaction was confirmed."""
