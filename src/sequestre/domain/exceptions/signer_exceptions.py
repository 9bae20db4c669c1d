"""
Wallet signer exceptions.
"""

from sequestre.domain.exceptions.escrow_exceptions import EscrowClientException


class SignerException(EscrowClientException):
    """Base exception for wallet signing."""


class SignerUnavailableException(SignerException):
    """Wallet exposes neither sign-and-submit nor sign-only."""


class SignerRejectedException(SignerException):
    """Wallet declined or failed the signing request."""


class EscrowApiException(EscrowClientException):
    """Escrow API (server-assisted preparation) request failed."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message, {"status_code": status_code})
        self.status_code = status_code
