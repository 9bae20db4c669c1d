"""
Domain exceptions.
"""

from sequestre.domain.exceptions.escrow_exceptions import (
    ConfigurationException,
    ConfirmationTimeoutException,
    DerivationExhaustedException,
    EscrowClientException,
    InsufficientFundsException,
    InvalidAddressException,
    RPCException,
    StaleFreshnessTokenException,
    SubmissionFailedException,
    TransactionException,
)
from sequestre.domain.exceptions.signer_exceptions import (
    EscrowApiException,
    SignerException,
    SignerRejectedException,
    SignerUnavailableException,
)

# Kinds a caller may recover from by restarting the flow with fresh input.
USER_ACTIONABLE = (
    InsufficientFundsException,
    SignerRejectedException,
    ConfirmationTimeoutException,
    StaleFreshnessTokenException,
)


def is_user_actionable(exc: Exception) -> bool:
    """
    Tell whether a failed flow may be restarted by the caller.

    Configuration and derivation failures mean the feature is unusable and
    should be disabled rather than retried.
    """
    return isinstance(exc, USER_ACTIONABLE)


__all__ = [
    "EscrowClientException",
    "ConfigurationException",
    "InvalidAddressException",
    "DerivationExhaustedException",
    "InsufficientFundsException",
    "RPCException",
    "TransactionException",
    "SubmissionFailedException",
    "ConfirmationTimeoutException",
    "StaleFreshnessTokenException",
    "SignerException",
    "SignerUnavailableException",
    "SignerRejectedException",
    "EscrowApiException",
    "USER_ACTIONABLE",
    "is_user_actionable",
]
