"""
Unit tests for exception hierarchy and classification.

Usage:
    pytest tests/unit/domain/test_exceptions.py
"""

import pytest

from sequestre.domain.exceptions import (
    ConfigurationException,
    ConfirmationTimeoutException,
    DerivationExhaustedException,
    EscrowApiException,
    EscrowClientException,
    InsufficientFundsException,
    SignerRejectedException,
    StaleFreshnessTokenException,
    SubmissionFailedException,
    TransactionException,
    is_user_actionable,
)


class TestExceptions:
    def test_message_and_details(self):
        exc = InsufficientFundsException("short", details={"balance": 1})
        assert str(exc) == "short"
        assert exc.details == {"balance": 1}

    def test_transaction_exceptions_carry_logs(self):
        exc = ConfirmationTimeoutException("late", logs=["Program log: hi"])
        assert isinstance(exc, TransactionException)
        assert exc.logs == ["Program log: hi"]
        assert SubmissionFailedException("x").logs == []

    def test_api_exception_status(self):
        exc = EscrowApiException("bad", status_code=502)
        assert isinstance(exc, EscrowClientException)
        assert exc.details["status_code"] == 502

    @pytest.mark.parametrize(
        "exc",
        [
            InsufficientFundsException("x"),
            SignerRejectedException("x"),
            ConfirmationTimeoutException("x"),
            StaleFreshnessTokenException("x"),
        ],
    )
    def test_user_actionable(self, exc):
        assert is_user_actionable(exc)

    @pytest.mark.parametrize(
        "exc",
        [
            ConfigurationException("x"),
            DerivationExhaustedException("x"),
            SubmissionFailedException("x"),
        ],
    )
    def test_not_user_actionable(self, exc):
        assert not is_user_actionable(exc)
