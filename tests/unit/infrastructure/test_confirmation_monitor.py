"""
Unit tests for ConfirmationMonitor.

Usage:
    pytest tests/unit/infrastructure/test_confirmation_monitor.py
"""

import pytest

from sequestre.domain.exceptions import (
    ConfirmationTimeoutException,
    RPCException,
    StaleFreshnessTokenException,
    SubmissionFailedException,
)
from sequestre.infrastructure.blockchain.confirmation_monitor import (
    ConfirmationMonitor,
)

SIGNATURE = "5VERYsig111"
LOGS = ["Program 11111111111111111111111111111111 invoke [1]", "Program log: done"]


def _status(level, err=None):
    return {"slot": 1, "confirmations": 0, "err": err, "confirmationStatus": level}


@pytest.fixture
def monitor(mock_rpc, reporter) -> ConfirmationMonitor:
    return ConfirmationMonitor(
        rpc_client=mock_rpc,
        reporter=reporter,
        commitment="confirmed",
        timeout=0.05,
        poll_interval=0.01,
    )


class TestConfirmationMonitor:
    """Unit tests for ConfirmationMonitor."""

    # ================================================================
    # Success
    # ================================================================

    async def test_confirmed_on_first_poll(self, monitor, mock_rpc):
        status = await monitor.wait(SIGNATURE, last_valid_block_height=1_000)

        assert status["confirmationStatus"] == "confirmed"
        mock_rpc.get_signature_status.assert_awaited_with(SIGNATURE)

    async def test_waits_through_lower_commitment(self, monitor, mock_rpc):
        """Test processed and unseen statuses keep the monitor polling."""
        mock_rpc.get_signature_status.side_effect = [
            None,
            _status("processed"),
            _status("finalized"),
        ]

        status = await monitor.wait(SIGNATURE)

        assert status["confirmationStatus"] == "finalized"
        assert mock_rpc.get_signature_status.await_count == 3

    # ================================================================
    # Failures
    # ================================================================

    async def test_timeout_carries_logs(self, monitor, mock_rpc):
        mock_rpc.get_signature_status.return_value = None
        mock_rpc.get_transaction_logs.return_value = LOGS

        with pytest.raises(ConfirmationTimeoutException) as exc_info:
            await monitor.wait(SIGNATURE)

        assert exc_info.value.logs == LOGS
        assert exc_info.value.details["signature"] == SIGNATURE

    async def test_timeout_with_unfetchable_logs(self, monitor, mock_rpc):
        """Test log fetch failure yields an empty log list, not a new error."""
        mock_rpc.get_signature_status.return_value = None
        mock_rpc.get_transaction_logs.side_effect = RPCException("RPC timeout")

        with pytest.raises(ConfirmationTimeoutException) as exc_info:
            await monitor.wait(SIGNATURE)

        assert exc_info.value.logs == []

    async def test_expired_blockhash(self, monitor, mock_rpc):
        mock_rpc.get_signature_status.return_value = None
        mock_rpc.get_block_height.return_value = 1_001

        with pytest.raises(StaleFreshnessTokenException) as exc_info:
            await monitor.wait(SIGNATURE, last_valid_block_height=1_000)

        assert exc_info.value.details["last_valid_block_height"] == 1_000

    async def test_on_chain_error(self, monitor, mock_rpc):
        err = {"InstructionError": [1, {"Custom": 6000}]}
        mock_rpc.get_signature_status.return_value = _status("processed", err)
        mock_rpc.get_transaction_logs.return_value = LOGS

        with pytest.raises(SubmissionFailedException) as exc_info:
            await monitor.wait(SIGNATURE)

        assert exc_info.value.details["err"] == err
        assert exc_info.value.logs == LOGS

    async def test_poll_failure(self, monitor, mock_rpc):
        mock_rpc.get_signature_status.side_effect = RPCException(
            "RPC connection error", details={"method": "getSignatureStatuses"}
        )

        with pytest.raises(SubmissionFailedException):
            await monitor.wait(SIGNATURE)

    def test_unknown_commitment_rejected(self, mock_rpc, reporter):
        with pytest.raises(ValueError):
            ConfirmationMonitor(mock_rpc, reporter, commitment="final")
