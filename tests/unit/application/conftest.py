"""
Use case fixtures: real assembler/dispatcher/monitor over a mocked ledger.
"""

import pytest

from sequestre.infrastructure.blockchain.confirmation_monitor import (
    ConfirmationMonitor,
)
from sequestre.infrastructure.blockchain.transaction_assembler import (
    TransactionAssembler,
)
from sequestre.infrastructure.wallet.signer_dispatch import SignerDispatch


@pytest.fixture
def assembler(program, mock_rpc, reporter) -> TransactionAssembler:
    return TransactionAssembler(program=program, rpc_client=mock_rpc, reporter=reporter)


@pytest.fixture
def dispatcher(mock_rpc, reporter) -> SignerDispatch:
    return SignerDispatch(rpc_client=mock_rpc, reporter=reporter)


@pytest.fixture
def monitor(mock_rpc, reporter) -> ConfirmationMonitor:
    return ConfirmationMonitor(
        rpc_client=mock_rpc, reporter=reporter, timeout=0.05, poll_interval=0.01
    )
