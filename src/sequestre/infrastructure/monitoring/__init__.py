"""Metrics for escrow flows and ledger calls."""

from sequestre.infrastructure.monitoring.metrics import (
    confirmation_seconds,
    flows_total,
    record_flow,
    rpc_requests_total,
)

__all__ = [
    "flows_total",
    "rpc_requests_total",
    "confirmation_seconds",
    "record_flow",
]
