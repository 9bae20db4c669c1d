"""
Prometheus metrics collection.
"""

from prometheus_client import Counter, Histogram

# ============================================================
# Flow Metrics
# ============================================================

flows_total = Counter(
    "sequestre_flows_total",
    "Escrow flows by outcome",
    ["flow", "outcome"],
)

# ============================================================
# Ledger Metrics
# ============================================================

rpc_requests_total = Counter(
    "sequestre_rpc_requests_total",
    "Total Solana RPC requests",
    ["method", "status"],
)

confirmation_seconds = Histogram(
    "sequestre_confirmation_seconds",
    "Time from submission to observed confirmation",
    buckets=(0.5, 1.0, 2.0, 5.0, 10.0, 20.0, 30.0, 60.0, 120.0),
)


def record_flow(flow: str, outcome: str) -> None:
    """Count one finished flow; outcome is "success" or an exception name."""
    flows_total.labels(flow=flow, outcome=outcome).inc()
