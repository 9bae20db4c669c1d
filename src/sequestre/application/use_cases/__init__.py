"""Application use cases."""

from sequestre.application.use_cases.hold_funds import HoldFunds
from sequestre.application.use_cases.release_funds import ReleaseFunds
from sequestre.application.use_cases.server_assisted import (
    ServerAssistedHold,
    ServerAssistedRelease,
    verify_prepared_hold,
)

__all__ = [
    "HoldFunds",
    "ReleaseFunds",
    "ServerAssistedHold",
    "ServerAssistedRelease",
    "verify_prepared_hold",
]
