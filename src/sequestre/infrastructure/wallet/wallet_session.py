"""
Wallet session snapshot.

Hosts track connect/disconnect/account-change by refreshing a WalletSession
(poll) instead of registering callbacks; escrow flows only ever read the
snapshot they were started with.
"""

from dataclasses import dataclass
from typing import Any, Optional

from sequestre.domain.exceptions import SignerUnavailableException
from sequestre.infrastructure.wallet.signer_dispatch import resolve_signer


@dataclass(frozen=True)
class WalletSession:
    """Active account and signing capability of a wallet at one moment."""

    account: Optional[str]
    capability: Optional[str]

    @property
    def connected(self) -> bool:
        return self.account is not None

    @classmethod
    def snapshot(cls, wallet: Any) -> "WalletSession":
        """Read the wallet's current state without connecting."""
        if wallet is None:
            return cls(account=None, capability=None)

        try:
            capability = resolve_signer(wallet).kind
        except SignerUnavailableException:
            capability = None

        return cls(account=getattr(wallet, "public_key", None), capability=capability)

    def changed(self, other: "WalletSession") -> bool:
        """True if the active account differs (switch or disconnect)."""
        return self.account != other.account


async def ensure_connected(wallet: Any) -> str:
    """
    Return the wallet's account, connecting first if it has none.

    Raises:
        SignerUnavailableException: If there is no wallet
    """
    if wallet is None:
        raise SignerUnavailableException("No wallet available")

    account = getattr(wallet, "public_key", None)
    if account:
        return str(account)

    connected = await wallet.connect()
    return str(getattr(wallet, "public_key", None) or connected)
