"""
Wallet provider interface.

A wallet exposes ``connect()`` and at least one of two signing
capabilities. Capabilities a wallet lacks are left as ``None``; Signer
Dispatch checks which ones are present before a flow signs.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class IWalletProvider(ABC):
    """
    Interface for signing wallets.

    Optional capabilities (override with an async method to provide):
        sign_and_send_transaction(tx) -> {"signature": str}
        sign_transaction(tx) -> signed Transaction
    """

    public_key: Optional[str] = None

    sign_and_send_transaction: Any = None
    sign_transaction: Any = None

    @abstractmethod
    async def connect(self) -> str:
        """
        Connect and return the active account (base58).
        """
