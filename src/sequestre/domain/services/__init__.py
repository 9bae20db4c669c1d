"""Domain service interfaces."""

from sequestre.domain.services.i_wallet_provider import IWalletProvider

__all__ = ["IWalletProvider"]
