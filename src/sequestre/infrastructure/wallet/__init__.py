"""Wallet adapters and signer dispatch."""

from sequestre.infrastructure.wallet.keypair_wallet import KeypairWallet, load_keypair
from sequestre.infrastructure.wallet.signer_dispatch import (
    SignAndSubmitSigner,
    SignerDispatch,
    SignOnlySigner,
    resolve_signer,
)
from sequestre.infrastructure.wallet.wallet_session import (
    WalletSession,
    ensure_connected,
)

__all__ = [
    "KeypairWallet",
    "load_keypair",
    "SignerDispatch",
    "SignAndSubmitSigner",
    "SignOnlySigner",
    "resolve_signer",
    "WalletSession",
    "ensure_connected",
]
