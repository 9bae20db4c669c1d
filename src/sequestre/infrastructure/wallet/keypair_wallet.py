"""
Local keypair wallet.

Sign-only wallet backed by a Solana CLI keypair file (JSON array of 64
secret key bytes). Used by the CLI and in tests.
"""

import json
from pathlib import Path

from solders.keypair import Keypair
from solders.transaction import Transaction

from sequestre.domain.services.i_wallet_provider import IWalletProvider


def load_keypair(keypair_path: str) -> Keypair:
    """
    Load Solana keypair from JSON file.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = Path(keypair_path).expanduser()

    if not path.exists():
        raise FileNotFoundError(f"Keypair not found: {keypair_path}")

    with open(path, "r") as f:
        secret_key = json.load(f)

    return Keypair.from_bytes(bytes(secret_key))


class KeypairWallet(IWalletProvider):
    """Wallet that signs locally and leaves submission to the caller."""

    def __init__(self, keypair: Keypair):
        self.keypair = keypair
        self.public_key = str(keypair.pubkey())

    @classmethod
    def from_file(cls, keypair_path: str) -> "KeypairWallet":
        """Load wallet from a keypair JSON file."""
        return cls(load_keypair(keypair_path))

    async def connect(self) -> str:
        return self.public_key

    async def sign_transaction(self, transaction: Transaction) -> Transaction:
        """Sign with the local keypair, in place."""
        transaction.sign([self.keypair], transaction.message.recent_blockhash)
        return transaction
