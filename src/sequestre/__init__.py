"""
Sequestre - client for a time-locked token escrow program on Solana.

Derives escrow addresses, encodes program instructions, assembles and
submits transactions through a wallet, and waits for confirmation.
"""

__version__ = "0.1.0"
