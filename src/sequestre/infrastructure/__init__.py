"""Adapters for the ledger, wallets and the escrow API."""
