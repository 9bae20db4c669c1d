"""Escrow flows."""
