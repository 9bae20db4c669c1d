"""Escrow domain model."""
