"""Dependency wiring."""

from sequestre.di.container import Container

__all__ = ["Container"]
