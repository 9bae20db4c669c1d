"""Logging for escrow flows."""

from sequestre.reporter.system_reporter import SystemReporter, get_reporter

__all__ = ["SystemReporter", "get_reporter"]
