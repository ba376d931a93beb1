"""Audit adapters - Implementations of the RunLogPort."""

from .logging_run_log import LoggingRunLogWriter

__all__ = ["LoggingRunLogWriter"]
