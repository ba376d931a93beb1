"""Audit port - Receives run metadata for scheduling runs."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..domain.models import LogicRunLog


class RunLogPort(Protocol):
    """Port for the audit/logging collaborator.

    Callers treat writes as fire-and-forget: a failing write is logged
    and never fails the scheduling run.
    """

    def write(self, run_log: LogicRunLog) -> None:
        ...
