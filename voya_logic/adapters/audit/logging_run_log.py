"""Run log writer backed by the standard logging module.

Implements RunLogPort. Every run log is emitted as one INFO record with
the run metadata in ``extra``, and the most recent runs are kept in a
bounded buffer for inspection.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import asdict, dataclass, field
from typing import Deque, List

from ...domain.models import LogicRunLog


@dataclass
class LoggingRunLogWriter:
    """Writes scheduling run metadata to a logger.

    Attributes:
        max_entries: Number of recent run logs kept in memory
        logger_name: Logger that receives the records
    """

    max_entries: int = 500
    logger_name: str = "voya_logic.audit"

    _entries: Deque[LogicRunLog] = field(init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._entries = deque(maxlen=self.max_entries)
        self._logger = logging.getLogger(self.logger_name)

    def write(self, run_log: LogicRunLog) -> None:
        with self._lock:
            self._entries.append(run_log)
        self._logger.info(
            "Logic run completed",
            extra={"run_log": asdict(run_log)},
        )

    def recent(self) -> List[LogicRunLog]:
        """Return buffered run logs, oldest first."""
        with self._lock:
            return list(self._entries)
