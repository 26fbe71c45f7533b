# Append-only collector for findings; safe to share between worker threads.

from __future__ import annotations

import logging
import threading
from typing import Iterable

from permlint.findings.models import Finding, Issue, Location

logger = logging.getLogger(__name__)


class FindingSink:
    """
    Receives findings from rules. Reports are never retracted or reordered;
    concurrent report()/extend() calls from independent files are serialized
    by a lock, with no ordering guarantee between files.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._findings: list[Finding] = []

    def report(self, issue: Issue, location: Location, message: str) -> Finding:
        finding = Finding(
            rule_id=issue.id,
            message=message,
            location=location,
            severity=issue.severity,
        )
        with self._lock:
            self._findings.append(finding)
        logger.debug("Reported [%s] at %s:%d", issue.id, location.path, location.line)
        return finding

    def extend(self, findings: Iterable[Finding]) -> None:
        batch = list(findings)
        with self._lock:
            self._findings.extend(batch)

    @property
    def findings(self) -> list[Finding]:
        """Snapshot copy of everything reported so far."""
        with self._lock:
            return list(self._findings)

    def __len__(self) -> int:
        with self._lock:
            return len(self._findings)
