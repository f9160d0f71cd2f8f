"""Run reporter: tallies a sync run and emits its single JSON outcome."""

import json
import logging
import sys
from typing import Optional, TextIO

from ..models import RunPhase, RunReport

logger = logging.getLogger(__name__)


class RunReporter:
    """Collects counters and the current phase while a run progresses."""

    def __init__(self):
        self.phase = RunPhase.SCANNING
        self.files_seen = 0
        self.upserts = 0
        self.deletes = 0

    def enter(self, phase: RunPhase) -> None:
        """Record a phase transition."""
        logger.info(f"Sync phase: {self.phase.value} -> {phase.value}")
        self.phase = phase

    def record_files_seen(self, count: int) -> None:
        self.files_seen = count

    def record_upsert(self) -> None:
        self.upserts += 1

    def record_delete(self) -> None:
        self.deletes += 1

    def success(self) -> RunReport:
        """Close the run and build the success report."""
        self.enter(RunPhase.REPORTED)
        return RunReport(
            ok=True,
            files_seen=self.files_seen,
            upserts=self.upserts,
            deletes=self.deletes,
        )

    @staticmethod
    def failure(error: BaseException) -> RunReport:
        """Build the failure report."""
        return RunReport(ok=False, error=str(error) or error.__class__.__name__)


def emit_report(
    report: RunReport,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
) -> int:
    """
    Write the report as JSON and return the process exit code.

    Success goes to stdout with exit code 0, failure to stderr with exit code 1.
    """
    payload = json.dumps(report.to_dict(), indent=2)
    if report.ok:
        print(payload, file=stdout or sys.stdout)
        return 0

    print(payload, file=stderr or sys.stderr)
    return 1
