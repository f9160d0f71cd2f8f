"""Models describing the outcome of a sync run."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class RunPhase(str, Enum):
    """Phases a sync run moves through, in order."""

    SCANNING = "scanning"
    UPSERTING = "upserting"
    PRUNING = "pruning"
    REPORTED = "reported"


@dataclass(frozen=True)
class RunReport:
    """Binary outcome of a run: fully reconciled, or failed."""

    ok: bool
    files_seen: int = 0
    upserts: int = 0
    deletes: int = 0
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the JSON shape printed by the entry point."""
        if not self.ok:
            return {"ok": False, "error": self.error}
        return {
            "ok": True,
            "upserts": self.upserts,
            "deletes": self.deletes,
            "filesSeen": self.files_seen,
        }
