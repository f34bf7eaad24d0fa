"""
Data models for the addon backup migration job.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class WaitState(Enum):
    """States of a polling loop."""

    PENDING = "pending"
    READY = "ready"
    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


@dataclass
class AddonSnapshot:
    """One observation of an addon."""

    id: str
    status: str
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_api(cls, data: Optional[Dict[str, Any]]) -> Optional["AddonSnapshot"]:
        """Build a snapshot from an API payload, or None if it has no id."""
        if not isinstance(data, dict) or not data.get("id"):
            return None
        return cls(id=data["id"], status=str(data.get("status", "")), raw=data)


@dataclass
class BackupSnapshot:
    """One observation of a backup or import job."""

    id: str
    status: str
    source_type: Optional[str] = None  # config.source.type
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_api(cls, data: Optional[Dict[str, Any]]) -> Optional["BackupSnapshot"]:
        """Build a snapshot from an API payload, or None if it has no id."""
        if not isinstance(data, dict) or not data.get("id"):
            return None
        config = data.get("config")
        source = config.get("source") if isinstance(config, dict) else None
        if not isinstance(source, dict):
            source = {}
        return cls(
            id=data["id"],
            status=str(data.get("status", "")),
            source_type=source.get("type"),
            raw=data,
        )


@dataclass
class WaitBudget:
    """Wall-clock allowance for a single polling loop."""

    start_time: float
    max_minutes: int

    @property
    def deadline_seconds(self) -> float:
        return self.max_minutes * 60

    def elapsed(self, now: float) -> float:
        return now - self.start_time

    def exceeded(self, now: float) -> bool:
        return self.elapsed(now) > self.deadline_seconds


@dataclass
class MigrationResult:
    """Outcome of one migration run."""

    status: str  # "restore_requested" or "no_backup"
    source_backup_id: Optional[str] = None
    import_backup_id: Optional[str] = None
    import_name: Optional[str] = None
    start_time: Optional[float] = None
    end_time: Optional[float] = None
    duration_seconds: Optional[float] = None
