"""
Audit log for commands that change files on disk.

Every mutating command (init, generate, migrate, tag-index) appends one JSON
line to docs/.handoff/audit.log describing what it created and removed, so a
later agent can see what touched the handoff folders and when.
"""

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .session import state_dir


@dataclass
class FileChanges:
    """Files touched by one side of an operation."""
    files: int = 0
    bytes: int = 0
    paths: list[str] = field(default_factory=list)

    def add(self, path: Path, size: int) -> None:
        self.files += 1
        self.bytes += size
        self.paths.append(str(path))


@dataclass
class AuditEntry:
    """A single audit log entry."""
    timestamp: str
    operation: str
    created: FileChanges
    removed: FileChanges
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "operation": self.operation,
            "created": asdict(self.created),
            "removed": asdict(self.removed),
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AuditEntry":
        return cls(
            timestamp=data["timestamp"],
            operation=data["operation"],
            created=FileChanges(**data.get("created", {})),
            removed=FileChanges(**data.get("removed", {})),
            metadata=data.get("metadata", {}),
        )


def get_audit_log_path(project_dir: Path) -> Path:
    return state_dir(project_dir) / "audit.log"


def log_operation(
    project_dir: Path,
    operation: str,
    created: FileChanges | None = None,
    removed: FileChanges | None = None,
    metadata: dict[str, Any] | None = None,
) -> AuditEntry:
    """
    Append an operation to the audit log.

    Args:
        project_dir: Project root (the log lives under its docs/ folder)
        operation: Command name, e.g. "migrate" or "init"
        created: Files written by the operation
        removed: Files renamed away or deleted by the operation
        metadata: Extra context such as session or backup location

    Returns:
        The entry that was written
    """
    entry = AuditEntry(
        timestamp=datetime.now(timezone.utc).isoformat(),
        operation=operation,
        created=created or FileChanges(),
        removed=removed or FileChanges(),
        metadata=metadata or {},
    )

    log_path = get_audit_log_path(project_dir)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    with log_path.open("a", encoding="utf-8") as f:
        f.write(json.dumps(entry.to_dict()) + "\n")

    return entry


def read_audit_log(project_dir: Path, last_n: int | None = None) -> list[AuditEntry]:
    """Read entries, oldest first. Malformed lines are skipped."""
    log_path = get_audit_log_path(project_dir)
    if not log_path.exists():
        return []

    entries = []
    with log_path.open("r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                entries.append(AuditEntry.from_dict(json.loads(line)))
            except (json.JSONDecodeError, KeyError, TypeError):
                continue

    if last_n is not None:
        return entries[-last_n:]
    return entries
