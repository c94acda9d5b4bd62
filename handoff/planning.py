"""
Plan/result objects for commands that write to disk.

Each writing command first computes a plan (pure, printable, usable for
--dry-run) and then executes it, returning a result that feeds the audit log.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .audit_log import FileChanges, log_operation
from .models import MigrationAction


@dataclass
class BasePlan(ABC):
    """Base class for operation plans."""
    project_dir: Path

    @abstractmethod
    def summary(self) -> str:
        """Human-readable summary of what would be done."""
        ...


@dataclass
class BaseResult:
    """Base class for operation results."""
    created: FileChanges = field(default_factory=FileChanges)
    removed: FileChanges = field(default_factory=FileChanges)

    def log_to_audit(self, project_dir: Path, operation: str, metadata: dict[str, Any] | None = None) -> None:
        log_operation(project_dir, operation, self.created, self.removed, metadata or {})


# Migration Plan/Result
@dataclass
class MigrationPlan(BasePlan):
    """Plan for renaming a folder's files to canonical names."""
    source_dir: Path
    target_dir: Path
    backup_dir: Path
    actions: list[MigrationAction] = field(default_factory=list)

    @property
    def renames(self) -> list[MigrationAction]:
        return [a for a in self.actions if a.action == "rename"]

    @property
    def manual(self) -> list[MigrationAction]:
        return [a for a in self.actions if a.action == "manual"]

    @property
    def skipped(self) -> list[MigrationAction]:
        return [a for a in self.actions if a.action == "skip"]

    @property
    def in_place(self) -> bool:
        return self.source_dir.resolve() == self.target_dir.resolve()

    def summary(self) -> str:
        lines = [
            "Migration Plan",
            f"  Source: {self.source_dir}",
            f"  Target: {self.target_dir}{' (in place)' if self.in_place else ''}",
            f"  Rename: {len(self.renames)}",
            f"  Skip (already canonical): {len(self.skipped)}",
            f"  Manual review: {len(self.manual)}",
        ]
        if self.renames:
            lines.append(f"  Backup: {self.backup_dir}")
        return "\n".join(lines)


@dataclass
class MigrationResult(BaseResult):
    renamed: int = 0
    backed_up: int = 0


# Init Plan/Result
@dataclass
class InitPlan(BasePlan):
    """Plan for scaffolding a session folder."""
    session_dir: Path
    files: dict[str, str] = field(default_factory=dict)  # filename -> content
    existing: list[str] = field(default_factory=list)
    write_config: bool = False

    def summary(self) -> str:
        lines = [
            "Init Plan",
            f"  Session folder: {self.session_dir}",
            f"  Documents to create: {len(self.files)}",
        ]
        if self.existing:
            lines.append(f"  Already present (kept): {len(self.existing)}")
        if self.write_config:
            lines.append("  Default config will be written")
        return "\n".join(lines)


@dataclass
class InitResult(BaseResult):
    pass


# Generic single-file write
@dataclass
class FileWritePlan(BasePlan):
    """Plan for writing one generated file."""
    output_path: Path
    content: str = ""
    replaces: Path | None = None  # older file this one supersedes

    def summary(self) -> str:
        lines = [
            "File Write Plan",
            f"  Target: {self.output_path}",
            f"  Size: {len(self.content.encode('utf-8'))} bytes",
        ]
        if self.replaces and self.replaces != self.output_path:
            lines.append(f"  Replaces: {self.replaces.name}")
        return "\n".join(lines)


@dataclass
class FileWriteResult(BaseResult):
    path: Path | None = None


def write_file(plan: FileWritePlan) -> FileWriteResult:
    """Execute a FileWritePlan."""
    result = FileWriteResult(path=plan.output_path)
    plan.output_path.parent.mkdir(parents=True, exist_ok=True)
    if plan.output_path.exists():
        result.removed.add(plan.output_path, plan.output_path.stat().st_size)
    plan.output_path.write_text(plan.content, encoding="utf-8")
    result.created.add(plan.output_path, len(plan.content.encode("utf-8")))
    if plan.replaces and plan.replaces != plan.output_path and plan.replaces.exists():
        result.removed.add(plan.replaces, plan.replaces.stat().st_size)
        plan.replaces.unlink()
    return result
