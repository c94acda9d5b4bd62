"""migrate command implementation - rename legacy docs to canonical names."""

from __future__ import annotations

import logging
import shutil
from datetime import datetime, timezone
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..errors import MigrationError
from ..naming.frontmatter import build_default_frontmatter, inject_frontmatter, parse_frontmatter
from ..naming.grammar import parse_filename, today_iso
from ..naming.migration import plan_migration
from ..planning import MigrationPlan, MigrationResult
from ..session import list_markdown_files, session_dir, state_dir

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# compute (pure, no writes) / execute (writes)
# -----------------------------------------------------------------------------


def compute_migration_plan(
    project_dir: Path,
    session: str | None = None,
    to_session: str | None = None,
    today: str | None = None,
) -> MigrationPlan:
    """Work out every rename before anything on disk changes."""
    source = session_dir(project_dir, session)
    target = session_dir(project_dir, to_session) if to_session is not None else source
    today = today or today_iso()
    # Names already in a separate destination are off limits
    taken = list_markdown_files(target) if target != source else []

    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    backup = state_dir(project_dir) / "backups" / f"{stamp}-{source.name}"

    return MigrationPlan(
        project_dir=project_dir,
        source_dir=source,
        target_dir=target,
        backup_dir=backup,
        actions=plan_migration(list_markdown_files(source), today, taken=taken),
    )


def _backup(plan: MigrationPlan, result: MigrationResult) -> None:
    plan.backup_dir.mkdir(parents=True, exist_ok=True)
    for action in plan.renames:
        src = plan.source_dir / action.old_name
        shutil.copy2(src, plan.backup_dir / action.old_name)
        result.backed_up += 1


def _ensure_frontmatter(path: Path, content: str, tags: list[str]) -> None:
    if parse_frontmatter(content).frontmatter is not None:
        return
    name = parse_filename(path.name)
    if name is None:
        return
    fm = build_default_frontmatter(name.sequence, name.date, tags)
    path.write_text(inject_frontmatter(content, fm), encoding="utf-8")


def _preflight(plan: MigrationPlan) -> dict[str, str]:
    """Check every rename can go through; return source contents by name.

    Runs before the backup so a doomed migration leaves the folder untouched.
    """
    contents: dict[str, str] = {}
    for action in plan.renames:
        dest = plan.target_dir / action.new_name
        if dest.exists():
            raise MigrationError(f"Refusing to overwrite existing file {dest}")
        src = plan.source_dir / action.old_name
        try:
            contents[action.old_name] = src.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise MigrationError(f"{src} is not valid UTF-8 ({e.reason})") from e
    return contents


def execute_migration_plan(plan: MigrationPlan, tags: list[str] | None = None) -> MigrationResult:
    """Back up every source file, then apply the planned renames.

    Files are renamed when source and target folders are the same, and
    copied then deleted otherwise. A rename never replaces an existing file.
    """
    result = MigrationResult()
    if not plan.renames:
        return result

    contents = _preflight(plan)
    _backup(plan, result)
    plan.target_dir.mkdir(parents=True, exist_ok=True)

    for action in plan.renames:
        src = plan.source_dir / action.old_name
        dest = plan.target_dir / action.new_name
        if dest.exists():
            raise MigrationError(f"Refusing to overwrite existing file {dest}")

        size = src.stat().st_size
        if plan.in_place:
            src.rename(dest)
        else:
            shutil.copy2(src, dest)
            src.unlink()
        logger.debug("Migrated %s -> %s", src, dest)

        _ensure_frontmatter(dest, contents[action.old_name], tags or [])
        result.removed.add(src, size)
        result.created.add(dest, dest.stat().st_size)
        result.renamed += 1

    return result


# -----------------------------------------------------------------------------
# CLI entry
# -----------------------------------------------------------------------------


def _print_plan(console: Console, plan: MigrationPlan) -> None:
    table = Table(title="Migration Plan")
    table.add_column("Action", style="bold")
    table.add_column("Current name", style="cyan")
    table.add_column("New name / reason")

    styles = {"rename": "green", "skip": "dim", "manual": "yellow"}
    for action in plan.actions:
        detail = action.new_name if action.action == "rename" else action.reason
        table.add_row(
            f"[{styles[action.action]}]{action.action}[/{styles[action.action]}]",
            escape(action.old_name),
            escape(detail or ""),
        )
    console.print(table)
    console.print(escape(plan.summary()))


def run_migrate(
    project_dir: Path,
    session: str | None = None,
    to_session: str | None = None,
    tags: list[str] | None = None,
    dry_run: bool = False,
    today: str | None = None,
) -> int:
    """Migrate a session folder's documents to canonical names.

    Args:
        project_dir: Project root containing docs/
        session: Session slug to migrate (None = default folder)
        to_session: Destination session slug (None = migrate in place)
        tags: Tags for frontmatter injected into migrated files
        dry_run: Print the plan and stop
        today: Date stamped into new names (defaults to today)

    Returns:
        Exit code (0 = success, 1 = error or files needing manual review)
    """
    console = Console()
    err = Console(stderr=True)

    try:
        plan = compute_migration_plan(project_dir, session, to_session, today)
    except ValueError as e:
        err.print(escape(str(e)), style="bold red")
        return 1

    if not plan.source_dir.is_dir():
        err.print(f"Directory not found: {escape(str(plan.source_dir))}", style="bold red")
        return 1
    if not plan.actions:
        err.print(f"No markdown files in {escape(str(plan.source_dir))}", style="bold red")
        return 1

    # The plan is always shown before anything is touched
    _print_plan(console, plan)

    if dry_run:
        console.print("\n[bold]DRY RUN[/bold] - No changes made")
        return 0

    try:
        result = execute_migration_plan(plan, tags=tags)
    except (OSError, MigrationError) as e:
        err.print(f"Migration failed: {escape(str(e))}", style="bold red")
        if plan.backup_dir.exists():
            err.print(f"Originals are backed up in {escape(str(plan.backup_dir))}", style="yellow")
        return 1

    if result.renamed:
        result.log_to_audit(
            project_dir,
            "migrate",
            metadata={
                "source": str(plan.source_dir),
                "target": str(plan.target_dir),
                "backup": str(plan.backup_dir),
                "manual": [a.old_name for a in plan.manual],
            },
        )
        console.print(
            f"\n✓ Migrated {result.renamed} file(s); originals backed up to {escape(str(plan.backup_dir))}",
            style="green",
        )
    else:
        console.print("\nNothing to rename.", style="dim")

    if plan.manual:
        console.print(f"⚠ {len(plan.manual)} file(s) need manual review", style="yellow")
        return 1
    return 0
