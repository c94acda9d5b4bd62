"""generate command implementation - write the PROJECT_STATE document."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markup import escape

from .. import get_version_string
from ..config import load_config
from ..errors import ConfigError
from ..gates import GateResult, Runner, recent_commits, run_command, run_gates
from ..naming.frontmatter import build_default_frontmatter, inject_frontmatter, parse_frontmatter
from ..naming.grammar import parse_filename, today_iso
from ..planning import FileWritePlan, write_file
from ..session import count_lines, detect_tech_stack, estimate_tokens, list_markdown_files, session_dir
from ..templates import get_template

STATE_SEQUENCE = 1
COMMIT_COUNT = 10


def _format_table(headers: list[str], rows: list[list[str]]) -> list[str]:
    lines = [f"| {' | '.join(headers)} |", f"|{'|'.join('------' for _ in headers)}|"]
    lines.extend(f"| {' | '.join(row)} |" for row in rows)
    return lines


def _existing_state_file(folder: Path) -> Path | None:
    for name in list_markdown_files(folder):
        parsed = parse_filename(name)
        if parsed and parsed.sequence == STATE_SEQUENCE:
            return folder / name
    return None


def render_project_state(
    project_dir: Path,
    session: str | None,
    today: str,
    gates: list[GateResult],
    commits: list[str],
    folder: Path,
) -> str:
    """Markdown body of the generated project state document."""
    lines = [
        f"# Project State: {project_dir.resolve().name}",
        "",
        f"**Generated:** {today}  ",
        f"**Session:** {session or 'default'}  ",
        f"**Generator:** {get_version_string()}",
        "",
        "## Tech Stack",
        "",
    ]
    lines += [f"- {item}" for item in detect_tech_stack(project_dir)]

    lines += ["", "## Quality Gates", ""]
    if gates:
        rows = [
            [
                g.name,
                "✅ pass" if g.passed else "❌ fail",
                str(g.error_count),
                "yes" if g.required else "no",
                f"`{g.command}`",
            ]
            for g in gates
        ]
        lines += _format_table(["Gate", "Status", "Errors", "Required", "Command"], rows)
        blocking = [g.name for g in gates if g.required and not g.passed]
        if blocking:
            lines += ["", f"**Status:** blocked by required gate(s): {', '.join(blocking)}"]
    else:
        lines.append("No gates enabled.")

    lines += ["", "## Recent Commits", ""]
    lines += [f"- `{c}`" for c in commits] if commits else ["No git history available."]

    lines += ["", "## Document Inventory", ""]
    rows = []
    for name in list_markdown_files(folder):
        path = folder / name
        rows.append([f"`{name}`", str(count_lines(path)), str(estimate_tokens(path))])
    if rows:
        lines += _format_table(["Document", "Lines", "Est. tokens"], rows)
    else:
        lines.append("No documents yet.")

    lines.append("")
    return "\n".join(lines)


def compute_generate_plan(
    project_dir: Path,
    session: str | None = None,
    runner: Runner = run_command,
    today: str | None = None,
) -> FileWritePlan:
    """Run gates and git log, and build the document to write."""
    today = today or today_iso()
    folder = session_dir(project_dir, session)
    config = load_config(project_dir)

    gates = run_gates(config, project_dir, runner=runner)
    commits = recent_commits(project_dir, COMMIT_COUNT, runner=runner)

    existing = _existing_state_file(folder)
    tags: list[str] = []
    topic = None
    if existing is not None:
        fm = parse_frontmatter(existing.read_text(encoding="utf-8", errors="replace")).frontmatter
        if fm is not None:
            tags, topic = fm.tags, fm.topic

    body = render_project_state(project_dir, session, today, gates, commits, folder)
    content = inject_frontmatter(body, build_default_frontmatter(STATE_SEQUENCE, today, tags, topic))
    template = get_template(STATE_SEQUENCE)

    return FileWritePlan(
        project_dir=project_dir,
        output_path=folder / template.filename(today),
        content=content,
        replaces=existing,
    )


def run_generate(
    project_dir: Path,
    session: str | None = None,
    dry_run: bool = False,
    runner: Runner = run_command,
    today: str | None = None,
) -> int:
    """Generate the PROJECT_STATE document for a session.

    Gate failures are recorded in the document, not treated as errors.

    Returns:
        Exit code
    """
    console = Console()
    err = Console(stderr=True)

    if not project_dir.is_dir():
        err.print(f"Project directory not found: {escape(str(project_dir))}", style="bold red")
        return 1

    err.print("Running quality gates...", style="dim")
    try:
        plan = compute_generate_plan(project_dir, session, runner=runner, today=today)
    except (ConfigError, ValueError) as e:
        err.print(escape(str(e)), style="bold red")
        return 1

    console.print(escape(plan.summary()))
    if dry_run:
        console.print("\n[bold]DRY RUN[/bold] - No changes made")
        return 0

    try:
        result = write_file(plan)
    except OSError as e:
        err.print(f"Could not write {escape(str(plan.output_path))}: {escape(str(e))}", style="bold red")
        return 1
    result.log_to_audit(project_dir, "generate", metadata={"session": session})
    console.print(f"✓ Wrote {escape(str(plan.output_path))}", style="green")
    return 0
