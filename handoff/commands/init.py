"""init command implementation - scaffold a session folder."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markup import escape

from ..config import ProjectConfig, config_path, write_config
from ..naming.frontmatter import build_default_frontmatter, inject_frontmatter
from ..naming.grammar import is_valid_tag, parse_filename, today_iso
from ..planning import InitPlan, InitResult
from ..session import list_markdown_files, session_dir
from ..templates import RECOMMENDED_TEMPLATES, REQUIRED_TEMPLATES, render_template


def compute_init_plan(
    project_dir: Path,
    session: str | None = None,
    tags: list[str] | None = None,
    topic: str | None = None,
    full: bool = False,
    today: str | None = None,
) -> InitPlan:
    """Work out which starter documents a session folder still needs."""
    today = today or today_iso()
    folder = session_dir(project_dir, session)

    existing_names = list_markdown_files(folder)
    taken = set()
    for name in existing_names:
        parsed = parse_filename(name)
        if parsed is not None:
            taken.add(parsed.sequence)

    templates = REQUIRED_TEMPLATES + (RECOMMENDED_TEMPLATES if full else ())
    plan = InitPlan(
        project_dir=project_dir,
        session_dir=folder,
        write_config=not config_path(project_dir).exists(),
    )
    session_label = session or "default"
    for template in templates:
        if template.sequence in taken:
            plan.existing.append(template.filename(today))
            continue
        body = render_template(template, project_dir.resolve().name, today, session_label)
        fm = build_default_frontmatter(template.sequence, today, tags, topic)
        plan.files[template.filename(today)] = inject_frontmatter(body, fm)
    return plan


def execute_init_plan(plan: InitPlan) -> InitResult:
    result = InitResult()
    plan.session_dir.mkdir(parents=True, exist_ok=True)
    for name, content in plan.files.items():
        path = plan.session_dir / name
        path.write_text(content, encoding="utf-8")
        result.created.add(path, len(content.encode("utf-8")))
    if plan.write_config:
        path = write_config(plan.project_dir, ProjectConfig())
        result.created.add(path, path.stat().st_size)
    return result


def run_init(
    project_dir: Path,
    session: str | None = None,
    tags: list[str] | None = None,
    topic: str | None = None,
    full: bool = False,
    dry_run: bool = False,
    today: str | None = None,
) -> int:
    """Scaffold handoff docs for a project.

    Returns:
        Exit code
    """
    console = Console()
    err = Console(stderr=True)

    bad_tags = [t for t in tags or [] if not is_valid_tag(t)]
    if bad_tags:
        err.print(f"Invalid tag(s): {escape(', '.join(bad_tags))}", style="bold red")
        err.print("Tags must be 2-50 characters of lowercase letters, digits and single hyphens", style="dim")
        return 1

    if not project_dir.is_dir():
        err.print(f"Project directory not found: {escape(str(project_dir))}", style="bold red")
        return 1

    try:
        plan = compute_init_plan(project_dir, session, tags, topic, full, today)
    except ValueError as e:
        err.print(escape(str(e)), style="bold red")
        return 1

    console.print(escape(plan.summary()))
    if dry_run:
        console.print("\n[bold]DRY RUN[/bold] - No changes made")
        return 0

    try:
        result = execute_init_plan(plan)
    except OSError as e:
        err.print(f"Could not scaffold {escape(str(plan.session_dir))}: {escape(str(e))}", style="bold red")
        return 1
    if result.created.files:
        result.log_to_audit(
            project_dir,
            "init",
            metadata={"session": session, "tags": tags or [], "full": full},
        )

    for name in plan.files:
        console.print(f"  [green]+[/green] {escape(name)}")
    for name in plan.existing:
        console.print(f"  [dim]= {escape(name)} (sequence already present)[/dim]")
    console.print(f"\n✓ Session folder ready: {escape(str(plan.session_dir))}", style="green")
    return 0
