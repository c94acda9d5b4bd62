"""validate command implementation - quality scoring for session folders."""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from ..models import ValidationIssue
from ..naming.validator import check_frontmatter
from ..quality.scorer import (
    PASS_THRESHOLD,
    QualityReport,
    rating_for,
    recommendations_for,
    score_folder,
    weak_dimensions,
)
from ..session import find_session_folders, list_markdown_files, session_dir
from .report import print_issues, score_bar


def validate_folder(folder: Path) -> tuple[QualityReport, list[ValidationIssue]]:
    """Score a folder and collect frontmatter issues for its documents.

    Files that are not valid UTF-8 are reported as errors and left unscored.
    """
    documents = []
    frontmatter_issues: list[ValidationIssue] = []
    for name in list_markdown_files(folder):
        try:
            content = (folder / name).read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            frontmatter_issues.append(
                ValidationIssue("error", "encoding", f"Not valid UTF-8 ({e.reason} at byte {e.start})", file=name)
            )
            continue
        documents.append((name, content))
        frontmatter_issues.extend(check_frontmatter(name, content))
    return score_folder(folder.name, documents), frontmatter_issues


def _folder_passed(report: QualityReport, issues: list[ValidationIssue]) -> bool:
    return report.passed and not any(i.severity == "error" for i in issues)


def run_validate(
    project_dir: Path,
    session: str | None = None,
    all_sessions: bool = False,
    detailed: bool = False,
    output_json: bool = False,
) -> int:
    """Score handoff documents and run folder-level checks.

    Args:
        project_dir: Project root containing docs/
        session: Session slug (None = default docs/handoff folder)
        all_sessions: Validate every handoff* folder under docs/
        detailed: Print per-file improvement hints and recommendations
        output_json: Print a JSON report instead of the console report

    Returns:
        Exit code (0 = every folder meets the threshold with no errors)
    """
    console = Console()
    err = Console(stderr=True)

    if all_sessions:
        folders = find_session_folders(project_dir)
        if not folders:
            err.print(f"No handoff folders found under {escape(str(project_dir / 'docs'))}", style="bold red")
            return 1
    else:
        try:
            folders = [session_dir(project_dir, session)]
        except ValueError as e:
            err.print(escape(str(e)), style="bold red")
            return 1

    all_passed = True
    json_reports = []
    for folder in folders:
        if not folder.is_dir():
            err.print(f"Directory not found: {escape(str(folder))}", style="bold red")
            all_passed = False
            continue

        try:
            report, fm_issues = validate_folder(folder)
        except OSError as e:
            err.print(f"Could not read {escape(str(folder))}: {escape(str(e))}", style="bold red")
            all_passed = False
            continue
        if not report.files and not fm_issues:
            err.print(f"No markdown files in {escape(str(folder))}", style="bold red")
            all_passed = False
            continue

        issues = report.folder_issues + fm_issues
        passed = _folder_passed(report, issues)
        all_passed = all_passed and passed

        if output_json:
            data = report.to_dict()
            data["frontmatter_issues"] = [
                {"severity": i.severity, "rule": i.rule, "message": i.message, "file": i.file} for i in fm_issues
            ]
            data["passed"] = passed
            json_reports.append(data)
        else:
            _print_report(console, report, issues, passed, detailed)

    if output_json:
        print(json.dumps(json_reports, indent=2))

    return 0 if all_passed else 1


def _print_report(
    console: Console,
    report: QualityReport,
    issues: list[ValidationIssue],
    passed: bool,
    detailed: bool,
) -> None:
    console.print(f"\n[bold blue]Handoff Documentation Quality Report:[/bold blue] {escape(report.folder)}\n")

    for f in report.files:
        icon, label = rating_for(f.score.total)
        console.print(f"  {f.score.total:3d}% {score_bar(f.score.total)} [blue]{escape(f.filename)}[/blue]")
        console.print(f"         {icon} {label}")
        if detailed:
            weak = weak_dimensions(f.score.breakdown)
            if weak:
                console.print(f"         [dim]Improve: {', '.join(weak)}[/dim]")

    if issues:
        console.print("\n[cyan]Folder Analysis:[/cyan]")
        print_issues(console, issues)

    icon, label = rating_for(report.overall)
    console.print("\n" + "━" * 50)
    console.print(f"[bold]Overall Score: {report.overall}%[/bold] {score_bar(report.overall)}")
    console.print(f"{icon} {label}")

    if passed:
        console.print("✓ Handoff docs meet quality standards", style="bold green")
    else:
        console.print(
            f"✗ Handoff docs need improvement before handoff (threshold {PASS_THRESHOLD}%)",
            style="bold red",
        )

    if detailed:
        low = [f for f in report.files if f.score.total < PASS_THRESHOLD]
        if low:
            console.print("\n[cyan]Recommendations:[/cyan]")
        for f in low:
            console.print(f"  [yellow]→ {escape(f.filename)}[/yellow]")
            for tip in recommendations_for(f.score.breakdown):
                console.print(f"    • {escape(tip)}")
