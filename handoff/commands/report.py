"""Shared console rendering for issue lists and scores."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

from ..models import ValidationIssue

SEVERITY_ORDER = ("error", "warning", "suggestion")

_STYLE = {
    "error": ("✗", "red"),
    "warning": ("⚠", "yellow"),
    "suggestion": ("→", "dim"),
}

_HEADINGS = {
    "error": "Errors",
    "warning": "Warnings",
    "suggestion": "Suggestions",
}


def print_issues(console: Console, issues: list[ValidationIssue]) -> None:
    """Print issues grouped by severity: errors, then warnings, then suggestions."""
    for severity in SEVERITY_ORDER:
        group = [i for i in issues if i.severity == severity]
        if not group:
            continue
        icon, style = _STYLE[severity]
        console.print(f"\n[bold]{_HEADINGS[severity]} ({len(group)}):[/bold]")
        for issue in group:
            loc = f"{escape(issue.file)}: " if issue.file else ""
            console.print(f"  [{style}]{icon}[/{style}] [dim]\\[{issue.rule}][/dim] {loc}{escape(issue.message)}")


def score_bar(score: int) -> str:
    """20-cell bar coloured by score band, as rich markup."""
    filled = round(score / 5)
    bar = "█" * filled + "░" * (20 - filled)
    if score >= 80:
        style = "green"
    elif score >= 70:
        style = "yellow"
    else:
        style = "red"
    return f"[{style}]{bar}[/{style}]"
