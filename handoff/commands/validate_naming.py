"""validate:naming command implementation."""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from ..naming.validator import validate_naming_directory
from ..session import session_dir
from .report import print_issues


def run_validate_naming(project_dir: Path, session: str | None = None, output_json: bool = False) -> int:
    """Check a session folder against the naming convention.

    Returns:
        Exit code (0 = no errors, 1 = at least one error)
    """
    console = Console()
    err = Console(stderr=True)

    try:
        folder = session_dir(project_dir, session)
    except ValueError as e:
        err.print(escape(str(e)), style="bold red")
        return 1

    err.print(f"Validating naming in {escape(str(folder))}...", style="dim")
    result = validate_naming_directory(folder)

    if output_json:
        print(json.dumps({"folder": str(folder), **result.to_dict()}, indent=2))
        return 0 if result.passed else 1

    console.print(f"\n[bold cyan]Naming Validation:[/bold cyan] {escape(folder.name)}")
    print_issues(console, result.issues)

    console.print(
        f"\nScore: [bold]{result.score}[/bold]/100  "
        f"(errors: {result.errors}, warnings: {result.warnings}, suggestions: {result.suggestions})"
    )
    if result.passed:
        console.print("✓ Naming convention satisfied", style="bold green")
        return 0
    console.print("✗ Naming convention violated", style="bold red")
    return 1
