"""tag-index command implementation - aggregate frontmatter tags across sessions."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..naming.frontmatter import parse_frontmatter
from ..naming.grammar import is_valid_tag, today_iso
from ..planning import FileWritePlan, write_file
from ..session import docs_dir, find_session_folders, list_markdown_files

TAG_INDEX_FILENAME = "TAG_INDEX.md"


@dataclass
class TaggedDocument:
    session: str
    filename: str
    topic: str | None = None


@dataclass
class TagIndex:
    """Tags found across every session folder."""

    tags: dict[str, list[TaggedDocument]] = field(default_factory=dict)
    untagged: list[TaggedDocument] = field(default_factory=list)
    invalid: list[tuple[str, TaggedDocument]] = field(default_factory=list)
    sessions: list[str] = field(default_factory=list)

    @property
    def document_count(self) -> int:
        seen = {(d.session, d.filename) for docs in self.tags.values() for d in docs}
        seen.update((d.session, d.filename) for d in self.untagged)
        return len(seen)


def build_tag_index(project_dir: Path) -> TagIndex:
    """Re-derive the tag index by reading every document's frontmatter."""
    by_tag: dict[str, list[TaggedDocument]] = defaultdict(list)
    index = TagIndex()

    for folder in find_session_folders(project_dir):
        index.sessions.append(folder.name)
        for name in list_markdown_files(folder):
            # Only the frontmatter matters here, so stray non-UTF-8 bytes are tolerated
            content = (folder / name).read_text(encoding="utf-8", errors="replace")
            fm = parse_frontmatter(content).frontmatter
            doc = TaggedDocument(session=folder.name, filename=name, topic=fm.topic if fm else None)
            if fm is None or not fm.tags:
                index.untagged.append(doc)
                continue
            for tag in dict.fromkeys(fm.tags):
                if is_valid_tag(tag):
                    by_tag[tag].append(doc)
                else:
                    index.invalid.append((tag, doc))

    index.tags = dict(sorted(by_tag.items()))
    return index


def render_tag_index(index: TagIndex, today: str) -> str:
    lines = [
        "# Tag Index",
        "",
        f"**Generated:** {today}  ",
        f"**Sessions:** {len(index.sessions)}  ",
        f"**Documents:** {index.document_count}  ",
        f"**Tags:** {len(index.tags)}",
        "",
        "## Summary",
        "",
        "| Tag | Documents | Sessions |",
        "|-----|-----------|----------|",
    ]
    for tag, docs in index.tags.items():
        sessions = sorted({d.session for d in docs})
        lines.append(f"| `{tag}` | {len(docs)} | {', '.join(sessions)} |")

    for tag, docs in index.tags.items():
        lines += ["", f"## {tag}", ""]
        for d in docs:
            topic = f" ({d.topic})" if d.topic else ""
            lines.append(f"- [{d.filename}]({d.session}/{d.filename}){topic}")

    if index.untagged:
        lines += ["", "## Untagged", ""]
        lines += [f"- [{d.filename}]({d.session}/{d.filename})" for d in index.untagged]

    lines.append("")
    return "\n".join(lines)


def run_tag_index(project_dir: Path, dry_run: bool = False, today: str | None = None) -> int:
    """Rebuild docs/TAG_INDEX.md from every session folder.

    Returns:
        Exit code
    """
    console = Console()
    err = Console(stderr=True)

    if not docs_dir(project_dir).is_dir():
        err.print(f"Docs directory not found: {escape(str(docs_dir(project_dir)))}", style="bold red")
        return 1

    index = build_tag_index(project_dir)
    if not index.sessions:
        err.print("No handoff folders found", style="bold red")
        return 1

    table = Table(title="Tags")
    table.add_column("Tag", style="cyan")
    table.add_column("Documents", justify="right")
    table.add_column("Sessions")
    for tag, docs in index.tags.items():
        table.add_row(tag, str(len(docs)), ", ".join(sorted({d.session for d in docs})))
    console.print(table)

    for tag, doc in index.invalid:
        err.print(
            f"⚠ Skipped invalid tag '{escape(tag)}' in {escape(doc.session)}/{escape(doc.filename)}",
            style="yellow",
        )

    plan = FileWritePlan(
        project_dir=project_dir,
        output_path=docs_dir(project_dir) / TAG_INDEX_FILENAME,
        content=render_tag_index(index, today or today_iso()),
    )
    if dry_run:
        console.print(escape(plan.summary()))
        console.print("\n[bold]DRY RUN[/bold] - No changes made")
        return 0

    try:
        result = write_file(plan)
    except OSError as e:
        err.print(f"Could not write {escape(str(plan.output_path))}: {escape(str(e))}", style="bold red")
        return 1
    result.log_to_audit(project_dir, "tag-index", metadata={"tags": len(index.tags)})
    console.print(f"✓ Wrote {escape(str(plan.output_path))}", style="green")
    return 0
