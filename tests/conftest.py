"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

TODAY = "2026-02-20"


@pytest.fixture
def required_filenames() -> list[str]:
    """The six required documents, correctly named."""
    return [
        "00-MASTER_INDEX_2026-02-20.md",
        "01-PROJECT_STATE_2026-02-20.md",
        "02-CRITICAL_CONTEXT_2026-02-20.md",
        "03-TASK_TRACKER_2026-02-20.md",
        "04-SESSION_LOG_2026-02-20.md",
        "05-NEXT_STEPS_2026-02-20.md",
    ]


def _rich_document(title: str) -> str:
    """A document that scores well on every quality dimension."""
    findings = "\n".join(
        f"- Found {n} errors in `src/checkout/module_{n}.ts` during the route audit of the payment flow"
        for n in range(1, 21)
    )
    return "\n".join(
        [
            f"# {title}",
            "",
            "**Date:** 2026-02-20  ",
            "**Session:** checkout-refactor handoff  ",
            "**Status:** blocked on review  ",
            "**Updated:** 2026-02-21",
            "",
            "## READ FIRST",
            "",
            "See `00-MASTER_INDEX.md`, `01-PROJECT_STATE.md` and `02-CRITICAL_CONTEXT.md`.",
            "Then [the log](04-SESSION_LOG_2026-02-20.md) and [next steps](05-NEXT_STEPS_2026-02-20.md).",
            "",
            "## Execution Order",
            "",
            "1. EXECUTE the migration in phase 1",
            "2. VERIFY with the test suite",
            "",
            "```bash",
            "npx tsc --noEmit",
            "npm run lint",
            "```",
            "",
            "## Findings",
            "",
            "| Area | Severity | Count |",
            "|------|----------|-------|",
            "| routes | critical | 12 routes |",
            "| tests | warning | 40 tests |",
            "",
            findings,
            "",
            "Identified 3 duplicates across the checkout pages; all of them were analyzed in detail",
            "and the remaining work is listed in priority order in the task tracker for the next agent.",
            "",
        ]
    )


def _write_session(folder: Path, documents: dict[str, str]) -> Path:
    folder.mkdir(parents=True, exist_ok=True)
    for name, content in documents.items():
        (folder / name).write_text(content, encoding="utf-8")
    return folder


@pytest.fixture
def rich_document():
    """Builder for a document that scores well on every dimension."""
    return _rich_document


@pytest.fixture
def write_session():
    """Writer for a folder of named markdown documents."""
    return _write_session


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """An empty project with a docs/ folder."""
    (tmp_path / "docs").mkdir()
    return tmp_path


@pytest.fixture
def good_session(project_dir: Path, required_filenames: list[str]) -> Path:
    """docs/handoff with every required document, each well written."""
    _write_session(
        project_dir / "docs" / "handoff",
        {name: _rich_document(name.split("_")[0]) for name in required_filenames},
    )
    return project_dir


@pytest.fixture
def legacy_session(project_dir: Path) -> Path:
    """docs/handoff holding prefixed and bare legacy names."""
    _write_session(
        project_dir / "docs" / "handoff",
        {
            "CO-00-MASTER_INDEX_2026-01-01.md": "# Master Index\n",
            "OP-02-SESSION_LOG_2026-01-01.md": "# Session Log\n",
            "NEXT_STEPS.md": "# Next Steps\n",
            "ODD-NAME.md": "# Odd\n",
            "03-TASK_TRACKER_2026-02-20.md": "# Task Tracker\n",
        },
    )
    return project_dir
