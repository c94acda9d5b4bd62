"""generate command: PROJECT_STATE from gates, git log and inventory."""

import json
from pathlib import Path

from handoff.audit_log import read_audit_log
from handoff.commands.generate import compute_generate_plan, run_generate
from handoff.config import config_path
from handoff.errors import CommandFailed
from handoff.gates import CommandOutput
from handoff.naming.frontmatter import parse_frontmatter

TODAY = "2026-02-20"


def fake_runner(command: str, cwd: Path, timeout: float) -> CommandOutput:
    if command.startswith("git log"):
        return CommandOutput(stdout="abc123 Add checkout\ndef456 Fix refund\n", stderr="")
    if command == "npm run build":
        raise CommandFailed(command, "exited with code 1", stdout="error: build broke", returncode=1)
    return CommandOutput(stdout="ok", stderr="")


def test_generate_writes_project_state(project_dir: Path, capsys) -> None:
    assert run_generate(project_dir, runner=fake_runner, today=TODAY) == 0

    path = project_dir / "docs" / "handoff" / "01-PROJECT_STATE_2026-02-20.md"
    parsed = parse_frontmatter(path.read_text(encoding="utf-8"))
    assert parsed.frontmatter.sequence == 1
    assert parsed.frontmatter.category == "context"

    body = parsed.body
    assert body.startswith(f"# Project State: {project_dir.name}")
    assert "| typecheck | ✅ pass |" in body
    assert "| build | ❌ fail | 1 | yes |" in body
    assert "blocked by required gate(s): build" in body
    assert "- `abc123 Add checkout`" in body

    assert [e.operation for e in read_audit_log(project_dir)] == ["generate"]


def test_generate_lists_existing_documents(project_dir: Path, write_session) -> None:
    write_session(project_dir / "docs" / "handoff", {"00-MASTER_INDEX_2026-02-20.md": "# Index\n"})
    plan = compute_generate_plan(project_dir, runner=fake_runner, today=TODAY)
    assert "`00-MASTER_INDEX_2026-02-20.md`" in plan.content


def test_generate_replaces_older_state_and_keeps_tags(project_dir: Path, write_session) -> None:
    old = '---\ntags: [checkout]\ntopic: "Payments"\nsequence: 1\ncategory: "context"\n---\n# Old state\n'
    folder = write_session(project_dir / "docs" / "handoff", {"01-PROJECT_STATE_2026-02-01.md": old})

    run_generate(project_dir, runner=fake_runner, today=TODAY)

    assert not (folder / "01-PROJECT_STATE_2026-02-01.md").exists()
    fm = parse_frontmatter((folder / "01-PROJECT_STATE_2026-02-20.md").read_text(encoding="utf-8")).frontmatter
    assert fm.tags == ["checkout"]
    assert fm.topic == "Payments"


def test_generate_uses_configured_gates(project_dir: Path) -> None:
    config_path(project_dir).write_text(json.dumps({"test": {"command": "pytest -q", "required": True}}), encoding="utf-8")
    calls: list[str] = []

    def runner(command: str, cwd: Path, timeout: float) -> CommandOutput:
        calls.append(command)
        return CommandOutput(stdout="", stderr="")

    plan = compute_generate_plan(project_dir, runner=runner, today=TODAY)
    assert calls[0] == "pytest -q"
    assert "| test | ✅ pass | 0 | yes |" in plan.content
    assert "No git history available." in plan.content


def test_generate_session_folder(project_dir: Path) -> None:
    run_generate(project_dir, session="checkout", runner=fake_runner, today=TODAY)
    assert (project_dir / "docs" / "handoff-checkout" / "01-PROJECT_STATE_2026-02-20.md").exists()


def test_generate_dry_run(project_dir: Path, capsys) -> None:
    assert run_generate(project_dir, dry_run=True, runner=fake_runner, today=TODAY) == 0
    assert not (project_dir / "docs" / "handoff").exists()
    assert "DRY RUN" in capsys.readouterr().out


def test_generate_bad_config(project_dir: Path, capsys) -> None:
    config_path(project_dir).write_text("{oops", encoding="utf-8")
    assert run_generate(project_dir, runner=fake_runner, today=TODAY) == 1
    assert "invalid" in capsys.readouterr().err
