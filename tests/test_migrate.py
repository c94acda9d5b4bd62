"""migrate command: plan, backup, rename and frontmatter injection."""

from pathlib import Path

import pytest

from handoff.audit_log import read_audit_log
from handoff.commands.migrate import compute_migration_plan, execute_migration_plan, run_migrate
from handoff.errors import MigrationError
from handoff.naming.frontmatter import parse_frontmatter
from handoff.naming.migration import DUPLICATE_REASON

TODAY = "2026-02-20"


def _names(folder: Path) -> list[str]:
    return sorted(p.name for p in folder.iterdir() if p.is_file())


def test_plan_is_computed_without_touching_files(legacy_session: Path) -> None:
    folder = legacy_session / "docs" / "handoff"
    before = _names(folder)

    plan = compute_migration_plan(legacy_session, today=TODAY)

    assert _names(folder) == before
    assert plan.in_place
    assert {a.old_name for a in plan.renames} == {
        "CO-00-MASTER_INDEX_2026-01-01.md",
        "OP-02-SESSION_LOG_2026-01-01.md",
        "NEXT_STEPS.md",
    }
    assert [a.old_name for a in plan.manual] == ["ODD-NAME.md"]
    assert [a.old_name for a in plan.skipped] == ["03-TASK_TRACKER_2026-02-20.md"]


def test_migrate_in_place(legacy_session: Path, capsys) -> None:
    folder = legacy_session / "docs" / "handoff"

    # ODD-NAME.md still needs a human, so the run reports failure
    assert run_migrate(legacy_session, tags=["checkout"], today=TODAY) == 1

    assert _names(folder) == [
        "00-MASTER_INDEX_2026-02-20.md",
        "03-TASK_TRACKER_2026-02-20.md",
        "04-SESSION_LOG_2026-02-20.md",
        "05-NEXT_STEPS_2026-02-20.md",
        "ODD-NAME.md",
    ]
    out = capsys.readouterr().out
    assert "Migrated 3 file(s)" in out
    assert "need manual review" in out


def test_migrated_files_get_frontmatter(legacy_session: Path) -> None:
    run_migrate(legacy_session, tags=["checkout"], today=TODAY)
    content = (legacy_session / "docs" / "handoff" / "04-SESSION_LOG_2026-02-20.md").read_text(encoding="utf-8")
    parsed = parse_frontmatter(content)
    assert parsed.frontmatter.sequence == 4
    assert parsed.frontmatter.category == "session"
    assert parsed.frontmatter.tags == ["checkout"]
    assert parsed.body == "# Session Log\n"


def test_existing_frontmatter_is_kept(project_dir: Path, write_session) -> None:
    header = '---\ntags: [mine]\nsequence: 0\ncategory: "context"\n---\n# Index\n'
    folder = write_session(project_dir / "docs" / "handoff", {"MASTER_INDEX.md": header})
    run_migrate(project_dir, tags=["other"], today=TODAY)
    assert (folder / "00-MASTER_INDEX_2026-02-20.md").read_text(encoding="utf-8") == header


def test_originals_are_backed_up(legacy_session: Path) -> None:
    run_migrate(legacy_session, today=TODAY)
    backups = list((legacy_session / "docs" / ".handoff" / "backups").iterdir())
    assert len(backups) == 1
    assert _names(backups[0]) == [
        "CO-00-MASTER_INDEX_2026-01-01.md",
        "NEXT_STEPS.md",
        "OP-02-SESSION_LOG_2026-01-01.md",
    ]
    assert (backups[0] / "NEXT_STEPS.md").read_text(encoding="utf-8") == "# Next Steps\n"


def test_migration_is_audited(legacy_session: Path) -> None:
    run_migrate(legacy_session, today=TODAY)
    entries = read_audit_log(legacy_session)
    assert [e.operation for e in entries] == ["migrate"]
    assert entries[0].created.files == 3
    assert entries[0].removed.files == 3
    assert entries[0].metadata["manual"] == ["ODD-NAME.md"]


def test_dry_run_changes_nothing(legacy_session: Path, capsys) -> None:
    folder = legacy_session / "docs" / "handoff"
    before = _names(folder)
    assert run_migrate(legacy_session, dry_run=True, today=TODAY) == 0
    assert _names(folder) == before
    assert not (legacy_session / "docs" / ".handoff").exists()
    assert "DRY RUN" in capsys.readouterr().out


def test_migrate_to_another_session(legacy_session: Path) -> None:
    run_migrate(legacy_session, to_session="checkout", today=TODAY)
    target = legacy_session / "docs" / "handoff-checkout"
    assert _names(target) == [
        "00-MASTER_INDEX_2026-02-20.md",
        "04-SESSION_LOG_2026-02-20.md",
        "05-NEXT_STEPS_2026-02-20.md",
    ]
    assert _names(legacy_session / "docs" / "handoff") == ["03-TASK_TRACKER_2026-02-20.md", "ODD-NAME.md"]


def test_clean_folder_exits_zero(good_session: Path, capsys) -> None:
    assert run_migrate(good_session, today=TODAY) == 0
    assert "Nothing to rename" in capsys.readouterr().out


def test_existing_target_file_is_left_for_review(project_dir: Path, write_session) -> None:
    write_session(project_dir / "docs" / "handoff", {"NEXT_STEPS.md": "# Legacy\n"})
    write_session(project_dir / "docs" / "handoff-bb", {"05-NEXT_STEPS_2026-02-20.md": "# Keep\n"})

    plan = compute_migration_plan(project_dir, to_session="bb", today=TODAY)
    assert plan.renames == []
    assert [(a.old_name, a.reason) for a in plan.manual] == [("NEXT_STEPS.md", DUPLICATE_REASON)]


def test_partial_collision_moves_only_free_names(project_dir: Path, write_session, capsys) -> None:
    source = write_session(
        project_dir / "docs" / "handoff",
        {"MASTER_INDEX.md": "# Index\n", "NEXT_STEPS.md": "# Legacy\n"},
    )
    target = write_session(project_dir / "docs" / "handoff-bb", {"05-NEXT_STEPS_2026-02-20.md": "# Keep\n"})

    assert run_migrate(project_dir, to_session="bb", today=TODAY) == 1

    assert _names(source) == ["NEXT_STEPS.md"]
    assert _names(target) == ["00-MASTER_INDEX_2026-02-20.md", "05-NEXT_STEPS_2026-02-20.md"]
    assert (target / "05-NEXT_STEPS_2026-02-20.md").read_text(encoding="utf-8") == "# Keep\n"
    assert read_audit_log(project_dir)[0].metadata["manual"] == ["NEXT_STEPS.md"]
    assert "need manual review" in capsys.readouterr().out


def test_refuses_to_overwrite(project_dir: Path, write_session) -> None:
    source = write_session(
        project_dir / "docs" / "handoff",
        {"MASTER_INDEX.md": "# Index\n", "NEXT_STEPS.md": "# Legacy\n"},
    )
    plan = compute_migration_plan(project_dir, to_session="bb", today=TODAY)
    # Destination appears after the plan was computed
    target = write_session(project_dir / "docs" / "handoff-bb", {"05-NEXT_STEPS_2026-02-20.md": "# Keep\n"})

    with pytest.raises(MigrationError, match="Refusing to overwrite"):
        execute_migration_plan(plan)

    assert _names(source) == ["MASTER_INDEX.md", "NEXT_STEPS.md"]
    assert _names(target) == ["05-NEXT_STEPS_2026-02-20.md"]
    assert (target / "05-NEXT_STEPS_2026-02-20.md").read_text(encoding="utf-8") == "# Keep\n"
    assert not (project_dir / "docs" / ".handoff").exists()


def test_non_utf8_file_aborts_before_any_rename(project_dir: Path, write_session, capsys) -> None:
    folder = write_session(project_dir / "docs" / "handoff", {"MASTER_INDEX.md": "# Index\n"})
    (folder / "NEXT_STEPS.md").write_bytes(b"# Caf\xe9 notes\n")

    assert run_migrate(project_dir, today=TODAY) == 1

    assert _names(folder) == ["MASTER_INDEX.md", "NEXT_STEPS.md"]
    assert "Migration failed" in capsys.readouterr().err
    assert read_audit_log(project_dir) == []


def test_missing_folder(project_dir: Path, capsys) -> None:
    assert run_migrate(project_dir, session="nope", today=TODAY) == 1
    assert "Directory not found" in capsys.readouterr().err
