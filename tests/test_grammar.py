"""Filename, date and tag grammar."""

import re

import pytest

from handoff.naming.grammar import (
    format_filename,
    is_canonical,
    is_legacy,
    is_valid_iso_date,
    is_valid_slug,
    is_valid_tag,
    parse_filename,
    today_iso,
)


@pytest.mark.parametrize(
    "name",
    [
        "00-MASTER_INDEX_2026-02-20.md",
        "05-NEXT_STEPS_2026-02-20.md",
        "14-AUDIT_PROMPTS_2026-01-15.md",
        "07-A_2026-02-20.md",
        "09-V2_ROUTES_2026-02-20.md",
        "15-CUSTOM_NOTES_2026-02-20.md",
    ],
)
def test_canonical_names_accepted(name: str) -> None:
    assert is_canonical(name)
    assert not is_legacy(name)


@pytest.mark.parametrize(
    "name",
    [
        "00-MASTER-HANDOFF-INDEX.md",
        "0-MASTER_INDEX_2026-02-20.md",
        "100-MASTER_INDEX_2026-02-20.md",
        "00-master_index_2026-02-20.md",
        "00-MASTER-INDEX_2026-02-20.md",
        "00-MASTER_INDEX_26-02-20.md",
        "00-MASTER_INDEX_2026-2-20.md",
        "00-MASTER_INDEX.md",
        "00-MASTER_INDEX_2026-02-20.txt",
        "00-_LEADING_2026-02-20.md",
        "00-1ST_DOC_2026-02-20.md",
        "CO-00-MASTER_INDEX_2026-02-20.md",
        "",
    ],
)
def test_non_canonical_names_rejected(name: str) -> None:
    assert not is_canonical(name)
    assert parse_filename(name) is None or parse_filename(name).generation == "legacy"


@pytest.mark.parametrize(
    "name",
    [
        "CO-00-MASTER_INDEX_2026-02-20.md",
        "AR-01-SYSTEM_ARCHITECTURE_2026-01-15.md",
        "OP-04-NEXT_STEPS_2026-01-15.md",
        "QA-02-GAP_ANALYSIS_2026-01-15.md",
        "RF-03-AUDIT_PROMPTS_2026-01-15.md",
    ],
)
def test_legacy_names_accepted(name: str) -> None:
    assert is_legacy(name)
    assert not is_canonical(name)


@pytest.mark.parametrize(
    "name",
    [
        "XX-00-MASTER_INDEX_2026-02-20.md",
        "co-00-MASTER_INDEX_2026-02-20.md",
        "CO-0-MASTER_INDEX_2026-02-20.md",
        "CO-100-MASTER_INDEX_2026-02-20.md",
        "CO-00-MASTER_INDEX.md",
    ],
)
def test_bad_legacy_names_rejected(name: str) -> None:
    assert not is_legacy(name)
    assert parse_filename(name) is None


def test_parse_canonical_fields() -> None:
    parsed = parse_filename("03-TASK_TRACKER_2026-02-20.md")
    assert parsed is not None
    assert parsed.generation == "canonical"
    assert parsed.sequence == 3
    assert parsed.slug == "TASK_TRACKER"
    assert parsed.date == "2026-02-20"
    assert parsed.prefix is None
    assert parsed.padded_sequence == "03"


def test_parse_legacy_fields() -> None:
    parsed = parse_filename("OP-02-SESSION_LOG_2026-01-01.md")
    assert parsed is not None
    assert parsed.generation == "legacy"
    assert parsed.prefix == "OP"
    assert parsed.sequence == 2
    assert parsed.slug == "SESSION_LOG"
    assert parsed.date == "2026-01-01"


def test_slug_keeps_inner_underscores() -> None:
    parsed = parse_filename("06-SYSTEM_ARCHITECTURE_V2_2026-02-20.md")
    assert parsed is not None
    assert parsed.slug == "SYSTEM_ARCHITECTURE_V2"


def test_format_filename_pads_sequence() -> None:
    assert format_filename(0, "MASTER_INDEX", "2026-02-20") == "00-MASTER_INDEX_2026-02-20.md"
    assert format_filename(12, "DEPLOYMENT_ROADMAP", "2026-02-20") == "12-DEPLOYMENT_ROADMAP_2026-02-20.md"


def test_padding_is_two_digits_for_every_sequence() -> None:
    for seq in range(100):
        name = format_filename(seq, "DOC", "2026-02-20")
        assert is_canonical(name)
        assert parse_filename(name).sequence == seq


@pytest.mark.parametrize(
    "value,expected",
    [
        ("2026-02-20", True),
        ("2024-02-29", True),
        ("2026-12-31", True),
        ("2026-02-29", False),
        ("2026-02-30", False),
        ("2026-13-01", False),
        ("2026-00-10", False),
        ("26-02-20", False),
        ("2026-2-20", False),
        ("not-a-date", False),
        ("", False),
    ],
)
def test_iso_date_validation(value: str, expected: bool) -> None:
    assert is_valid_iso_date(value) is expected


def test_today_iso_shape() -> None:
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}", today_iso())
    assert is_valid_iso_date(today_iso())


@pytest.mark.parametrize("slug", ["MASTER_INDEX", "A", "V2_ROUTES", "X1"])
def test_valid_slugs(slug: str) -> None:
    assert is_valid_slug(slug)


@pytest.mark.parametrize("slug", ["master_index", "_LEADING", "1ST", "MASTER-INDEX", ""])
def test_invalid_slugs(slug: str) -> None:
    assert not is_valid_slug(slug)


@pytest.mark.parametrize("tag", ["checkout", "db-migration", "phase-3", "ab", "a" * 50])
def test_valid_tags(tag: str) -> None:
    assert is_valid_tag(tag)


@pytest.mark.parametrize(
    "tag",
    ["a", "a" * 51, "Checkout", "db_migration", "db--migration", "-leading", "trailing-", "two words", ""],
)
def test_invalid_tags(tag: str) -> None:
    assert not is_valid_tag(tag)
