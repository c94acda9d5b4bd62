"""Filename, slug, tag and date grammar for handoff documents."""

import re
from datetime import date

from ..models import DocumentName

# 00-MASTER_INDEX_2026-02-20.md
CANONICAL_FILENAME_REGEX = re.compile(r"^(\d{2})-([A-Z][A-Z0-9_]*)_(\d{4}-\d{2}-\d{2})\.md$")

# CO-00-MASTER_INDEX_2026-02-20.md
LEGACY_CODES = ("CO", "AR", "OP", "QA", "RF")
LEGACY_FILENAME_REGEX = re.compile(
    r"^(" + "|".join(LEGACY_CODES) + r")-(\d{2})-([A-Z][A-Z0-9_]*)_(\d{4}-\d{2}-\d{2})\.md$"
)

LEGACY_CODE_NAMES = {
    "CO": "Context",
    "AR": "Architecture",
    "OP": "Operations",
    "QA": "Quality",
    "RF": "Reference",
}

SLUG_REGEX = re.compile(r"^[A-Z][A-Z0-9_]*$")

ISO_DATE_REGEX = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")

# checkout, db-migration, phase-3
TAG_SLUG_REGEX = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
TAG_MIN_LENGTH = 2
TAG_MAX_LENGTH = 50


def is_valid_iso_date(value: str) -> bool:
    """Check YYYY-MM-DD shape and that the day exists in the calendar."""
    match = ISO_DATE_REGEX.match(value)
    if not match:
        return False
    year, month, day = (int(g) for g in match.groups())
    try:
        date(year, month, day)
    except ValueError:
        return False
    return True


def today_iso() -> str:
    return date.today().isoformat()


def is_valid_slug(slug: str) -> bool:
    return bool(SLUG_REGEX.match(slug))


def is_valid_tag(tag: str) -> bool:
    """Tags are lowercase kebab tokens of 2 to 50 characters."""
    if not TAG_MIN_LENGTH <= len(tag) <= TAG_MAX_LENGTH:
        return False
    return bool(TAG_SLUG_REGEX.match(tag))


def is_canonical(filename: str) -> bool:
    return bool(CANONICAL_FILENAME_REGEX.match(filename))


def is_legacy(filename: str) -> bool:
    return bool(LEGACY_FILENAME_REGEX.match(filename))


def parse_filename(filename: str) -> DocumentName | None:
    """Parse a canonical or legacy filename.

    Returns None when the name matches neither generation. The two patterns
    cannot both match: canonical names start with a digit, legacy ones with
    an uppercase prefix code.
    """
    match = CANONICAL_FILENAME_REGEX.match(filename)
    if match:
        seq, slug, day = match.groups()
        return DocumentName(
            filename=filename,
            generation="canonical",
            sequence=int(seq),
            slug=slug,
            date=day,
        )

    match = LEGACY_FILENAME_REGEX.match(filename)
    if match:
        prefix, seq, slug, day = match.groups()
        return DocumentName(
            filename=filename,
            generation="legacy",
            sequence=int(seq),
            slug=slug,
            date=day,
            prefix=prefix,
        )

    return None


def format_filename(sequence: int, slug: str, day: str) -> str:
    """Build a canonical filename, zero-padding the sequence."""
    return f"{sequence:02d}-{slug}_{day}.md"
