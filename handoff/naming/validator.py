"""Naming convention validation for a session folder."""

from pathlib import Path

from ..models import ValidationIssue, ValidationResult
from .categories import LAST_STANDARD_SEQUENCE, category_for
from .frontmatter import parse_frontmatter
from .grammar import (
    CANONICAL_FILENAME_REGEX,
    LEGACY_CODE_NAMES,
    LEGACY_FILENAME_REGEX,
    is_valid_iso_date,
    is_valid_slug,
    is_valid_tag,
)

# (sequence, slug) pairs every session folder must contain
REQUIRED_DOCS: tuple[tuple[int, str], ...] = (
    (0, "MASTER_INDEX"),
    (1, "PROJECT_STATE"),
    (2, "CRITICAL_CONTEXT"),
    (3, "TASK_TRACKER"),
    (4, "SESSION_LOG"),
    (5, "NEXT_STEPS"),
)


def _required_band(required: tuple[tuple[int, str], ...]) -> tuple[int, int]:
    """Lowest contiguous block of required sequences."""
    seqs = sorted({seq for seq, _ in required})
    low = high = seqs[0]
    for seq in seqs[1:]:
        if seq != high + 1:
            break
        high = seq
    return low, high


REQUIRED_BAND = _required_band(REQUIRED_DOCS)


class NamingRules:
    """Naming checks over a flat list of filenames.

    Each check returns its own issues; `run_all` runs them in order and never
    stops early, so one bad file does not hide problems in the others.
    """

    def __init__(
        self,
        filenames: list[str],
        required: tuple[tuple[int, str], ...] = REQUIRED_DOCS,
        band: tuple[int, int] | None = None,
    ):
        self.filenames = list(filenames)
        self.required = required
        # Range checked for gaps; defaults to the required block
        self.band = band or _required_band(required)
        # (filename, sequence, slug, date) for names that pass the grammar
        self.parsed: list[tuple[str, int, str, str]] = []
        for name in self.filenames:
            match = CANONICAL_FILENAME_REGEX.match(name)
            if match:
                seq, slug, day = match.groups()
                self.parsed.append((name, int(seq), slug, day))

    def run_all(self) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        issues.extend(self.check_filename_format())
        issues.extend(self.check_dates())
        issues.extend(self.check_slugs())
        issues.extend(self.check_duplicate_sequences())
        issues.extend(self.check_sequence_gaps())
        issues.extend(self.check_required_docs())
        issues.extend(self.check_custom_sequences())
        return issues

    def check_filename_format(self) -> list[ValidationIssue]:
        results = []
        for name in self.filenames:
            if CANONICAL_FILENAME_REGEX.match(name):
                continue
            message = "Does not match NN-SLUG_YYYY-MM-DD.md"
            match = LEGACY_FILENAME_REGEX.match(name)
            if match:
                kind = LEGACY_CODE_NAMES[match.group(1)]
                message += f" (legacy {kind} name, run `handoff migrate`)"
            results.append(ValidationIssue("error", "filename-format", message, file=name))
        return results

    def check_dates(self) -> list[ValidationIssue]:
        return [
            ValidationIssue("error", "invalid-date", f"Date '{day}' is not a real calendar date", file=name)
            for name, _, _, day in self.parsed
            if not is_valid_iso_date(day)
        ]

    def check_slugs(self) -> list[ValidationIssue]:
        return [
            ValidationIssue(
                "error",
                "slug-format",
                f"Slug '{slug}' must be UPPER_SNAKE_CASE starting with a letter",
                file=name,
            )
            for name, _, slug, _ in self.parsed
            if not is_valid_slug(slug)
        ]

    def check_duplicate_sequences(self) -> list[ValidationIssue]:
        results = []
        seen: set[int] = set()
        for name, seq, _, _ in self.parsed:
            if seq in seen:
                results.append(
                    ValidationIssue("error", "duplicate-sequence", f"Sequence {seq:02d} is used more than once", file=name)
                )
            seen.add(seq)
        return results

    def check_sequence_gaps(self) -> list[ValidationIssue]:
        """Warn about gaps inside the required band.

        Sequences that are themselves missing required documents are already
        reported by `check_required_docs`, so only the rest are flagged here.
        """
        low, high = self.band
        present = sorted({seq for _, seq, _, _ in self.parsed if low <= seq <= high})
        required_seqs = {seq for seq, _ in self.required}
        explained = {seq for seq in required_seqs if seq not in present}

        results = []
        for prev, cur in zip(present, present[1:]):
            if cur - prev <= 1:
                continue
            missing = set(range(prev + 1, cur))
            if missing <= explained:
                continue
            results.append(
                ValidationIssue(
                    "warning",
                    "sequence-gap",
                    f"Gap between {prev:02d} and {cur:02d} in the required range {low:02d}-{high:02d}",
                )
            )
        return results

    def check_required_docs(self) -> list[ValidationIssue]:
        present = {(seq, slug) for _, seq, slug, _ in self.parsed}
        return [
            ValidationIssue(
                "error",
                "required-doc",
                f"Missing required document {seq:02d}-{slug}_YYYY-MM-DD.md",
            )
            for seq, slug in self.required
            if (seq, slug) not in present
        ]

    def check_custom_sequences(self) -> list[ValidationIssue]:
        return [
            ValidationIssue(
                "suggestion",
                "custom-sequence",
                f"Sequence {seq:02d} is past the standard 00-{LAST_STANDARD_SEQUENCE:02d} range; "
                f"filed under '{category_for(seq)}'",
                file=name,
            )
            for name, seq, _, _ in self.parsed
            if seq > LAST_STANDARD_SEQUENCE
        ]


def validate_naming(filenames: list[str]) -> ValidationResult:
    """Validate a folder's filenames against the naming convention."""
    if not filenames:
        return ValidationResult([ValidationIssue("error", "no-files", "No markdown files found")])
    return ValidationResult(NamingRules(filenames).run_all())


def validate_naming_directory(folder: Path) -> ValidationResult:
    """List a folder's markdown files and validate them."""
    if not folder.is_dir():
        return ValidationResult(
            [ValidationIssue("error", "missing-directory", f"Directory not found: {folder}")]
        )
    names = sorted(p.name for p in folder.iterdir() if p.is_file() and p.suffix == ".md")
    return validate_naming(names)


def check_frontmatter(filename: str, content: str) -> list[ValidationIssue]:
    """Flag frontmatter that disagrees with itself or with the filename.

    Nothing is corrected here; which value wins is left to the caller.
    """
    fm = parse_frontmatter(content).frontmatter
    if fm is None:
        return []

    results = []
    if fm.sequence >= 0:
        expected = category_for(fm.sequence)
        if fm.category != expected:
            results.append(
                ValidationIssue(
                    "warning",
                    "frontmatter-category",
                    f"category '{fm.category}' does not match sequence {fm.sequence:02d} ('{expected}')",
                    file=filename,
                )
            )

    match = CANONICAL_FILENAME_REGEX.match(filename)
    if match and fm.sequence >= 0 and int(match.group(1)) != fm.sequence:
        results.append(
            ValidationIssue(
                "warning",
                "frontmatter-sequence",
                f"sequence {fm.sequence} does not match filename sequence {match.group(1)}",
                file=filename,
            )
        )

    for tag in fm.tags:
        if not is_valid_tag(tag):
            results.append(
                ValidationIssue("warning", "invalid-tag", f"Tag '{tag}' is not a lowercase kebab slug", file=filename)
            )
    return results
