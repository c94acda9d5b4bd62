"""Heuristic quality scoring for handoff documents.

Each document earns points in eight dimensions detected with regular
expressions over the raw text. Dimension points are summed into a 0-100
total. Folder-level checks (required sequences, category coverage, gaps) are
reported separately and never change the numeric score.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from ..models import ValidationIssue
from ..naming.categories import CATEGORY_RANGES
from ..naming.validator import REQUIRED_BAND

PASS_THRESHOLD = 75

# Maximum points per dimension; sums to 100
WEIGHTS: dict[str, int] = {
    "naming": 10,
    "structure": 15,
    "completeness": 20,
    "actionability": 15,
    "cross_refs": 10,
    "metadata": 10,
    "coverage": 10,
    "investigation": 10,
}

RATING_RUBRIC: tuple[tuple[int, str, str], ...] = (
    (90, "⭐⭐⭐", "Excellent - Production ready"),
    (80, "⭐⭐", "Good - Ready for handoff"),
    (70, "⭐", "Acceptable - Needs improvement"),
    (60, "✗", "Needs work before handoff"),
    (0, "✗", "Incomplete - Not ready"),
)

# Strict: 00-MASTER_INDEX.md or 00-MASTER_INDEX_2026-02-20.md
STRICT_NAME = re.compile(r"^(\d{2})-([A-Z][A-Z0-9_-]+?)(?:_(\d{4}-\d{2}-\d{2}))?\.md$")
# Relaxed: lowercase slugs as agents often write them
RELAXED_NAME = re.compile(r"^(\d{2})-([A-Za-z][A-Za-z0-9_-]+?)(?:_(\d{4}-\d{2}-\d{2}))?\.md$")
LEADING_SEQUENCE = re.compile(r"^(\d{2})")

TITLE = re.compile(r"^#\s", re.MULTILINE)
SECTION = re.compile(r"^#{2,3}\s", re.MULTILINE)
TABLE = re.compile(r"\|.*\|.*\|")
BULLET = re.compile(r"^[-*]\s", re.MULTILINE)
NUMBERED = re.compile(r"^\d+\.\s", re.MULTILINE)

PLACEHOLDER = re.compile(r"<!-- INVESTIGATE|TODO|TBD|PLACEHOLDER", re.IGNORECASE)

AGENT_ACTION = re.compile(r"\b(EXECUTE|READ FIRST|REFERENCE|IMPLEMENT|DEPLOY|RUN|VERIFY)\b")
EXECUTION_ORDER = re.compile(r"execution order|phase \d|step \d|priority|\bP[0-3]\b", re.IGNORECASE)
CODE_BLOCK = re.compile(r"```(bash|sql|typescript|tsx?|jsx?|shell|sh|python|py|console)\b", re.IGNORECASE)
COMMAND = re.compile(r"\b(npx|npm run|node|git|supabase|python|pytest|pip)\b")

DOC_REFERENCE = re.compile(r"`\d{2}-[A-Z][A-Z0-9_-]+\.md`")
MARKDOWN_LINK = re.compile(r"\[[^\]]*?\]\([^)]*?\.md\)")

DATE_WORD = re.compile(
    r"\b(Date|Updated|Created|Last|January|February|March|April|May|June|July|August|"
    r"September|October|November|December)\b",
    re.IGNORECASE,
)
ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")
SESSION_WORD = re.compile(r"session|handoff|agent", re.IGNORECASE)
STATUS_WORD = re.compile(r"status|severity|priority|critical|warning|blocked|complete", re.IGNORECASE)

SPECIFIC_DATA = re.compile(
    r"\d+\s*(duplicates|errors|warnings|tests|pages|routes|components|files|failures)", re.IGNORECASE
)
FILE_REFERENCE = re.compile(r"`(src|scripts|supabase|tests|\.github)/", re.IGNORECASE)
FINDING_VERB = re.compile(r"found|discovered|identified|detected|audit|analyzed", re.IGNORECASE)
GENERIC_TEXT = re.compile(r"lorem ipsum|example text|sample content", re.IGNORECASE)

SESSION_FOLDER = re.compile(r"^handoff(-[a-z0-9-]+)?$")


@dataclass
class DocumentScore:
    """Score for one document."""

    total: int
    breakdown: dict[str, int] = field(default_factory=dict)


@dataclass
class FileScore:
    filename: str
    score: DocumentScore


@dataclass
class QualityReport:
    """Scores for a folder plus folder-level issues."""

    folder: str
    files: list[FileScore] = field(default_factory=list)
    folder_issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def overall(self) -> int:
        if not self.files:
            return 0
        return round(sum(f.score.total for f in self.files) / len(self.files))

    @property
    def passed(self) -> bool:
        return bool(self.files) and self.overall >= PASS_THRESHOLD

    def to_dict(self) -> dict:
        return {
            "folder": self.folder,
            "overall": self.overall,
            "passed": self.passed,
            "threshold": PASS_THRESHOLD,
            "files": [
                {"file": f.filename, "total": f.score.total, "breakdown": f.score.breakdown}
                for f in self.files
            ],
            "folder_issues": [
                {"severity": i.severity, "rule": i.rule, "message": i.message} for i in self.folder_issues
            ],
        }


# -----------------------------------------------------------------------------
# Per-document dimensions
# -----------------------------------------------------------------------------


def _score_naming(filename: str) -> int:
    if STRICT_NAME.match(filename):
        return 10
    if RELAXED_NAME.match(filename):
        return 7
    return 2


def _score_structure(content: str) -> int:
    points = 0
    if TITLE.search(content):
        points += 4
    sections = len(SECTION.findall(content))
    if sections >= 3:
        points += 4
    elif sections >= 1:
        points += 2
    if TABLE.search(content):
        points += 4
    if BULLET.search(content) or NUMBERED.search(content):
        points += 3
    return min(WEIGHTS["structure"], points)


def _score_completeness(content: str) -> int:
    chars = len(content)
    lines = sum(1 for line in content.split("\n") if line.strip())

    if chars > 2000 and lines > 40:
        points = 18
    elif chars > 500 and lines > 15:
        points = 14
    elif lines > 8:
        points = 8
    else:
        points = 3

    # Placeholder-heavy docs lose points but never drop below the floor
    placeholders = len(PLACEHOLDER.findall(content))
    if placeholders > 5:
        points = max(3, points - 5)
    elif placeholders > 2:
        points = max(5, points - 2)
    return min(WEIGHTS["completeness"], points)


def _score_actionability(content: str) -> int:
    points = 0
    if AGENT_ACTION.search(content):
        points += 5
    if EXECUTION_ORDER.search(content):
        points += 4
    if CODE_BLOCK.search(content):
        points += 3
    if COMMAND.search(content):
        points += 3
    return min(WEIGHTS["actionability"], points)


def _score_cross_refs(content: str) -> int:
    refs = len(DOC_REFERENCE.findall(content)) + len(MARKDOWN_LINK.findall(content))
    if refs >= 5:
        return 10
    if refs >= 3:
        return 8
    if refs >= 1:
        return 5
    return 0


def _score_metadata(content: str) -> int:
    points = 0
    if DATE_WORD.search(content) or ISO_DATE.search(content):
        points += 4
    if SESSION_WORD.search(content):
        points += 3
    if STATUS_WORD.search(content):
        points += 3
    return min(WEIGHTS["metadata"], points)


def _score_coverage(filename: str) -> int:
    return 7 if LEADING_SEQUENCE.match(filename) else 2


def _score_investigation(content: str) -> int:
    points = 0
    if SPECIFIC_DATA.search(content):
        points += 3
    if FILE_REFERENCE.search(content):
        points += 3
    if FINDING_VERB.search(content):
        points += 2
    # Absence of filler only counts once there is some evidence to speak of
    if points and not GENERIC_TEXT.search(content):
        points += 2
    return min(WEIGHTS["investigation"], points)


def score_document(content: str, filename: str) -> DocumentScore:
    """Score one document by its text and filename."""
    breakdown = {
        "naming": _score_naming(filename),
        "structure": _score_structure(content),
        "completeness": _score_completeness(content),
        "actionability": _score_actionability(content),
        "cross_refs": _score_cross_refs(content),
        "metadata": _score_metadata(content),
        "coverage": _score_coverage(filename),
        "investigation": _score_investigation(content),
    }
    return DocumentScore(total=sum(breakdown.values()), breakdown=breakdown)


# -----------------------------------------------------------------------------
# Folder-level checks
# -----------------------------------------------------------------------------


def _sequences(filenames: list[str]) -> list[int]:
    seqs = []
    for name in filenames:
        match = LEADING_SEQUENCE.match(name)
        if match:
            seqs.append(int(match.group(1)))
    return seqs


def check_folder_name(folder_name: str) -> list[ValidationIssue]:
    if SESSION_FOLDER.match(folder_name):
        return []
    if folder_name.lower().startswith("handoff"):
        return [
            ValidationIssue(
                "warning",
                "folder-name",
                f'Folder "{folder_name}" should follow pattern: handoff-{{session-slug}}',
            )
        ]
    return [
        ValidationIssue(
            "suggestion",
            "folder-name",
            f'Folder "{folder_name}" is not a standard handoff folder name',
        )
    ]


def check_required_sequences(filenames: list[str]) -> list[ValidationIssue]:
    present = set(_sequences(filenames))
    low, high = REQUIRED_BAND
    missing = [seq for seq in range(low, high + 1) if seq not in present]
    if not missing:
        return []
    labels = ", ".join(f"{seq:02d}" for seq in missing)
    return [
        ValidationIssue(
            # Missing master index is an error, other gaps are warnings
            "error" if low in missing else "warning",
            "required-sequences",
            f"Missing required sequences: {labels} ({low:02d}-{high:02d} are required for a complete handoff)",
        )
    ]


def check_category_coverage(filenames: list[str]) -> list[ValidationIssue]:
    seqs = _sequences(filenames)
    uncovered = [r.label for r in CATEGORY_RANGES if not any(seq in r for seq in seqs)]
    if not uncovered:
        return []
    return [
        ValidationIssue(
            "suggestion",
            "category-coverage",
            f"Missing category coverage: {', '.join(uncovered)}",
        )
    ]


def check_sequence_order(filenames: list[str]) -> list[ValidationIssue]:
    """Report the first slot in the required band that is out of sequence."""
    seqs = sorted(_sequences(filenames))
    if len(seqs) < 2:
        return []
    low, high = REQUIRED_BAND
    slots = high - low + 1
    for idx, seq in enumerate(seqs[:slots]):
        expected = low + idx
        if seq != expected:
            return [
                ValidationIssue(
                    "suggestion",
                    "sequence-gap",
                    f"Sequence gap: expected {expected:02d} but next is {seq:02d}",
                )
            ]
    return []


def check_folder(folder_name: str, filenames: list[str]) -> list[ValidationIssue]:
    """Run all folder-level checks."""
    issues: list[ValidationIssue] = []
    issues.extend(check_folder_name(folder_name))
    issues.extend(check_required_sequences(filenames))
    issues.extend(check_category_coverage(filenames))
    issues.extend(check_sequence_order(filenames))
    return issues


def score_folder(folder_name: str, documents: list[tuple[str, str]]) -> QualityReport:
    """Score every (filename, content) pair and run folder-level checks."""
    report = QualityReport(folder=folder_name)
    for filename, content in documents:
        report.files.append(FileScore(filename=filename, score=score_document(content, filename)))
    report.folder_issues = check_folder(folder_name, [name for name, _ in documents])
    return report


# -----------------------------------------------------------------------------
# Reporting helpers
# -----------------------------------------------------------------------------


def rating_for(score: int) -> tuple[str, str]:
    """Return (icon, label) for a score."""
    for floor, icon, label in RATING_RUBRIC:
        if score >= floor:
            return icon, label
    return RATING_RUBRIC[-1][1], RATING_RUBRIC[-1][2]


def weak_dimensions(breakdown: dict[str, int]) -> list[str]:
    """Dimensions worth improving, named for display."""
    parts = []
    if breakdown.get("naming", 0) < 8:
        parts.append("naming")
    if breakdown.get("completeness", 0) < 14:
        parts.append("content depth")
    if breakdown.get("actionability", 0) < 8:
        parts.append("actionability")
    if breakdown.get("cross_refs", 0) < 5:
        parts.append("cross-refs")
    if breakdown.get("investigation", 0) < 5:
        parts.append("investigation evidence")
    return parts


def recommendations_for(breakdown: dict[str, int]) -> list[str]:
    tips = []
    if breakdown.get("naming", 0) < 8:
        tips.append("Rename to numeric format: NN-SLUG_YYYY-MM-DD.md")
    if breakdown.get("structure", 0) < 10:
        tips.append("Add more sections (##), tables, or bullet lists")
    if breakdown.get("completeness", 0) < 14:
        tips.append("Add more substantive content (target 2000+ characters)")
    if breakdown.get("actionability", 0) < 8:
        tips.append("Add agent actions (EXECUTE, READ FIRST), execution order, code blocks")
    if breakdown.get("cross_refs", 0) < 5:
        tips.append("Reference other handoff docs by filename")
    if breakdown.get("metadata", 0) < 6:
        tips.append("Add date, session context, and status info")
    if breakdown.get("investigation", 0) < 5:
        tips.append("Include specific data (counts, file paths, concrete findings)")
    return tips
