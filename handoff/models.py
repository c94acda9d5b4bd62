"""Data models for handoff documents, issues, and migration actions."""

from dataclasses import dataclass, field
from typing import Literal

# Categories in sequence order
Category = Literal[
    "context",
    "session",
    "findings",
    "reference",
]

# Legacy two-letter category prefixes
LegacyCode = Literal["CO", "AR", "OP", "QA", "RF"]

Generation = Literal["canonical", "legacy"]

Severity = Literal["error", "warning", "suggestion"]

MigrationKind = Literal["rename", "skip", "manual"]


@dataclass(frozen=True)
class DocumentName:
    """Fields extracted from a handoff filename."""

    filename: str
    generation: Generation
    sequence: int
    slug: str
    date: str
    prefix: str | None = None  # only set for legacy names

    @property
    def padded_sequence(self) -> str:
        return f"{self.sequence:02d}"


@dataclass
class Frontmatter:
    """Flat header block carried at the top of a handoff document."""

    tags: list[str] = field(default_factory=list)
    topic: str | None = None
    created: str = ""
    sequence: int = -1  # -1 means unknown
    category: Category = "context"


@dataclass
class ParsedDocument:
    """Result of splitting a document into frontmatter and body."""

    frontmatter: Frontmatter | None
    body: str


@dataclass
class ValidationIssue:
    """A single validation finding."""

    severity: Severity
    rule: str
    message: str
    file: str | None = None

    def __str__(self) -> str:
        loc = f" {self.file}" if self.file else ""
        return f"{self.severity.upper()}: [{self.rule}]{loc} - {self.message}"


ERROR_PENALTY = 15
WARNING_PENALTY = 5
SUGGESTION_PENALTY = 1


@dataclass
class ValidationResult:
    """Accumulated issues with the derived score."""

    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def errors(self) -> int:
        return sum(1 for i in self.issues if i.severity == "error")

    @property
    def warnings(self) -> int:
        return sum(1 for i in self.issues if i.severity == "warning")

    @property
    def suggestions(self) -> int:
        return sum(1 for i in self.issues if i.severity == "suggestion")

    @property
    def score(self) -> int:
        raw = 100 - ERROR_PENALTY * self.errors - WARNING_PENALTY * self.warnings - SUGGESTION_PENALTY * self.suggestions
        return max(0, raw)

    @property
    def passed(self) -> bool:
        return self.errors == 0

    def by_severity(self, severity: Severity) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == severity]

    def to_dict(self) -> dict:
        return {
            "errors": self.errors,
            "warnings": self.warnings,
            "suggestions": self.suggestions,
            "score": self.score,
            "passed": self.passed,
            "issues": [
                {"severity": i.severity, "rule": i.rule, "message": i.message, "file": i.file}
                for i in self.issues
            ],
        }


@dataclass(frozen=True)
class MigrationAction:
    """Per-file outcome of applying migration rules."""

    action: MigrationKind
    old_name: str
    new_name: str | None = None
    reason: str | None = None
