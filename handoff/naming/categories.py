"""Sequence-range category model.

Sequences 00-14 are split into four contiguous bands. Anything past the last
band is a custom document and is filed under the last category.
"""

from dataclasses import dataclass

from ..models import Category


@dataclass(frozen=True)
class CategoryRange:
    category: Category
    min: int
    max: int

    @property
    def label(self) -> str:
        return f"{self.category.capitalize()} ({self.min:02d}-{self.max:02d})"

    def __contains__(self, sequence: int) -> bool:
        return self.min <= sequence <= self.max


CATEGORY_RANGES: tuple[CategoryRange, ...] = (
    CategoryRange("context", 0, 2),
    CategoryRange("session", 3, 5),
    CategoryRange("findings", 6, 11),
    CategoryRange("reference", 12, 14),
)

CATEGORY_DESCRIPTIONS: dict[str, str] = {
    "context": "Where to start: index, project state, critical context",
    "session": "What happened: task tracker, session log, next steps",
    "findings": "What was learned: architecture, audits, gap analysis",
    "reference": "What to keep at hand: deployment, scripts, prompts",
}


def _check_partition(ranges: tuple[CategoryRange, ...]) -> int:
    """Ensure ranges start at 0, are ordered, and leave no gaps or overlaps.

    Returns the last sequence covered by the table.
    """
    if not ranges:
        raise ValueError("Category table is empty")
    expected = 0
    seen: set[str] = set()
    for r in ranges:
        if r.category in seen:
            raise ValueError(f"Category '{r.category}' declared twice")
        seen.add(r.category)
        if r.min > r.max:
            raise ValueError(f"Category '{r.category}' has an empty range {r.min}-{r.max}")
        if r.min != expected:
            kind = "gap" if r.min > expected else "overlap"
            raise ValueError(f"Category table has a {kind} at sequence {expected:02d} ({r.category})")
        expected = r.max + 1
    return expected - 1


LAST_STANDARD_SEQUENCE = _check_partition(CATEGORY_RANGES)

CATEGORIES: tuple[Category, ...] = tuple(r.category for r in CATEGORY_RANGES)

_BY_CATEGORY = {r.category: r for r in CATEGORY_RANGES}


def category_for(sequence: int) -> Category:
    """Map a sequence number to its category."""
    if sequence < 0:
        raise ValueError(f"Sequence must be non-negative, got {sequence}")
    for r in CATEGORY_RANGES:
        if sequence in r:
            return r.category
    # Overflow bucket for custom docs
    return CATEGORY_RANGES[-1].category


def category_range(category: str) -> CategoryRange:
    """Return the declared range for a category."""
    try:
        return _BY_CATEGORY[category]
    except KeyError:
        raise ValueError(f"Unknown category: {category}") from None


def is_category(value: object) -> bool:
    return isinstance(value, str) and value in _BY_CATEGORY
