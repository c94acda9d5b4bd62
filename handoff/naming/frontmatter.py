"""Flat frontmatter codec.

Reads and writes the small `key: value` header used by handoff documents.
Only flat keys are understood: quoted strings, bracketed lists, bare integers,
and plain strings. Nested structures are not part of the format and this is
not a YAML parser.
"""

import re

from ..models import Frontmatter, ParsedDocument
from .categories import CATEGORIES, category_for, is_category

DELIMITER = "---"

_INTEGER = re.compile(r"^[0-9]+$")


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def _parse_value(raw: str) -> str | int | list[str]:
    value = raw.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    if value.startswith("[") and value.endswith("]"):
        inner = value[1:-1].strip()
        if not inner:
            return []
        return [_strip_quotes(item.strip()) for item in inner.split(",")]
    if _INTEGER.match(value):
        return int(value)
    return value


def _parse_header(lines: list[str]) -> dict[str, str | int | list[str]]:
    data: dict[str, str | int | list[str]] = {}
    for line in lines:
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        if ":" not in stripped:
            continue
        key, _, value = stripped.partition(":")
        key = key.strip()
        if key:
            data[key] = _parse_value(value)  # last write wins
    return data


def _coerce(data: dict[str, str | int | list[str]]) -> Frontmatter:
    tags = data.get("tags")
    topic = data.get("topic")
    created = data.get("created")
    sequence = data.get("sequence")
    category = data.get("category")

    return Frontmatter(
        tags=[str(t) for t in tags] if isinstance(tags, list) else [],
        topic=str(topic) if isinstance(topic, (str, int)) and topic != "" else None,
        created=str(created) if created is not None else "",
        sequence=sequence if isinstance(sequence, int) else -1,
        category=category if is_category(category) else CATEGORIES[0],
    )


def _is_delimiter(line: str) -> bool:
    return line.rstrip("\r\n") == DELIMITER


def parse_frontmatter(content: str) -> ParsedDocument:
    """Split a document into its frontmatter and body.

    Documents without a header (the common case) come back with
    `frontmatter=None` and the content untouched.
    """
    lines = content.splitlines(keepends=True)
    if not lines or not _is_delimiter(lines[0]):
        return ParsedDocument(frontmatter=None, body=content)

    for idx in range(1, len(lines)):
        if _is_delimiter(lines[idx]):
            header = [line.rstrip("\r\n") for line in lines[1:idx]]
            body = "".join(lines[idx + 1 :])
            return ParsedDocument(frontmatter=_coerce(_parse_header(header)), body=body)

    # Opening delimiter without a closing one is not a header
    return ParsedDocument(frontmatter=None, body=content)


def serialize_frontmatter(fm: Frontmatter) -> str:
    """Render frontmatter as a delimited header block (no trailing newline)."""
    lines = [DELIMITER, f"tags: [{', '.join(fm.tags)}]"]
    if fm.topic:
        lines.append(f'topic: "{fm.topic}"')
    lines.append(f'created: "{fm.created}"')
    lines.append(f"sequence: {fm.sequence}")
    lines.append(f'category: "{fm.category}"')
    lines.append(DELIMITER)
    return "\n".join(lines)


def inject_frontmatter(content: str, fm: Frontmatter) -> str:
    """Replace the document's header with `fm`, or prepend one if absent."""
    parsed = parse_frontmatter(content)
    header = serialize_frontmatter(fm)
    if parsed.frontmatter is None:
        return f"{header}\n{content}"
    return f"{header}\n{parsed.body}"


def build_default_frontmatter(
    sequence: int,
    created: str,
    tags: list[str] | None = None,
    topic: str | None = None,
) -> Frontmatter:
    """Frontmatter for a new document, with the category derived from its sequence."""
    return Frontmatter(
        tags=list(tags or []),
        topic=topic or None,
        created=created,
        sequence=sequence,
        category=category_for(sequence),
    )


def parse_tags(csv: str | None) -> list[str]:
    """Split a comma-separated tag list, trimming blanks."""
    if not csv:
        return []
    return [t.strip() for t in csv.split(",") if t.strip()]
