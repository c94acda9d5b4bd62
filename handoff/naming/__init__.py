"""Naming convention, categories, frontmatter and migration rules."""

from .categories import CATEGORIES, CATEGORY_RANGES, category_for, category_range
from .frontmatter import (
    build_default_frontmatter,
    inject_frontmatter,
    parse_frontmatter,
    serialize_frontmatter,
)
from .grammar import format_filename, is_valid_iso_date, is_valid_tag, parse_filename
from .migration import compute_new_name, plan_migration
from .validator import check_frontmatter, validate_naming, validate_naming_directory

__all__ = [
    "CATEGORIES",
    "CATEGORY_RANGES",
    "category_for",
    "category_range",
    "build_default_frontmatter",
    "inject_frontmatter",
    "parse_frontmatter",
    "serialize_frontmatter",
    "format_filename",
    "is_valid_iso_date",
    "is_valid_tag",
    "parse_filename",
    "compute_new_name",
    "plan_migration",
    "check_frontmatter",
    "validate_naming",
    "validate_naming_directory",
]
