"""Migration rules from legacy and bare filenames to canonical names."""

import re
from collections.abc import Iterable
from dataclasses import dataclass

from ..models import MigrationAction
from .grammar import format_filename, is_canonical

NO_RULE_REASON = "No matching migration rule — review manually"
DUPLICATE_REASON = "Duplicate target — review manually"
CANONICAL_REASON = "Already canonical"


@dataclass(frozen=True)
class MigrationRule:
    """Maps filenames matching `pattern` to a canonical sequence and slug."""

    pattern: re.Pattern
    sequence: int
    slug: str

    def matches(self, filename: str) -> bool:
        return bool(self.pattern.match(filename))


def _legacy(prefix: str, sequence: int, target_sequence: int, slug: str) -> MigrationRule:
    return MigrationRule(re.compile(rf"^{prefix}-{sequence:02d}-"), target_sequence, slug)


def _bare(words: str, target_sequence: int, slug: str) -> MigrationRule:
    # Optional numeric prefix from v1 names, words joined by - or _, any suffix
    return MigrationRule(
        re.compile(rf"^(?:\d{{1,2}}-)?(?:{words})(?:[-_].*)?\.md$", re.IGNORECASE),
        target_sequence,
        slug,
    )


# Legacy prefixed rules run before bare ones; first match wins.
LEGACY_RULES: tuple[MigrationRule, ...] = (
    _legacy("CO", 0, 0, "MASTER_INDEX"),
    _legacy("CO", 1, 1, "PROJECT_STATE"),
    _legacy("CO", 2, 2, "CRITICAL_CONTEXT"),
    _legacy("CO", 3, 3, "TASK_TRACKER"),
    _legacy("OP", 2, 4, "SESSION_LOG"),
    _legacy("OP", 4, 5, "NEXT_STEPS"),
    _legacy("AR", 1, 6, "SYSTEM_ARCHITECTURE"),
    _legacy("AR", 2, 7, "COMPONENT_MAP"),
    _legacy("QA", 2, 8, "GAP_ANALYSIS"),
    _legacy("RF", 2, 9, "ROUTE_AUDIT"),
    _legacy("QA", 1, 10, "TESTID_FRAMEWORK"),
    _legacy("RF", 4, 11, "IMPROVEMENTS"),
    _legacy("OP", 1, 12, "DEPLOYMENT_ROADMAP"),
    _legacy("OP", 3, 13, "SCRIPTS_REFERENCE"),
    _legacy("RF", 3, 14, "AUDIT_PROMPTS"),
)

BARE_RULES: tuple[MigrationRule, ...] = (
    _bare(r"MASTER[-_](?:HANDOFF[-_])?INDEX", 0, "MASTER_INDEX"),
    _bare(r"PROJECT[-_]STATE", 1, "PROJECT_STATE"),
    _bare(r"CRITICAL[-_]CONTEXT", 2, "CRITICAL_CONTEXT"),
    _bare(r"TASK[-_]TRACKER", 3, "TASK_TRACKER"),
    _bare(r"SESSION[-_]LOG", 4, "SESSION_LOG"),
    _bare(r"NEXT[-_]STEPS|QUICK[-_]START", 5, "NEXT_STEPS"),
    _bare(r"(?:SYSTEM[-_])?ARCHITECTURE", 6, "SYSTEM_ARCHITECTURE"),
    _bare(r"COMPONENT[-_]MAP", 7, "COMPONENT_MAP"),
    _bare(r"GAP[-_]ANALYSIS", 8, "GAP_ANALYSIS"),
    _bare(r"ROUTE[-_]AUDIT", 9, "ROUTE_AUDIT"),
    _bare(r"TESTID[-_]FRAMEWORK", 10, "TESTID_FRAMEWORK"),
    _bare(r"IMPROVEMENTS", 11, "IMPROVEMENTS"),
    _bare(r"DEPLOYMENT(?:[-_]ROADMAP)?", 12, "DEPLOYMENT_ROADMAP"),
    _bare(r"SCRIPTS[-_]REFERENCE", 13, "SCRIPTS_REFERENCE"),
    _bare(r"AUDIT[-_]PROMPTS", 14, "AUDIT_PROMPTS"),
)

MIGRATION_RULES: tuple[MigrationRule, ...] = LEGACY_RULES + BARE_RULES


def find_rule(filename: str, rules: tuple[MigrationRule, ...] = MIGRATION_RULES) -> MigrationRule | None:
    for rule in rules:
        if rule.matches(filename):
            return rule
    return None


def compute_new_name(filename: str, today: str) -> MigrationAction:
    """Decide what a single file should become."""
    if is_canonical(filename):
        return MigrationAction(action="skip", old_name=filename, reason=CANONICAL_REASON)

    rule = find_rule(filename)
    if rule is None:
        return MigrationAction(action="manual", old_name=filename, reason=NO_RULE_REASON)

    return MigrationAction(
        action="rename",
        old_name=filename,
        new_name=format_filename(rule.sequence, rule.slug, today),
    )


def plan_migration(filenames: list[str], today: str, taken: Iterable[str] = ()) -> list[MigrationAction]:
    """Compute the migration plan for a set of filenames.

    A second pass demotes any rename whose target was already claimed earlier
    in the same run, so no two files are ever renamed to the same name.
    Canonical files that are kept in place also claim their own names, as
    does every name in `taken` (files already in the destination folder).
    """
    actions = [compute_new_name(name, today) for name in filenames]

    claimed: set[str] = {a.old_name for a in actions if a.action == "skip"}
    claimed.update(taken)
    planned: list[MigrationAction] = []
    for action in actions:
        if action.action == "rename":
            if action.new_name in claimed:
                action = MigrationAction(action="manual", old_name=action.old_name, reason=DUPLICATE_REASON)
            else:
                claimed.add(action.new_name)
        planned.append(action)
    return planned
