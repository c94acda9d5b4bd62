"""Template catalogue for handoff documents."""

from __future__ import annotations

from dataclasses import dataclass

from .naming.categories import CATEGORY_DESCRIPTIONS, CATEGORY_RANGES, category_for
from .naming.grammar import format_filename


@dataclass(frozen=True)
class Template:
    sequence: int
    slug: str
    title: str
    description: str
    token_budget: int
    max_lines: int
    required: bool
    legacy: str  # code the document had under the prefixed naming scheme

    @property
    def category(self) -> str:
        return category_for(self.sequence)

    def filename(self, day: str) -> str:
        return format_filename(self.sequence, self.slug, day)


REQUIRED_TEMPLATES: tuple[Template, ...] = (
    Template(0, "MASTER_INDEX", "Master Index", "Entry point: what to read first and in which order", 1500, 120, True, "CO-00"),
    Template(1, "PROJECT_STATE", "Project State", "Generated snapshot of gates, commits and stack", 2500, 200, True, "CO-01"),
    Template(2, "CRITICAL_CONTEXT", "Critical Context", "Constraints and gotchas the next agent must know", 2000, 160, True, "CO-02"),
    Template(3, "TASK_TRACKER", "Task Tracker", "Open, blocked and finished tasks with priorities", 2000, 160, True, "CO-03"),
    Template(4, "SESSION_LOG", "Session Log", "Chronological record of what this session did", 2500, 200, True, "OP-02"),
    Template(5, "NEXT_STEPS", "Next Steps", "Ordered actions for the agent picking this up", 1500, 120, True, "OP-04"),
)

RECOMMENDED_TEMPLATES: tuple[Template, ...] = (
    Template(6, "SYSTEM_ARCHITECTURE", "System Architecture", "Layers, services and data flow", 3000, 250, False, "AR-01"),
    Template(7, "COMPONENT_MAP", "Component Map", "Where each component lives and who uses it", 3000, 250, False, "AR-02"),
    Template(8, "GAP_ANALYSIS", "Gap Analysis", "What is missing, broken or untested", 2500, 200, False, "QA-02"),
    Template(9, "ROUTE_AUDIT", "Route Audit", "Every route with its status and findings", 3000, 250, False, "RF-02"),
    Template(10, "TESTID_FRAMEWORK", "Test ID Framework", "Test identifiers and coverage conventions", 2000, 160, False, "QA-01"),
    Template(11, "IMPROVEMENTS", "Improvements", "Improvement backlog ranked by impact", 2000, 160, False, "RF-04"),
    Template(12, "DEPLOYMENT_ROADMAP", "Deployment Roadmap", "How to ship, with rollback notes", 2000, 160, False, "OP-01"),
    Template(13, "SCRIPTS_REFERENCE", "Scripts Reference", "Project scripts and what they do", 1500, 120, False, "OP-03"),
    Template(14, "AUDIT_PROMPTS", "Audit Prompts", "Reusable prompts for auditing this project", 1500, 120, False, "RF-03"),
)

ALL_TEMPLATES = REQUIRED_TEMPLATES + RECOMMENDED_TEMPLATES


def get_template(sequence: int) -> Template | None:
    for template in ALL_TEMPLATES:
        if template.sequence == sequence:
            return template
    return None


def render_template(template: Template, project: str, day: str, session: str) -> str:
    """Starter markdown for a template; investigation markers are left for the agent."""
    lines = [
        f"# {template.title}: {project}",
        "",
        f"**Session:** {session}  ",
        f"**Created:** {day}  ",
        "**Status:** in progress",
        "",
        f"> {template.description}. Budget: ~{template.token_budget} tokens, {template.max_lines} lines max.",
        "",
    ]

    if template.sequence == 0:
        lines += [
            "## Read Order",
            "",
            "| # | Document | Purpose |",
            "|---|----------|---------|",
        ]
        for t in REQUIRED_TEMPLATES[1:]:
            lines.append(f"| {t.sequence:02d} | `{t.filename(day)}` | {t.description} |")
        lines.append("")
        lines += [
            "## Categories",
            "",
            "| Range | Category | Holds |",
            "|-------|----------|-------|",
        ]
        for r in CATEGORY_RANGES:
            lines.append(f"| {r.min:02d}-{r.max:02d} | {r.category} | {CATEGORY_DESCRIPTIONS[r.category]} |")
        lines.append("")

    lines += [
        "## Summary",
        "",
        f"<!-- INVESTIGATE: {template.description.lower()} -->",
        "",
        "## Details",
        "",
        "<!-- INVESTIGATE: concrete findings, file paths, counts -->",
        "",
    ]
    return "\n".join(lines)
