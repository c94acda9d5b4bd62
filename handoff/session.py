"""Session folder layout and file helpers."""

import json
from pathlib import Path

from .naming.grammar import is_valid_tag

DOCS_DIR = "docs"
SESSION_PREFIX = "handoff"
STATE_DIR = ".handoff"


def docs_dir(project_dir: Path) -> Path:
    return project_dir / DOCS_DIR


def state_dir(project_dir: Path) -> Path:
    """Private directory for audit log and backups."""
    return docs_dir(project_dir) / STATE_DIR


def session_folder_name(session: str | None) -> str:
    """`handoff` for the default session, `handoff-<slug>` otherwise."""
    if not session:
        return SESSION_PREFIX
    if not is_valid_tag(session):
        raise ValueError(f"Invalid session slug '{session}': use lowercase letters, digits and single hyphens")
    return f"{SESSION_PREFIX}-{session}"


def session_dir(project_dir: Path, session: str | None = None) -> Path:
    return docs_dir(project_dir) / session_folder_name(session)


def find_session_folders(project_dir: Path) -> list[Path]:
    """All handoff* folders under docs/, sorted by name."""
    base = docs_dir(project_dir)
    if not base.is_dir():
        return []
    return sorted(p for p in base.iterdir() if p.is_dir() and p.name.startswith(SESSION_PREFIX))


def list_markdown_files(folder: Path) -> list[str]:
    """Sorted names of the markdown files directly inside `folder`."""
    if not folder.is_dir():
        return []
    return sorted(p.name for p in folder.iterdir() if p.is_file() and p.suffix == ".md")


def count_lines(path: Path) -> int:
    return len(path.read_text(encoding="utf-8").split("\n"))


def estimate_tokens(path: Path) -> int:
    """Rough token estimate (four characters per token)."""
    return len(path.read_text(encoding="utf-8")) // 4


# package.json dependency -> display name
_NODE_STACK = {
    "react": "React",
    "typescript": "TypeScript",
    "vite": "Vite",
    "next": "Next.js",
    "@supabase/supabase-js": "Supabase",
    "tailwindcss": "Tailwind CSS",
    "stripe": "Stripe",
    "@playwright/test": "Playwright",
}

# marker file -> display name
_FILE_STACK = {
    "pyproject.toml": "Python",
    "setup.py": "Python",
    "Cargo.toml": "Rust",
    "go.mod": "Go",
    "Gemfile": "Ruby",
}


def detect_tech_stack(project_dir: Path) -> list[str]:
    """Best-effort stack detection from manifest files."""
    stack: list[str] = []

    pkg_path = project_dir / "package.json"
    if pkg_path.is_file():
        try:
            pkg = json.loads(pkg_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError):
            pkg = {}
        if not isinstance(pkg, dict):
            pkg = {}
        deps: dict = {}
        for key in ("dependencies", "devDependencies"):
            section = pkg.get(key)
            if isinstance(section, dict):
                deps.update(section)
        stack.append("Node.js")
        stack.extend(name for dep, name in _NODE_STACK.items() if dep in deps)

    for marker, name in _FILE_STACK.items():
        if (project_dir / marker).is_file() and name not in stack:
            stack.append(name)

    return stack or ["Not detected"]
