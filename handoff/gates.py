"""Quality-gate and git-log runners.

External commands are black boxes: output is captured, failures become
`GateResult(passed=False)` and nothing is retried.
"""

from __future__ import annotations

import logging
import re
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from .config import ProjectConfig
from .errors import CommandFailed

logger = logging.getLogger(__name__)

GATE_TIMEOUT_SECONDS = 300
GIT_TIMEOUT_SECONDS = 10

# Lines that look like a compiler or linter error
ERROR_LINE = re.compile(r"\berror\b", re.IGNORECASE)


@dataclass
class CommandOutput:
    stdout: str
    stderr: str


@dataclass
class GateResult:
    name: str
    command: str
    passed: bool
    error_count: int
    output: str
    required: bool = False


Runner = Callable[[str, Path, float], CommandOutput]


def run_command(command: str, cwd: Path, timeout: float = GATE_TIMEOUT_SECONDS) -> CommandOutput:
    """Run a command and return its output, raising CommandFailed on any failure."""
    try:
        result = subprocess.run(
            shlex.split(command),
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        raise CommandFailed(command, f"timed out after {timeout}s") from e
    except OSError as e:
        raise CommandFailed(command, f"could not start ({e.strerror or e})") from e

    if result.returncode != 0:
        raise CommandFailed(
            command,
            f"exited with code {result.returncode}",
            stdout=result.stdout,
            stderr=result.stderr,
            returncode=result.returncode,
        )
    return CommandOutput(stdout=result.stdout, stderr=result.stderr)


def count_errors(output: str) -> int:
    return sum(1 for line in output.splitlines() if ERROR_LINE.search(line))


def run_gate(name: str, command: str, cwd: Path, runner: Runner = run_command, required: bool = False) -> GateResult:
    """Run one gate; a failing command is a failed gate, never an exception."""
    try:
        out = runner(command, cwd, GATE_TIMEOUT_SECONDS)
    except CommandFailed as e:
        logger.info("Gate %s failed: %s", name, e)
        output = "\n".join(part for part in (e.stdout, e.stderr, str(e)) if part)
        return GateResult(
            name=name,
            command=command,
            passed=False,
            error_count=max(1, count_errors(e.stdout + "\n" + e.stderr)),
            output=output,
            required=required,
        )

    output = "\n".join(part for part in (out.stdout, out.stderr) if part)
    return GateResult(name=name, command=command, passed=True, error_count=0, output=output, required=required)


def run_gates(config: ProjectConfig, cwd: Path, runner: Runner = run_command) -> list[GateResult]:
    return [
        run_gate(name, gate.command, cwd, runner=runner, required=gate.required)
        for name, gate in config.enabled_gates.items()
    ]


def recent_commits(cwd: Path, count: int = 10, runner: Runner = run_command) -> list[str]:
    """One-line summaries of the latest commits, or [] outside a git repo."""
    try:
        out = runner(f"git log --oneline -n {int(count)}", cwd, GIT_TIMEOUT_SECONDS)
    except CommandFailed as e:
        logger.debug("git log unavailable: %s", e)
        return []
    return [line.strip() for line in out.stdout.splitlines() if line.strip()]
