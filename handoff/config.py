"""Project config: which quality gates run and how."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path

from .errors import ConfigError
from .session import docs_dir

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "handoff.config.json"


@dataclass
class GateConfig:
    command: str
    enabled: bool = True
    required: bool = False


def default_gates() -> dict[str, GateConfig]:
    return {
        "typecheck": GateConfig(command="npx tsc --noEmit", enabled=True, required=True),
        "lint": GateConfig(command="npm run lint", enabled=True, required=False),
        "build": GateConfig(command="npm run build", enabled=True, required=True),
    }


@dataclass
class ProjectConfig:
    gates: dict[str, GateConfig] = field(default_factory=default_gates)

    @property
    def enabled_gates(self) -> dict[str, GateConfig]:
        return {name: gate for name, gate in self.gates.items() if gate.enabled}

    def to_dict(self) -> dict:
        return {name: asdict(gate) for name, gate in self.gates.items()}


def config_path(project_dir: Path) -> Path:
    return docs_dir(project_dir) / CONFIG_FILENAME


def _gate_from_dict(name: str, data: object) -> GateConfig:
    if isinstance(data, str):
        return GateConfig(command=data)
    if not isinstance(data, dict) or not isinstance(data.get("command"), str):
        raise ConfigError(f"Gate '{name}' must be a command string or an object with a 'command' string")
    return GateConfig(
        command=data["command"],
        enabled=bool(data.get("enabled", True)),
        required=bool(data.get("required", False)),
    )


def load_config(project_dir: Path) -> ProjectConfig:
    """Load the project config, falling back to defaults when the file is absent."""
    path = config_path(project_dir)
    if not path.exists():
        logger.debug("No config at %s, using default gates", path)
        return ProjectConfig()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"{path}: invalid JSON ({e})") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected an object mapping gate names to commands")

    return ProjectConfig(gates={name: _gate_from_dict(name, value) for name, value in data.items()})


def write_config(project_dir: Path, config: ProjectConfig) -> Path:
    path = config_path(project_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config.to_dict(), indent=2) + "\n", encoding="utf-8")
    return path
