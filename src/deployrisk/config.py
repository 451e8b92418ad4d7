"""Configuration management for deployrisk."""

from __future__ import annotations

import json
import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from deployrisk.assessment.models import AssessmentConfig
from deployrisk.assessment.paths import normalize_paths
from deployrisk.exceptions import ConfigError

DEPLOYRISK_DIR = ".deployrisk"
CONFIG_FILE = "config.json"

# GitHub Actions exposes `with:` inputs as INPUT_<NAME>, upper-cased with
# spaces turned into underscores; hyphens are kept.
ACTION_INPUTS = {
    "files-changed-threshold": "files_threshold",
    "lines-changed-threshold": "lines_threshold",
    "critical-paths": "critical_paths",
}

# Numeric inputs are read up to the first non-digit, so "10.0" and
# "10 files" both mean 10.
LEADING_INT = re.compile(r"[+-]?\d+")


class RiskConfig(BaseModel):
    """Scoring thresholds and critical paths."""

    files_threshold: int = 10
    lines_threshold: int = 500
    critical_paths: list[str] = Field(default_factory=list)

    @field_validator("critical_paths", mode="before")
    @classmethod
    def _split_paths(cls, value: Any) -> list[str]:
        return normalize_paths(value)

    def to_assessment_config(self, touches_critical_paths: bool) -> AssessmentConfig:
        return AssessmentConfig(
            files_threshold=self.files_threshold,
            lines_threshold=self.lines_threshold,
            critical_paths=tuple(self.critical_paths),
            touches_critical_paths=touches_critical_paths,
        )


class GitHubConfig(BaseModel):
    """GitHub integration configuration."""

    base_branch: str = "main"
    post_comment: bool = False
    comment_marker: str = "<!-- deployrisk -->"


class ProjectConfig(BaseModel):
    """Full project configuration."""

    name: str = ""
    root_path: str = "."
    risk: RiskConfig = Field(default_factory=RiskConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)


def find_project_root(start: Path | None = None) -> Path | None:
    """Walk up from `start` looking for a .deployrisk directory."""
    current = (start or Path.cwd()).resolve()
    while current != current.parent:
        if (current / DEPLOYRISK_DIR).is_dir():
            return current
        current = current.parent
    if (current / DEPLOYRISK_DIR).is_dir():
        return current
    return None


def get_deployrisk_dir(root: Path) -> Path:
    """Get the .deployrisk directory for a project root."""
    return root / DEPLOYRISK_DIR


def load_config(root: Path) -> ProjectConfig:
    """Load configuration from .deployrisk/config.json, or defaults if absent."""
    config_path = get_deployrisk_dir(root) / CONFIG_FILE
    if not config_path.exists():
        return ProjectConfig(name=root.name, root_path=str(root))
    try:
        data = json.loads(config_path.read_text())
        return ProjectConfig(**data)
    except (json.JSONDecodeError, TypeError) as e:
        raise ConfigError(f"Could not read {config_path}: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {config_path}: {e}") from e


def save_config(root: Path, config: ProjectConfig) -> None:
    """Save configuration to .deployrisk/config.json."""
    dr_dir = get_deployrisk_dir(root)
    dr_dir.mkdir(parents=True, exist_ok=True)
    config_path = dr_dir / CONFIG_FILE
    config_path.write_text(json.dumps(config.model_dump(), indent=2))


def set_config_value(config: ProjectConfig, key: str, value: Any) -> ProjectConfig:
    """Set a nested config value using dot notation (e.g., 'risk.files_threshold')."""
    parts = key.split(".")
    data = config.model_dump()
    target = data
    for part in parts[:-1]:
        if part not in target or not isinstance(target[part], dict):
            raise KeyError(f"Invalid config key: {key}")
        target = target[part]
    if parts[-1] not in target:
        raise KeyError(f"Invalid config key: {key}")
    target[parts[-1]] = value
    try:
        return ProjectConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid value for {key}: {value!r}") from e


def _read_input(environ: Mapping[str, str], name: str) -> str | None:
    for env_name in (f"INPUT_{name.upper()}", f"INPUT_{name.upper().replace('-', '_')}"):
        raw = environ.get(env_name)
        if raw is not None and raw.strip():
            return raw.strip()
    return None


def apply_action_inputs(
    config: ProjectConfig, environ: Mapping[str, str] | None = None
) -> ProjectConfig:
    """Override risk settings with GitHub Action inputs present in the environment.

    Empty inputs are ignored so that the project config (or the defaults)
    still apply.
    """
    env = os.environ if environ is None else environ
    updates: dict[str, Any] = {}
    for input_name, field in ACTION_INPUTS.items():
        raw = _read_input(env, input_name)
        if raw is None:
            continue
        if field == "critical_paths":
            updates[field] = normalize_paths(raw)
        else:
            match = LEADING_INT.match(raw)
            if not match:
                raise ConfigError(
                    f"Input '{input_name}' must be an integer, got {raw!r}"
                )
            updates[field] = int(match.group())

    if not updates:
        return config
    risk = config.risk.model_copy(update=updates)
    return config.model_copy(update={"risk": risk})
