"""Shared test fixtures for deployrisk."""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from pathlib import Path

import pytest

from deployrisk.assessment.models import AssessmentConfig
from deployrisk.config import ProjectConfig, RiskConfig, save_config

GITHUB_ENV_VARS = (
    "GITHUB_OUTPUT",
    "GITHUB_STEP_SUMMARY",
    "GITHUB_EVENT_PATH",
    "GITHUB_TOKEN",
    "GITHUB_REPOSITORY",
    "GITHUB_BASE_REF",
)


@pytest.fixture(autouse=True)
def clean_github_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests independent of the CI environment they run in."""
    for name in GITHUB_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    for name in list(os.environ):
        if name.startswith("INPUT_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def scoring_config() -> AssessmentConfig:
    """Thresholds used by the worked examples (10 files, 300 lines)."""
    return AssessmentConfig(files_threshold=10, lines_threshold=300)


@pytest.fixture
def project_config() -> ProjectConfig:
    return ProjectConfig(
        name="shop",
        risk=RiskConfig(
            files_threshold=10,
            lines_threshold=300,
            critical_paths=["src/auth", "migrations/*.sql"],
        ),
    )


@pytest.fixture
def tmp_project(tmp_path: Path, project_config: ProjectConfig) -> Path:
    """A project directory with a saved .deployrisk/config.json."""
    project_config.root_path = str(tmp_path)
    save_config(tmp_path, project_config)
    return tmp_path


@pytest.fixture
def pr_event(tmp_path: Path) -> Path:
    """A pull_request event payload like the one GitHub writes to GITHUB_EVENT_PATH."""
    event = {
        "action": "synchronize",
        "number": 42,
        "pull_request": {
            "number": 42,
            "changed_files": 30,
            "additions": 50,
            "deletions": 350,
            "base": {"ref": "main"},
        },
    }
    path = tmp_path / "event.json"
    path.write_text(json.dumps(event))
    return path


def _parse_github_output(path: Path) -> dict[str, str]:
    outputs: dict[str, str] = {}
    lines = path.read_text().splitlines()
    i = 0
    while i < len(lines):
        name, delimiter = lines[i].split("<<", 1)
        i += 1
        value_lines = []
        while lines[i] != delimiter:
            value_lines.append(lines[i])
            i += 1
        outputs[name] = "\n".join(value_lines)
        i += 1
    return outputs


@pytest.fixture
def read_outputs():
    """Parse a $GITHUB_OUTPUT file written in heredoc form."""
    return _parse_github_output
