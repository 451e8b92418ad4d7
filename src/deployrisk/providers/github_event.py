"""Metrics from the GitHub Actions pull_request event payload."""

from __future__ import annotations

import json
import logging
import os
import subprocess
from pathlib import Path

from deployrisk.assessment.models import ChangeMetrics
from deployrisk.exceptions import DeployRiskError, MetricsUnavailableError
from deployrisk.github.diff_parser import changed_paths, get_git_diff, parse_diff
from deployrisk.providers.base import ChangeSet, MetricsProvider

logger = logging.getLogger("deployrisk.providers")


def load_event(event_path: str | os.PathLike | None = None) -> dict:
    """Read the webhook payload that triggered the workflow run."""
    path = event_path or os.environ.get("GITHUB_EVENT_PATH")
    if not path or not Path(path).exists():
        raise MetricsUnavailableError("No GitHub event payload found (GITHUB_EVENT_PATH)")
    try:
        with open(path) as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise MetricsUnavailableError(f"Could not read GitHub event payload {path}: {e}") from e


def has_pull_request(event_path: str | os.PathLike | None = None) -> bool:
    """Check whether the current workflow run was triggered by a pull request."""
    try:
        return bool(load_event(event_path).get("pull_request"))
    except MetricsUnavailableError:
        return False


def list_pr_files(repo: str, pr_number: int) -> list[str]:
    """List the files of a pull request through the `gh` CLI.

    Returns an empty list when `gh` is unavailable or the call fails.
    """
    try:
        result = subprocess.run(
            ["gh", "api", "--paginate", f"repos/{repo}/pulls/{pr_number}/files",
             "--jq", ".[].filename"],
            capture_output=True, text=True, timeout=30,
        )
    except (subprocess.TimeoutExpired, FileNotFoundError) as e:
        logger.warning("Could not list PR files via gh: %s", e)
        return []
    if result.returncode != 0:
        logger.warning("gh api failed listing PR files: %s", result.stderr.strip())
        return []
    return [line.strip() for line in result.stdout.splitlines() if line.strip()]


class PullRequestEventMetricsProvider(MetricsProvider):
    """Takes the PR size from the event payload and the file list from the API.

    When the API call yields nothing, the file list falls back to a git diff
    against the PR base branch.
    """

    name = "event"

    def __init__(
        self,
        event_path: str | os.PathLike | None = None,
        repo: str | None = None,
        root: Path | None = None,
    ) -> None:
        self.event_path = event_path
        self.repo = repo if repo is not None else os.environ.get("GITHUB_REPOSITORY", "")
        self.root = root or Path.cwd()

    def collect(self) -> ChangeSet:
        event = load_event(self.event_path)
        pr = event.get("pull_request")
        if not pr:
            raise MetricsUnavailableError("The triggering event is not a pull request")

        metrics = ChangeMetrics(
            files_changed=pr.get("changed_files") or 0,
            additions=pr.get("additions") or 0,
            deletions=pr.get("deletions") or 0,
        )
        pr_number = pr.get("number") or event.get("number")
        logger.info(
            "PR #%s: %d files, +%d/-%d",
            pr_number, metrics.files_changed, metrics.additions, metrics.deletions,
        )

        files: list[str] = []
        if self.repo and pr_number:
            files = list_pr_files(self.repo, pr_number)
        if not files:
            base_ref = (pr.get("base") or {}).get("ref") or "main"
            try:
                files = changed_paths(parse_diff(get_git_diff(self.root, f"origin/{base_ref}")))
            except DeployRiskError as e:
                logger.warning("No changed file list available: %s", e)

        return ChangeSet(
            metrics=metrics,
            changed_files=files,
            source=f"{self.name}:#{pr_number}",
        )
