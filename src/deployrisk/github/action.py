"""GitHub Action runner - deployment risk assessment for pull requests.

This is the main entry point for the GitHub Action. It:
1. Collects change metrics from a provider (event payload, git diff, ...)
2. Resolves whether the change touches configured critical paths
3. Scores the change
4. Publishes step outputs, the job summary and, optionally, a PR comment

Usage:
    # In a GitHub Action step
    deployrisk ci

    # Locally, against a base branch
    deployrisk assess --base main --format markdown
"""

from __future__ import annotations

import logging
import os
import subprocess
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from deployrisk.assessment.models import Assessment
from deployrisk.assessment.paths import matching_files
from deployrisk.assessment.scorer import assess
from deployrisk.config import ProjectConfig
from deployrisk.github.renderer import render_summary
from deployrisk.providers.base import ChangeSet, MetricsProvider
from deployrisk.providers.github_event import load_event

logger = logging.getLogger("deployrisk.action")

HIGH_RISK_WARNING_SCORE = 50


@dataclass
class RiskReport:
    """An assessment together with the context it was computed from."""
    assessment: Assessment
    change_set: ChangeSet
    critical_files: list[str] = field(default_factory=list)
    summary: str = ""


def resolve_critical_paths(
    change_set: ChangeSet, critical_paths: list[str]
) -> tuple[bool, list[str]]:
    """Decide whether the change touches critical paths.

    An explicit answer from the provider wins; otherwise the changed files
    are matched against the configured patterns.

    Returns:
        (touches, matched_files)
    """
    matched = matching_files(change_set.changed_files, critical_paths)
    if change_set.touches_critical_paths is not None:
        return change_set.touches_critical_paths, matched
    return bool(matched), matched


def run_risk_assessment(
    config: ProjectConfig,
    provider: MetricsProvider,
    touches_critical_paths: bool | None = None,
    now: datetime | None = None,
) -> RiskReport:
    """Run the full pipeline: collect metrics, resolve critical paths, score.

    ``touches_critical_paths`` overrides whatever the provider reports.

    Raises:
        MetricsUnavailableError: If the provider cannot produce metrics.
        InvalidConfigurationError: If a configured threshold is not positive.
    """
    change_set = provider.collect()
    if touches_critical_paths is not None:
        change_set = change_set.model_copy(
            update={"touches_critical_paths": touches_critical_paths}
        )
    metrics = change_set.metrics
    logger.info("Analyzing deployment risk (%s)", change_set.source or provider.name)
    logger.info("Files changed: %d", metrics.files_changed)
    logger.info(
        "Lines changed: %d (+%d/-%d)",
        metrics.total_lines, metrics.additions, metrics.deletions,
    )

    touches, critical_files = resolve_critical_paths(change_set, config.risk.critical_paths)
    if critical_files:
        logger.info("Critical paths touched by: %s", ", ".join(critical_files))

    assessment = assess(metrics, config.risk.to_assessment_config(touches), now=now)
    logger.info(
        "Risk score %d/100 (%s)", assessment.risk_score, assessment.risk_level.value
    )

    summary = render_summary(
        assessment, critical_files=critical_files, source=change_set.source
    )
    return RiskReport(
        assessment=assessment,
        change_set=change_set,
        critical_files=critical_files,
        summary=summary,
    )


def action_outputs(assessment: Assessment) -> dict[str, str]:
    """Step outputs exposed to downstream workflow steps."""
    return {
        "risk-score": str(assessment.risk_score),
        "risk-level": assessment.risk_level.value,
        "recommendation": assessment.recommendation,
        "approval-required": assessment.approval_required,
        "analysis": assessment.model_dump_json(by_alias=True),
    }


def write_outputs(outputs: dict[str, str], output_path: str | None = None) -> bool:
    """Append outputs to the $GITHUB_OUTPUT file.

    Values use the heredoc form so that multi-line JSON is passed intact.
    Returns False when not running inside GitHub Actions.
    """
    path = output_path or os.environ.get("GITHUB_OUTPUT")
    if not path:
        return False

    with open(path, "a", encoding="utf-8") as f:
        for name, value in outputs.items():
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
    return True


def write_step_summary(markdown: str, summary_path: str | None = None) -> bool:
    """Append markdown to the job summary ($GITHUB_STEP_SUMMARY)."""
    path = summary_path or os.environ.get("GITHUB_STEP_SUMMARY")
    if not path:
        return False

    with open(path, "a", encoding="utf-8") as f:
        f.write(markdown)
        f.write("\n")
    return True


def _escape_command_data(message: str) -> str:
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def warning_command(assessment: Assessment) -> str | None:
    """The ::warning:: workflow command for high-risk changes, if any."""
    if assessment.risk_score < HIGH_RISK_WARNING_SCORE:
        return None
    return "::warning::" + _escape_command_data(
        f"High risk deployment detected ({assessment.risk_score}/100). "
        "Extra caution recommended."
    )


def error_command(message: str) -> str:
    """The ::error:: workflow command that marks the step as failed."""
    return "::error::" + _escape_command_data(f"Action failed: {message}")


def post_github_comment(comment: str, marker: str = "<!-- deployrisk -->") -> bool:
    """Post a comment to the current PR using the GitHub API.

    Requires GITHUB_TOKEN and GITHUB_EVENT_PATH environment variables
    (available in GitHub Actions).

    Raises:
        MetricsUnavailableError: If the event payload cannot be read.
    """
    token = os.environ.get("GITHUB_TOKEN")
    if not token:
        return False

    event_path = os.environ.get("GITHUB_EVENT_PATH")
    if not event_path or not Path(event_path).exists():
        return False

    event = load_event(event_path)
    pr_number = (event.get("pull_request") or {}).get("number")
    repo = os.environ.get("GITHUB_REPOSITORY", "")

    if not pr_number or not repo:
        return False

    # Find and update existing comment, or create new one
    comment_with_marker = f"{marker}\n{comment}"

    try:
        result = subprocess.run(
            ["gh", "api", f"repos/{repo}/issues/{pr_number}/comments",
             "--jq", f'[.[] | select(.body | startswith("{marker}"))][0].id'],
            capture_output=True, text=True, timeout=15,
        )

        existing_id = result.stdout.strip()

        if existing_id and existing_id != "null":
            update = subprocess.run(
                ["gh", "api", "--method", "PATCH",
                 f"repos/{repo}/issues/comments/{existing_id}",
                 "-f", f"body={comment_with_marker}"],
                capture_output=True, timeout=15,
            )
            if update.returncode != 0:
                logger.warning("Updating PR comment %s failed", existing_id)
                return False
        else:
            create = subprocess.run(
                ["gh", "api", "--method", "POST",
                 f"repos/{repo}/issues/{pr_number}/comments",
                 "-f", f"body={comment_with_marker}"],
                capture_output=True, timeout=15,
            )
            if create.returncode != 0:
                logger.warning("Creating PR comment failed")
                return False

        return True
    except (subprocess.TimeoutExpired, FileNotFoundError) as e:
        logger.warning("Could not post PR comment: %s", e)
        return False
