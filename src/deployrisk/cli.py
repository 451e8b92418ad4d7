"""Command-line interface for deployrisk."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from deployrisk import __version__
from deployrisk.assessment.models import RiskLevel
from deployrisk.config import (
    ProjectConfig,
    apply_action_inputs,
    find_project_root,
    load_config,
    save_config,
    set_config_value,
)
from deployrisk.exceptions import DeployRiskError
from deployrisk.providers.factory import PROVIDERS
from deployrisk.ui.console import Console, setup_logging

console = Console()

FAIL_ON_EXIT_CODE = 2


def _get_project_root(path: str | None = None) -> Path:
    """Resolve the project root; falls back to the current directory."""
    if path:
        root = Path(path).resolve()
        if not root.exists():
            console.error(f"Path does not exist: {path}")
            sys.exit(1)
        return root
    return find_project_root() or Path.cwd()


def _load_config_or_exit(root: Path) -> ProjectConfig:
    try:
        return load_config(root)
    except DeployRiskError as e:
        console.error(str(e))
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="deployrisk")
@click.option("--verbose", "-v", is_flag=True, help="Log progress to stderr.")
def main(verbose: bool):
    """deployrisk - score the deployment risk of a code change."""
    setup_logging(verbose)


@main.command()
@click.option("--path", "-p", default=None, help="Path to the project root.")
@click.option("--files-threshold", type=int, default=None, help="Files changed at which the files factor maxes out.")
@click.option("--lines-threshold", type=int, default=None, help="Lines changed at which the lines factor maxes out.")
@click.option("--critical-path", "critical_paths", multiple=True, help="Critical path pattern (repeatable).")
def init(
    path: str | None,
    files_threshold: int | None,
    lines_threshold: int | None,
    critical_paths: tuple[str, ...],
):
    """Create .deployrisk/config.json for a repository."""
    root = Path(path or ".").resolve()
    if not root.exists():
        console.error(f"Path does not exist: {root}")
        sys.exit(1)

    config = _load_config_or_exit(root)
    config.name = root.name
    config.root_path = str(root)

    if files_threshold is not None:
        config.risk.files_threshold = files_threshold
    if lines_threshold is not None:
        config.risk.lines_threshold = lines_threshold
    if critical_paths:
        config.risk.critical_paths = [p.strip() for p in critical_paths if p.strip()]

    save_config(root, config)
    console.success(f"Configuration saved for {root.name}")


@main.command()
@click.option("--path", "-p", default=None, help="Path to the project root.")
@click.option(
    "--provider",
    type=click.Choice(PROVIDERS),
    default="auto",
    help="Where change metrics come from.",
)
@click.option("--base", "-b", default=None, help="Base branch to diff against.")
@click.option("--files", "files_changed", type=click.IntRange(min=0), default=None, help="Number of files changed.")
@click.option("--additions", type=click.IntRange(min=0), default=None, help="Lines added.")
@click.option("--deletions", type=click.IntRange(min=0), default=None, help="Lines deleted.")
@click.option("--changed-file", "changed_files", multiple=True, help="Changed file path (repeatable).")
@click.option(
    "--touches-critical/--no-touches-critical",
    default=None,
    help="Override critical path detection.",
)
@click.option("--seed", type=int, default=None, help="Seed for the synthetic provider.")
@click.option(
    "--format", "output_format",
    type=click.Choice(["console", "json", "markdown"]),
    default="console",
    help="Output format.",
)
@click.option(
    "--fail-on",
    type=click.Choice([level.value for level in RiskLevel]),
    default=None,
    help="Exit with status 2 when the risk level is at or above this level.",
)
def assess(
    path: str | None,
    provider: str,
    base: str | None,
    files_changed: int | None,
    additions: int | None,
    deletions: int | None,
    changed_files: tuple[str, ...],
    touches_critical: bool | None,
    seed: int | None,
    output_format: str,
    fail_on: str | None,
):
    """Score a change and print the risk assessment.

    Metrics come from the git diff against the base branch by default:

        deployrisk assess --base main

    or can be given explicitly:

        deployrisk assess --files 12 --additions 340 --deletions 80
    """
    root = _get_project_root(path)
    config = _load_config_or_exit(root)

    from deployrisk.github.action import run_risk_assessment
    from deployrisk.providers.factory import create_provider

    if any(v is not None for v in (files_changed, additions, deletions)):
        provider = "static"

    try:
        metrics_provider = create_provider(
            provider,
            root=root,
            base=base or config.github.base_branch,
            seed=seed,
            files_changed=files_changed or 0,
            additions=additions or 0,
            deletions=deletions or 0,
            changed_files=list(changed_files),
        )
        report = run_risk_assessment(
            config, metrics_provider, touches_critical_paths=touches_critical
        )
    except DeployRiskError as e:
        console.error(str(e))
        sys.exit(1)

    assessment = report.assessment
    if output_format == "json":
        data = assessment.model_dump(mode="json")
        data["critical_files"] = report.critical_files
        data["source"] = report.change_set.source
        click.echo(json.dumps(data, indent=2))
    elif output_format == "markdown":
        click.echo(report.summary)
    else:
        console.show_assessment(assessment, report.critical_files)

    if fail_on and assessment.risk_level.rank >= RiskLevel(fail_on).rank:
        sys.exit(FAIL_ON_EXIT_CODE)


@main.command()
@click.option("--path", "-p", default=None, help="Path to the project root.")
@click.option(
    "--provider",
    type=click.Choice(PROVIDERS),
    default="auto",
    help="Where change metrics come from.",
)
@click.option(
    "--comment/--no-comment",
    default=None,
    help="Post the summary as a PR comment (default: github.post_comment).",
)
def ci(path: str | None, provider: str, comment: bool | None):
    """Run as a GitHub Action step.

    Reads the action inputs (files-changed-threshold, lines-changed-threshold,
    critical-paths), writes the risk-score, risk-level, recommendation and
    analysis outputs, and appends the assessment to the job summary.
    """
    from deployrisk.github.action import (
        action_outputs,
        error_command,
        post_github_comment,
        run_risk_assessment,
        warning_command,
        write_outputs,
        write_step_summary,
    )
    from deployrisk.providers.factory import create_provider

    root = _get_project_root(path)
    try:
        config = apply_action_inputs(load_config(root))
        metrics_provider = create_provider(
            provider, root=root, base=config.github.base_branch
        )
        report = run_risk_assessment(config, metrics_provider)
        assessment = report.assessment
        write_outputs(action_outputs(assessment))
        write_step_summary(report.summary)

        should_comment = config.github.post_comment if comment is None else comment
        commented = should_comment and post_github_comment(
            report.summary, marker=config.github.comment_marker
        )
    except (DeployRiskError, OSError) as e:
        click.echo(error_command(str(e)))
        sys.exit(1)

    click.echo("::group::Risk Assessment Results")
    click.echo(f"Risk Score: {assessment.risk_score}/100")
    click.echo(f"Risk Level: {assessment.risk_level.value.upper()}")
    click.echo(f"Recommendation: {assessment.recommendation}")
    click.echo(f"Approval: {assessment.approval_required}")
    click.echo("::endgroup::")

    warning = warning_command(assessment)
    if warning:
        click.echo(warning)

    if commented:
        console.success("Posted risk assessment comment to PR")
    elif should_comment:
        console.warning("Could not post comment (missing GITHUB_TOKEN or PR context)")


# =========================================================================
# Config Management
# =========================================================================

@main.command("config")
@click.argument("action", type=click.Choice(["set", "get", "show"]))
@click.argument("key", required=False)
@click.argument("value", required=False)
@click.option("--path", "-p", default=None, help="Path to the project root.")
def config_cmd(action: str, key: str | None, value: str | None, path: str | None):
    """Manage deployrisk configuration."""
    root = _get_project_root(path)
    config = _load_config_or_exit(root)

    if action == "show":
        console.console.print_json(json.dumps(config.model_dump(), indent=2))
    elif action == "get":
        if not key:
            console.error("Usage: deployrisk config get <key>")
            sys.exit(1)
        data = config.model_dump()
        for part in key.split("."):
            if isinstance(data, dict) and part in data:
                data = data[part]
            else:
                console.error(f"Unknown key: {key}")
                sys.exit(1)
        console.console.print(f"{key} = {data}")
    elif action == "set":
        if not key or value is None:
            console.error("Usage: deployrisk config set <key> <value>")
            sys.exit(1)
        try:
            # Try to parse as JSON for non-string values
            try:
                parsed_value = json.loads(value)
            except json.JSONDecodeError:
                parsed_value = value

            config = set_config_value(config, key, parsed_value)
            save_config(root, config)
            console.success(f"Set {key} = {parsed_value}")
        except KeyError:
            console.error(f"Unknown config key: {key}")
            sys.exit(1)
        except DeployRiskError as e:
            console.error(str(e))
            sys.exit(1)


if __name__ == "__main__":
    main()
