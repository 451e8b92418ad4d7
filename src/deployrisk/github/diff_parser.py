"""Git diff parser - extract per-file line counts from unified diffs.

Parses the output of `git diff` into the file list and added/deleted line
counts that the git metrics provider turns into ChangeMetrics.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

from deployrisk.assessment.models import ChangeMetrics
from deployrisk.exceptions import MetricsUnavailableError

logger = logging.getLogger("deployrisk.github")


@dataclass
class FileDiff:
    """Changes to a single file."""
    path: str
    status: str  # 'added', 'modified', 'deleted', 'renamed'
    old_path: str | None = None  # For renames
    added_lines: int = 0
    deleted_lines: int = 0
    binary: bool = False


def parse_diff(diff_text: str) -> list[FileDiff]:
    """Parse unified diff text into structured FileDiff objects."""
    files: list[FileDiff] = []
    current_file: FileDiff | None = None
    in_hunk = False

    for line in diff_text.splitlines():
        # New file header
        if line.startswith("diff --git"):
            if current_file:
                files.append(current_file)
            parts = line.split(" b/")
            path = parts[-1] if len(parts) > 1 else ""
            current_file = FileDiff(path=path, status="modified")
            in_hunk = False
            continue

        if current_file is None:
            continue

        if in_hunk:
            if line.startswith("+"):
                current_file.added_lines += 1
                continue
            if line.startswith("-"):
                current_file.deleted_lines += 1
                continue
            if line.startswith((" ", "\\")) or line == "":
                continue
            in_hunk = False

        # File status markers
        if line.startswith("new file"):
            current_file.status = "added"
        elif line.startswith("deleted file"):
            current_file.status = "deleted"
        elif line.startswith("rename from"):
            current_file.old_path = line.split("rename from ")[-1]
            current_file.status = "renamed"
        elif line.startswith("rename to"):
            current_file.path = line.split("rename to ")[-1]
        elif line.startswith("Binary files"):
            current_file.binary = True
        elif line.startswith("+++ b/"):
            current_file.path = line[6:]
        elif line.startswith("@@"):
            in_hunk = True

    if current_file:
        files.append(current_file)

    return files


def summarize_diffs(file_diffs: list[FileDiff]) -> ChangeMetrics:
    """Aggregate parsed file diffs into change metrics."""
    return ChangeMetrics(
        files_changed=len(file_diffs),
        additions=sum(fd.added_lines for fd in file_diffs),
        deletions=sum(fd.deleted_lines for fd in file_diffs),
    )


def changed_paths(file_diffs: list[FileDiff]) -> list[str]:
    """All paths touched by the diff, including the old side of renames."""
    paths: list[str] = []
    for fd in file_diffs:
        if fd.old_path and fd.old_path not in paths:
            paths.append(fd.old_path)
        if fd.path and fd.path not in paths:
            paths.append(fd.path)
    return paths


def _run_git(args: list[str], root: Path) -> subprocess.CompletedProcess:
    return subprocess.run(
        ["git", *args],
        cwd=root,
        capture_output=True,
        text=True,
        timeout=30,
    )


def get_git_diff(root: Path, base: str = "main") -> str:
    """Get the git diff between the current branch and base."""
    try:
        result = _run_git(["diff", f"{base}...HEAD"], root)
        if result.returncode == 0:
            return result.stdout
        logger.debug("git diff %s...HEAD failed: %s", base, result.stderr.strip())
        # Fallback: diff against base directly
        result = _run_git(["diff", base], root)
    except (subprocess.TimeoutExpired, FileNotFoundError) as e:
        raise MetricsUnavailableError(f"Could not run git diff: {e}") from e

    if result.returncode != 0:
        raise MetricsUnavailableError(
            f"git diff against '{base}' failed: {result.stderr.strip() or 'unknown error'}"
        )
    return result.stdout

