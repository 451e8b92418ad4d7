"""Metrics from the local git repository."""

from __future__ import annotations

import logging
from pathlib import Path

from deployrisk.github.diff_parser import changed_paths, get_git_diff, parse_diff, summarize_diffs
from deployrisk.providers.base import ChangeSet, MetricsProvider

logger = logging.getLogger("deployrisk.providers")


class GitDiffMetricsProvider(MetricsProvider):
    """Diffs the working branch against a base ref and counts the changes."""

    name = "git"

    def __init__(self, root: Path, base: str = "main") -> None:
        self.root = root
        self.base = base

    def collect(self) -> ChangeSet:
        diff_text = get_git_diff(self.root, self.base)
        file_diffs = parse_diff(diff_text)
        metrics = summarize_diffs(file_diffs)
        logger.info(
            "git diff against %s: %d files, +%d/-%d",
            self.base, metrics.files_changed, metrics.additions, metrics.deletions,
        )
        return ChangeSet(
            metrics=metrics,
            changed_files=changed_paths(file_diffs),
            source=f"{self.name}:{self.base}",
        )
