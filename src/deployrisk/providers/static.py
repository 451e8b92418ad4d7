"""Providers that do not talk to a source-control host."""

from __future__ import annotations

import random

from deployrisk.assessment.models import ChangeMetrics
from deployrisk.providers.base import ChangeSet, MetricsProvider


class StaticMetricsProvider(MetricsProvider):
    """Returns metrics given up front (CLI flags, tests)."""

    name = "static"

    def __init__(
        self,
        files_changed: int = 0,
        additions: int = 0,
        deletions: int = 0,
        changed_files: list[str] | None = None,
        touches_critical_paths: bool | None = None,
    ) -> None:
        self.metrics = ChangeMetrics(
            files_changed=files_changed,
            additions=additions,
            deletions=deletions,
        )
        self.changed_files = list(changed_files or [])
        self.touches_critical_paths = touches_critical_paths

    def collect(self) -> ChangeSet:
        return ChangeSet(
            metrics=self.metrics,
            changed_files=self.changed_files,
            source=self.name,
            touches_critical_paths=self.touches_critical_paths,
        )


class SyntheticMetricsProvider(MetricsProvider):
    """Generates plausible demo metrics from a seeded random generator.

    Ranges: 1-30 files, 50-449 additions, 20-219 deletions; the change is
    flagged as touching critical paths when a draw exceeds 0.6.
    """

    name = "synthetic"

    def __init__(self, seed: int | None = None, rng: random.Random | None = None) -> None:
        self.rng = rng or random.Random(seed)

    def collect(self) -> ChangeSet:
        files_changed = self.rng.randint(1, 30)
        additions = self.rng.randint(50, 449)
        deletions = self.rng.randint(20, 219)
        touches = self.rng.random() > 0.6
        return ChangeSet(
            metrics=ChangeMetrics(
                files_changed=files_changed,
                additions=additions,
                deletions=deletions,
            ),
            changed_files=[f"synthetic/file_{i}.py" for i in range(1, files_changed + 1)],
            source=self.name,
            touches_critical_paths=touches,
        )
