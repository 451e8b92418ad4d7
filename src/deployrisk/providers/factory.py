"""Factory for creating metrics providers by name."""

from __future__ import annotations

import os
from pathlib import Path

from deployrisk.exceptions import ProviderError
from deployrisk.providers.base import MetricsProvider

PROVIDERS = ("auto", "event", "git", "static", "synthetic")


def create_provider(
    name: str,
    root: Path | None = None,
    base: str = "main",
    seed: int | None = None,
    event_path: str | None = None,
    **static_values,
) -> MetricsProvider:
    """Create a metrics provider.

    Args:
        name: One of ``auto``, ``event``, ``git``, ``static``, ``synthetic``.
            ``auto`` picks the event provider inside a pull_request workflow
            run and the git provider otherwise.
        root: Repository root for git-based providers.
        base: Base ref for the git provider.
        seed: Seed for the synthetic provider.
        event_path: Event payload path; defaults to ``GITHUB_EVENT_PATH``.
        **static_values: Passed to ``StaticMetricsProvider``.

    Raises:
        ProviderError: If the provider name is unknown.
    """
    provider = name.lower()
    root = root or Path.cwd()

    if provider == "auto":
        from deployrisk.providers.github_event import has_pull_request

        if has_pull_request(event_path):
            provider = "event"
        else:
            provider = "git"
            if os.environ.get("GITHUB_BASE_REF"):
                base = f"origin/{os.environ['GITHUB_BASE_REF']}"

    if provider == "event":
        from deployrisk.providers.github_event import PullRequestEventMetricsProvider

        return PullRequestEventMetricsProvider(event_path=event_path, root=root)
    elif provider == "git":
        from deployrisk.providers.git import GitDiffMetricsProvider

        return GitDiffMetricsProvider(root, base=base)
    elif provider == "static":
        from deployrisk.providers.static import StaticMetricsProvider

        return StaticMetricsProvider(**static_values)
    elif provider == "synthetic":
        from deployrisk.providers.static import SyntheticMetricsProvider

        return SyntheticMetricsProvider(seed=seed)
    else:
        raise ProviderError(
            f"Unknown metrics provider: '{name}'. "
            f"Supported providers: {', '.join(PROVIDERS)}"
        )
