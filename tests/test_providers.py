"""Tests for metrics providers."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from deployrisk.exceptions import MetricsUnavailableError, ProviderError
from deployrisk.providers import github_event
from deployrisk.providers.factory import create_provider
from deployrisk.providers.git import GitDiffMetricsProvider
from deployrisk.providers.github_event import (
    PullRequestEventMetricsProvider,
    has_pull_request,
    load_event,
)
from deployrisk.providers.static import StaticMetricsProvider, SyntheticMetricsProvider

DIFF = """\
diff --git a/src/auth/login.py b/src/auth/login.py
index abc1234..def5678 100644
--- a/src/auth/login.py
+++ b/src/auth/login.py
@@ -1,3 +1,3 @@
-def login():
+def login(user):
     pass
"""


class TestStaticProvider:
    def test_collect(self):
        provider = StaticMetricsProvider(
            files_changed=3, additions=10, deletions=2, changed_files=["a.py"]
        )
        change_set = provider.collect()
        assert change_set.metrics.files_changed == 3
        assert change_set.metrics.total_lines == 12
        assert change_set.changed_files == ["a.py"]
        assert change_set.source == "static"
        assert change_set.touches_critical_paths is None

    def test_explicit_critical_flag(self):
        change_set = StaticMetricsProvider(touches_critical_paths=True).collect()
        assert change_set.touches_critical_paths is True

    def test_rejects_negative_values(self):
        with pytest.raises(ValueError):
            StaticMetricsProvider(files_changed=-1)


class TestSyntheticProvider:
    def test_seeded_is_reproducible(self):
        first = SyntheticMetricsProvider(seed=7).collect()
        second = SyntheticMetricsProvider(seed=7).collect()
        assert first == second

    def test_ranges(self):
        provider = SyntheticMetricsProvider(seed=1)
        for _ in range(50):
            change_set = provider.collect()
            m = change_set.metrics
            assert 1 <= m.files_changed <= 30
            assert 50 <= m.additions <= 449
            assert 20 <= m.deletions <= 219
            assert len(change_set.changed_files) == m.files_changed
            assert change_set.touches_critical_paths in (True, False)


class TestGitProvider:
    def test_collect(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
        seen = {}

        def fake_diff(root, base):
            seen["base"] = base
            return DIFF

        monkeypatch.setattr("deployrisk.providers.git.get_git_diff", fake_diff)
        change_set = GitDiffMetricsProvider(tmp_path, base="develop").collect()

        assert seen["base"] == "develop"
        assert change_set.metrics.files_changed == 1
        assert change_set.metrics.additions == 1
        assert change_set.metrics.deletions == 1
        assert change_set.changed_files == ["src/auth/login.py"]
        assert change_set.source == "git:develop"


class TestEventProvider:
    def test_load_event(self, pr_event: Path):
        assert load_event(pr_event)["pull_request"]["number"] == 42

    def test_load_event_missing(self, tmp_path: Path):
        with pytest.raises(MetricsUnavailableError):
            load_event(tmp_path / "missing.json")
        with pytest.raises(MetricsUnavailableError):
            load_event()

    def test_has_pull_request(self, pr_event: Path, tmp_path: Path):
        push = tmp_path / "push.json"
        push.write_text(json.dumps({"ref": "refs/heads/main"}))
        assert has_pull_request(pr_event)
        assert not has_pull_request(push)
        assert not has_pull_request(tmp_path / "missing.json")

    def test_collect(self, monkeypatch: pytest.MonkeyPatch, pr_event: Path):
        calls = []

        def fake_list(repo, number):
            calls.append((repo, number))
            return ["src/auth/login.py", "README.md"]

        monkeypatch.setattr(github_event, "list_pr_files", fake_list)
        provider = PullRequestEventMetricsProvider(event_path=pr_event, repo="acme/shop")
        change_set = provider.collect()

        assert calls == [("acme/shop", 42)]
        assert change_set.metrics.files_changed == 30
        assert change_set.metrics.additions == 50
        assert change_set.metrics.deletions == 350
        assert change_set.changed_files == ["src/auth/login.py", "README.md"]
        assert change_set.source == "event:#42"

    def test_falls_back_to_git_for_files(
        self, monkeypatch: pytest.MonkeyPatch, pr_event: Path, tmp_path: Path
    ):
        monkeypatch.setattr(github_event, "list_pr_files", lambda repo, number: [])
        monkeypatch.setattr(github_event, "get_git_diff", lambda root, base: DIFF)
        provider = PullRequestEventMetricsProvider(event_path=pr_event, repo="acme/shop", root=tmp_path)
        assert provider.collect().changed_files == ["src/auth/login.py"]

    def test_no_file_list_available(self, monkeypatch: pytest.MonkeyPatch, pr_event: Path):
        def failing_diff(root, base):
            raise MetricsUnavailableError("git missing")

        monkeypatch.setattr(github_event, "get_git_diff", failing_diff)
        provider = PullRequestEventMetricsProvider(event_path=pr_event, repo="")
        change_set = provider.collect()
        assert change_set.changed_files == []
        assert change_set.metrics.files_changed == 30

    def test_not_a_pull_request(self, tmp_path: Path):
        event = tmp_path / "push.json"
        event.write_text(json.dumps({"ref": "refs/heads/main"}))
        with pytest.raises(MetricsUnavailableError):
            PullRequestEventMetricsProvider(event_path=event, repo="acme/shop").collect()


class TestFactory:
    def test_static(self):
        provider = create_provider("static", files_changed=2, additions=5)
        assert isinstance(provider, StaticMetricsProvider)
        assert provider.collect().metrics.additions == 5

    def test_synthetic(self):
        assert isinstance(create_provider("synthetic", seed=3), SyntheticMetricsProvider)

    def test_git(self, tmp_path: Path):
        provider = create_provider("git", root=tmp_path, base="develop")
        assert isinstance(provider, GitDiffMetricsProvider)
        assert provider.base == "develop"

    def test_auto_prefers_event(self, pr_event: Path, tmp_path: Path):
        provider = create_provider("auto", root=tmp_path, event_path=str(pr_event))
        assert isinstance(provider, PullRequestEventMetricsProvider)

    def test_auto_without_event_uses_git(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        provider = create_provider("auto", root=tmp_path)
        assert isinstance(provider, GitDiffMetricsProvider)
        assert provider.base == "main"

        monkeypatch.setenv("GITHUB_BASE_REF", "release")
        assert create_provider("auto", root=tmp_path).base == "origin/release"

    def test_unknown(self):
        with pytest.raises(ProviderError, match="Unknown metrics provider"):
            create_provider("svn")
