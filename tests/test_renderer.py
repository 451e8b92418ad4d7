"""Tests for the markdown renderer."""

from __future__ import annotations

from deployrisk.assessment.models import AssessmentConfig, ChangeMetrics, RiskLevel
from deployrisk.assessment.scorer import assess
from deployrisk.github.renderer import MAX_LISTED_FILES, _risk_badge, render_summary


def _medium(fixed_now):
    return assess(
        ChangeMetrics(files_changed=5, additions=100, deletions=20),
        AssessmentConfig(files_threshold=10, lines_threshold=300),
        now=fixed_now,
    )


class TestRenderer:
    def test_risk_badge(self):
        assert _risk_badge(RiskLevel.LOW)[1] == "LOW"
        assert _risk_badge(RiskLevel.CRITICAL)[1] == "CRITICAL"
        assert len({_risk_badge(level)[0] for level in RiskLevel}) == 4

    def test_summary_sections(self, fixed_now):
        md = render_summary(_medium(fixed_now))
        assert md.startswith("## Deployment Risk Assessment")
        assert "Risk Score: 29/100 - MEDIUM" in md
        assert "### Recommendation" in md
        assert "> Standard deployment process with monitoring" in md
        assert "### Required Approval" in md
        assert "> Peer review required" in md

    def test_factor_table(self, fixed_now):
        md = render_summary(_medium(fixed_now))
        assert "| Factor | Value | Threshold | Score | Impact |" in md
        assert "| Files Changed | 5 | 10 | 15 | medium |" in md
        assert "| Lines Changed | 120 | 300 | 14 | low |" in md
        assert "| Critical Paths | No | N/A | 0 | none |" in md
        assert "High Deletion Ratio" not in md

    def test_metrics_line_and_source(self, fixed_now):
        md = render_summary(_medium(fixed_now), source="git:main")
        assert "5 files changed, 120 lines (+100/-20)" in md
        assert "`git:main`" in md

    def test_critical_files(self, fixed_now):
        md = render_summary(_medium(fixed_now), critical_files=["src/auth/login.py"])
        assert "Critical paths touched (1 files)" in md
        assert "- `src/auth/login.py`" in md

    def test_critical_files_truncated(self, fixed_now):
        files = [f"src/auth/f{i}.py" for i in range(MAX_LISTED_FILES + 3)]
        md = render_summary(_medium(fixed_now), critical_files=files)
        assert "- ... and 3 more" in md
        assert f"f{MAX_LISTED_FILES}.py" not in md

    def test_footer_timestamp(self, fixed_now):
        md = render_summary(_medium(fixed_now))
        assert fixed_now.isoformat() in md
