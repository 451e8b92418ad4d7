"""Markdown renderer for deployment risk assessments.

Generates the GitHub-flavored markdown used for the job step summary and
the optional PR comment:
  - Risk score with a color-coded level badge
  - Factor breakdown table
  - Recommendation and required approval
  - Changed files that hit critical paths
"""

from __future__ import annotations

from deployrisk.assessment.models import Assessment, RiskLevel

MAX_LISTED_FILES = 15


def render_summary(
    assessment: Assessment,
    critical_files: list[str] | None = None,
    source: str = "",
) -> str:
    """Render an assessment as a GitHub markdown summary."""
    sections: list[str] = []

    sections.append("## Deployment Risk Assessment")
    sections.append("")

    emoji, label = _risk_badge(assessment.risk_level)
    sections.append(f"### {emoji} Risk Score: {assessment.risk_score}/100 - {label}")
    sections.append("")

    m = assessment.metrics
    sections.append(
        f"> {m.files_changed} files changed, "
        f"{m.total_lines} lines (+{m.additions}/-{m.deletions})"
        + (f" · source: `{source}`" if source else "")
    )
    sections.append("")

    sections.append("| Factor | Value | Threshold | Score | Impact |")
    sections.append("|:-------|:-----:|:---------:|:-----:|:------:|")
    for f in assessment.factors:
        sections.append(
            f"| {f.name} | {f.value} | {f.threshold} | {f.score} | {f.impact.value} |"
        )
    sections.append("")

    sections.append("### Recommendation")
    sections.append("")
    sections.append(f"> {assessment.recommendation}")
    sections.append("")

    sections.append("### Required Approval")
    sections.append("")
    sections.append(f"> {assessment.approval_required}")
    sections.append("")

    if critical_files:
        sections.append("<details>")
        sections.append(
            f"<summary>Critical paths touched ({len(critical_files)} files)</summary>"
        )
        sections.append("")
        for path in critical_files[:MAX_LISTED_FILES]:
            sections.append(f"- `{path}`")
        if len(critical_files) > MAX_LISTED_FILES:
            sections.append(f"- ... and {len(critical_files) - MAX_LISTED_FILES} more")
        sections.append("")
        sections.append("</details>")
        sections.append("")

    sections.append(_footer(assessment))
    return "\n".join(sections)


def _risk_badge(level: RiskLevel) -> tuple[str, str]:
    """Return (emoji, label) for a risk level."""
    emoji = {
        RiskLevel.LOW: "🟢",
        RiskLevel.MEDIUM: "🟡",
        RiskLevel.HIGH: "🟠",
        RiskLevel.CRITICAL: "🔴",
    }[level]
    return emoji, level.value.upper()


def _footer(assessment: Assessment) -> str:
    return (
        "---\n"
        f"*Generated by deployrisk at {assessment.timestamp.isoformat()}*"
    )
