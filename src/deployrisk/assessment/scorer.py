"""Deployment risk scoring.

Risk score = files factor (max 30) + lines factor (max 35)
           + critical paths (0 or 25) + high deletion ratio (0 or 10),
rounded once and capped at 100.

Each factor is reported individually so the score stays explainable.
The per-factor ``score`` is the rounded contribution; capping the total does
not rescale the factors.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone

from deployrisk.assessment.models import (
    Assessment,
    AssessmentConfig,
    ChangeMetrics,
    Impact,
    RiskFactor,
    RiskLevel,
)
from deployrisk.exceptions import InvalidConfigurationError

MAX_SCORE = 100

FILES_WEIGHT = 30
LINES_WEIGHT = 35
CRITICAL_PATH_POINTS = 25
DELETION_RATIO_POINTS = 10
DELETION_RATIO_TRIGGER = 0.5

FILES_FACTOR = "Files Changed"
LINES_FACTOR = "Lines Changed"
CRITICAL_PATHS_FACTOR = "Critical Paths"
DELETION_RATIO_FACTOR = "High Deletion Ratio"


@dataclass(frozen=True)
class RiskBand:
    """A classification breakpoint: scores at or above ``min_score`` fall here."""

    min_score: int
    level: RiskLevel
    recommendation: str
    approval_required: str


# Highest first; the first band whose min_score is reached wins.
RISK_BANDS: tuple[RiskBand, ...] = (
    RiskBand(
        75,
        RiskLevel.CRITICAL,
        "Deploy during maintenance window with full team availability",
        "VP approval required",
    ),
    RiskBand(
        50,
        RiskLevel.HIGH,
        "Deploy during low-traffic hours with rollback plan ready",
        "Senior engineer approval required",
    ),
    RiskBand(
        25,
        RiskLevel.MEDIUM,
        "Standard deployment process with monitoring",
        "Peer review required",
    ),
    RiskBand(
        0,
        RiskLevel.LOW,
        "Safe to deploy anytime",
        "Standard review process",
    ),
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    whole = math.floor(value)
    # value - whole is exact, value + 0.5 is not
    return int(whole) + (1 if value - whole >= 0.5 else 0)


def classify(score: int) -> RiskBand:
    """Map a total risk score to its band."""
    for band in RISK_BANDS:
        if score >= band.min_score:
            return band
    return RISK_BANDS[-1]


def _files_factor(metrics: ChangeMetrics, config: AssessmentConfig) -> tuple[float, RiskFactor]:
    raw = min(metrics.files_changed / config.files_threshold * FILES_WEIGHT, FILES_WEIGHT)
    if raw > 20:
        impact = Impact.HIGH
    elif raw > 10:
        impact = Impact.MEDIUM
    else:
        impact = Impact.LOW
    return raw, RiskFactor(
        name=FILES_FACTOR,
        value=metrics.files_changed,
        threshold=config.files_threshold,
        score=round_half_up(raw),
        impact=impact,
    )


def _lines_factor(metrics: ChangeMetrics, config: AssessmentConfig) -> tuple[float, RiskFactor]:
    raw = min(metrics.total_lines / config.lines_threshold * LINES_WEIGHT, LINES_WEIGHT)
    if raw > 25:
        impact = Impact.HIGH
    elif raw > 15:
        impact = Impact.MEDIUM
    else:
        impact = Impact.LOW
    return raw, RiskFactor(
        name=LINES_FACTOR,
        value=metrics.total_lines,
        threshold=config.lines_threshold,
        score=round_half_up(raw),
        impact=impact,
    )


def _critical_paths_factor(config: AssessmentConfig) -> tuple[float, RiskFactor]:
    if config.critical_paths and config.touches_critical_paths:
        return CRITICAL_PATH_POINTS, RiskFactor(
            name=CRITICAL_PATHS_FACTOR,
            value="Yes",
            threshold="N/A",
            score=CRITICAL_PATH_POINTS,
            impact=Impact.HIGH,
        )
    return 0, RiskFactor(
        name=CRITICAL_PATHS_FACTOR,
        value="No",
        threshold="N/A",
        score=0,
        impact=Impact.NONE,
    )


def deletion_ratio(metrics: ChangeMetrics) -> float:
    """Deleted lines relative to added lines; the +1 keeps it defined for zero additions."""
    return metrics.deletions / (metrics.additions + 1)


def _deletion_ratio_factor(metrics: ChangeMetrics) -> tuple[float, RiskFactor] | None:
    ratio = deletion_ratio(metrics)
    if ratio <= DELETION_RATIO_TRIGGER:
        return None
    return DELETION_RATIO_POINTS, RiskFactor(
        name=DELETION_RATIO_FACTOR,
        value=f"{round_half_up(ratio * 100)}%",
        threshold=f"{round_half_up(DELETION_RATIO_TRIGGER * 100)}%",
        score=DELETION_RATIO_POINTS,
        impact=Impact.MEDIUM,
    )


def validate_config(config: AssessmentConfig) -> None:
    """Raise InvalidConfigurationError for non-positive thresholds."""
    if config.files_threshold <= 0:
        raise InvalidConfigurationError("files_threshold", config.files_threshold)
    if config.lines_threshold <= 0:
        raise InvalidConfigurationError("lines_threshold", config.lines_threshold)


def assess(
    metrics: ChangeMetrics,
    config: AssessmentConfig,
    now: datetime | None = None,
) -> Assessment:
    """Score a change and classify it.

    Args:
        metrics: Size of the change (files, additions, deletions).
        config: Thresholds, critical paths and whether the change touches them.
        now: Timestamp to stamp on the result; defaults to the current UTC time.

    Returns:
        Assessment with the total score, level, ordered factor breakdown,
        recommendation and approval requirement.

    Raises:
        InvalidConfigurationError: If either threshold is not positive.
    """
    validate_config(config)

    scored = [
        _files_factor(metrics, config),
        _lines_factor(metrics, config),
        _critical_paths_factor(config),
    ]
    deletion = _deletion_ratio_factor(metrics)
    if deletion is not None:
        scored.append(deletion)

    total = sum(points for points, _ in scored)
    risk_score = min(round_half_up(total), MAX_SCORE)
    band = classify(risk_score)

    return Assessment(
        risk_score=risk_score,
        risk_level=band.level,
        factors=[factor for _, factor in scored],
        recommendation=band.recommendation,
        approval_required=band.approval_required,
        metrics=metrics,
        timestamp=now or datetime.now(timezone.utc),
    )
