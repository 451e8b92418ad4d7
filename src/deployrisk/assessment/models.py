"""Data models for change metrics and risk assessments."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel

from deployrisk.assessment.paths import normalize_paths


class Impact(str, Enum):
    """Qualitative weight of a single risk factor."""

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RiskLevel(str, Enum):
    """Coarse classification of the total risk score."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return list(RiskLevel).index(self)


class ChangeMetrics(BaseModel):
    """Size of a change as reported by the source-control host."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    files_changed: int = Field(default=0, ge=0)
    additions: int = Field(default=0, ge=0)
    deletions: int = Field(default=0, ge=0)

    @computed_field(alias="totalLines")  # type: ignore[prop-decorator]
    @property
    def total_lines(self) -> int:
        return self.additions + self.deletions


class AssessmentConfig(BaseModel):
    """Scoring inputs supplied once per assessment.

    Thresholds are checked by ``assess`` rather than here, so that a
    non-positive value surfaces as ``InvalidConfigurationError``.
    """

    model_config = ConfigDict(frozen=True)

    files_threshold: int
    lines_threshold: int
    critical_paths: tuple[str, ...] = ()
    touches_critical_paths: bool = False

    @field_validator("critical_paths", mode="before")
    @classmethod
    def _clean_paths(cls, value: object) -> tuple[str, ...]:
        return tuple(normalize_paths(value))


class RiskFactor(BaseModel):
    """One scored contributor to the overall risk."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    name: str
    value: int | str
    threshold: int | str
    score: int
    impact: Impact


class Assessment(BaseModel):
    """Result of scoring a single change.

    Dumped with ``by_alias=True`` it uses the camelCase keys of the action's
    ``analysis`` output (``riskScore``, ``metrics.filesChanged``, ...).
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    risk_score: int = Field(..., ge=0, le=100, description="Final risk score 0-100")
    risk_level: RiskLevel
    factors: list[RiskFactor] = Field(default_factory=list)
    recommendation: str
    approval_required: str
    metrics: ChangeMetrics
    timestamp: datetime

    def factor(self, name: str) -> RiskFactor | None:
        """Look up a factor by its display name."""
        for f in self.factors:
            if f.name == name:
                return f
        return None
