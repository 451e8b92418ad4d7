"""Risk assessment core: models, critical path matching and scoring."""

from deployrisk.assessment.models import (
    Assessment,
    AssessmentConfig,
    ChangeMetrics,
    Impact,
    RiskFactor,
    RiskLevel,
)
from deployrisk.assessment.scorer import assess, classify

__all__ = [
    "Assessment",
    "AssessmentConfig",
    "ChangeMetrics",
    "Impact",
    "RiskFactor",
    "RiskLevel",
    "assess",
    "classify",
]
