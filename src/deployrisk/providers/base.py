"""Base metrics provider interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field

from deployrisk.assessment.models import ChangeMetrics


class ChangeSet(BaseModel):
    """What a provider knows about a change."""

    metrics: ChangeMetrics
    changed_files: list[str] = Field(default_factory=list)
    source: str = ""
    # Explicit answer from the provider; None means "match changed_files".
    touches_critical_paths: bool | None = None


class MetricsProvider(ABC):
    """Abstract base for change metrics providers."""

    name: str = ""

    @abstractmethod
    def collect(self) -> ChangeSet:
        """Gather metrics for the change under review.

        Raises:
            MetricsUnavailableError: If the metrics cannot be obtained.
        """
        ...
