"""Change metrics providers."""

from deployrisk.providers.base import ChangeSet, MetricsProvider
from deployrisk.providers.factory import create_provider

__all__ = ["ChangeSet", "MetricsProvider", "create_provider"]
