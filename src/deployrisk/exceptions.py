"""Custom exceptions for deployrisk."""


class DeployRiskError(Exception):
    """Base exception for all deployrisk errors."""


class ConfigError(DeployRiskError):
    """Configuration-related errors."""


class InvalidConfigurationError(ConfigError):
    """Raised when a scoring threshold is not a positive number."""

    def __init__(self, field: str, value: object):
        self.field = field
        self.value = value
        super().__init__(f"'{field}' must be a positive integer, got {value!r}")


class MetricsUnavailableError(DeployRiskError):
    """Raised when a provider cannot produce change metrics."""


class ProviderError(DeployRiskError):
    """Metrics provider selection errors."""
