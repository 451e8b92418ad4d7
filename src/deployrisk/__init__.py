"""deployrisk - deployment risk scoring for pull requests."""

__version__ = "0.1.0"
