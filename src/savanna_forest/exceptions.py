"""Exceptions raised by the savanna-forest model."""


class SavannaForestError(Exception):
    """Base class for all model errors."""


class InvalidConfigurationError(SavannaForestError, ValueError):
    """Raised when simulation parameters are rejected before a run starts."""


class EmptyIgnitionPoolError(SavannaForestError, RuntimeError):
    """Raised when no cell can be selected as an ignition point."""
