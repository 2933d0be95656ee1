"""Error types raised by the tracker.

Both are fail-fast and synchronous. Neither is meant to be retried: a
ConfigurationError means the tracker was never built, a ValidationError
means the caller passed an event the deployment does not allow.
"""

from __future__ import annotations


class MetricsError(Exception):
    """Base class for all component metrics errors."""


class ConfigurationError(MetricsError):
    """Raised when the tracker configuration is missing or malformed."""


class ValidationError(MetricsError, ValueError):
    """Raised when an event or its options are rejected at registration."""
