"""Unified exception hierarchy for MovaSafe.

All project exceptions inherit from MovaSafeException, enabling unified
error handling across modules.

Categories:
- ConfigurationException: configuration that cannot be loaded or bound
- InvalidCorsPolicyException: a cross-origin policy that breaks its invariants
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class MovaSafeException(Exception):
    """Base exception for all MovaSafe errors.

    Carries an optional error code and context dict for structured error data.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "CORS_001").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationException(MovaSafeException):
    """Configuration could not be loaded, resolved, or bound."""


class InvalidCorsPolicyException(ConfigurationException):
    """A cross-origin policy violates one of its construction invariants."""
