"""Exception types raised by stepwise."""

from __future__ import annotations


class StepwiseError(Exception):
    """Base exception for stepwise errors."""


class ConfigurationError(StepwiseError):
    """Raised when settings cannot be loaded or fail validation."""


class CandidateInspectionError(StepwiseError):
    """Raised when a DOM candidate snapshot cannot be read."""


class WindowTimeoutError(StepwiseError):
    """Raised when an expected new window or tab does not open in time."""


class StepFileError(StepwiseError):
    """Raised when a step file cannot be read or parsed."""
