"""Exception hierarchy for the optimization engine."""
from typing import Optional


class SvgError(Exception):
    """Base class. `details` holds the classified ErrorDetails once known."""

    def __init__(self, message: str, details=None):
        super().__init__(message)
        self.message = message
        self.details = details


class ParseError(SvgError):
    """Input is empty or not well-formed XML."""

    def __init__(
        self,
        message: str,
        kind: str = "syntax error",
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.line = line
        self.column = column


class SvgValidationError(SvgError):
    """Well-formed XML that is not an <svg>-rooted document."""


class OptimizationError(SvgError):
    """A pass raised while mutating the tree."""

    def __init__(self, message: str, step: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.step = step
        self.cause = cause


class ResourceError(SvgError):
    """Input exceeds the configured memory budget."""


class SvgTimeoutError(SvgError, TimeoutError):
    """A bounded operation did not finish in time."""


class OperationFailedError(SvgError):
    """Raised by OperationBoundary when an operation fails and cannot be recovered."""


class InvalidOptionsError(SvgError, ValueError):
    """Malformed optimization options."""


class PresetNotFoundError(SvgError, KeyError):
    """No preset registered under the requested name."""

    def __str__(self):
        return self.message
