"""Error taxonomy, classification and recovery."""
from .exceptions import (
    SvgError,
    ParseError,
    SvgValidationError,
    OptimizationError,
    ResourceError,
    SvgTimeoutError,
    OperationFailedError,
    InvalidOptionsError,
    PresetNotFoundError,
)
from .handler import ErrorType, ErrorDetails, ErrorHandler
from .boundary import OperationBoundary

__all__ = [
    "SvgError",
    "ParseError",
    "SvgValidationError",
    "OptimizationError",
    "ResourceError",
    "SvgTimeoutError",
    "OperationFailedError",
    "InvalidOptionsError",
    "PresetNotFoundError",
    "ErrorType",
    "ErrorDetails",
    "ErrorHandler",
    "OperationBoundary",
]
