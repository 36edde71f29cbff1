"""SVG size optimization engine."""
from .optimizer import SVGOptimizer
from .optimization import OptimizationOptions, OptimizationReport, OptimizationResult, Preserve
from .batch import BatchProcessor, BatchProgress
from .errors import ErrorHandler, ErrorType, ErrorDetails

__version__ = "0.1.0"

__all__ = [
    "SVGOptimizer",
    "OptimizationOptions",
    "OptimizationReport",
    "OptimizationResult",
    "Preserve",
    "BatchProcessor",
    "BatchProgress",
    "ErrorHandler",
    "ErrorType",
    "ErrorDetails",
]
