"""Tree passes and the option/report types they share."""
from .options import OptimizationOptions, Preserve, ResolvedOptions, resolve_options
from .report import OptimizationReport, OptimizationResult
from .base import OptimizationPass, default_passes

__all__ = [
    "OptimizationOptions",
    "Preserve",
    "ResolvedOptions",
    "resolve_options",
    "OptimizationReport",
    "OptimizationResult",
    "OptimizationPass",
    "default_passes",
]
