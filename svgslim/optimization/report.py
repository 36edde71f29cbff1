"""Per-call optimization report and result records."""
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Optional

from ..errors.handler import ErrorDetails


@dataclass
class OptimizationReport:
    """Counters accumulated by the passes during a single optimize() call."""

    elements_removed: int = 0
    attributes_removed: int = 0
    paths_simplified: int = 0
    coordinates_rounded: int = 0
    colors_optimized: int = 0
    transforms_optimized: int = 0
    parse_time_ms: float = 0.0
    optimization_time_ms: float = 0.0
    serialization_time_ms: float = 0.0
    pass_times_ms: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class OptimizationResult:
    """Outcome of optimizing one document. On failure there is no optimized_svg."""

    success: bool
    original_size: int
    optimized_size: int
    compression_ratio: float
    processing_time_ms: float
    optimized_svg: Optional[str] = None
    error: Optional[str] = None
    error_details: Optional[ErrorDetails] = None
    report: Optional[OptimizationReport] = None

    @property
    def saved_bytes(self) -> int:
        if not self.success:
            return 0
        return self.original_size - self.optimized_size

    @property
    def saved_percent(self) -> float:
        if not self.success or self.original_size <= 0:
            return 0.0
        return (self.saved_bytes / self.original_size) * 100.0

    @classmethod
    def failure(
        cls,
        original_size: int,
        error: str,
        processing_time_ms: float,
        error_details: Optional[ErrorDetails] = None,
    ) -> "OptimizationResult":
        return cls(
            success=False,
            original_size=original_size,
            optimized_size=0,
            compression_ratio=0.0,
            processing_time_ms=processing_time_ms,
            error=error,
            error_details=error_details,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "success": self.success,
            "original_size": self.original_size,
            "optimized_size": self.optimized_size,
            "compression_ratio": self.compression_ratio,
            "processing_time_ms": self.processing_time_ms,
            "optimized_svg": self.optimized_svg,
            "error": self.error,
        }
        if self.error_details is not None:
            data["error_details"] = self.error_details.to_dict()
        if self.report is not None:
            data["report"] = self.report.to_dict()
        return data
