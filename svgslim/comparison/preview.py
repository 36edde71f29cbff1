"""Side-by-side summary of an original and an optimized document."""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .fingerprint import FingerprintComparator, VisualDifference
from ..analysis.complexity import ComplexityAnalysis, ComplexityAnalyzer


@dataclass
class PreviewSide:
    svg: str
    size: int
    complexity: ComplexityAnalysis

    def to_dict(self) -> Dict[str, Any]:
        return {"svg": self.svg, "size": self.size, "complexity": self.complexity.to_dict()}


@dataclass
class PreviewComparison:
    original: PreviewSide
    optimized: PreviewSide
    visual_difference: VisualDifference

    def to_dict(self) -> Dict[str, Any]:
        return {
            "original": self.original.to_dict(),
            "optimized": self.optimized.to_dict(),
            "visual_difference": self.visual_difference.to_dict(),
        }


def generate_comparison(
    original: str,
    optimized: str,
    analyzer: Optional[ComplexityAnalyzer] = None,
    comparator: Optional[FingerprintComparator] = None,
) -> PreviewComparison:
    analyzer = analyzer or ComplexityAnalyzer()
    comparator = comparator or FingerprintComparator()
    return PreviewComparison(
        original=PreviewSide(
            svg=original,
            size=len(original.encode("utf-8")),
            complexity=analyzer.analyze(original),
        ),
        optimized=PreviewSide(
            svg=optimized,
            size=len(optimized.encode("utf-8")),
            complexity=analyzer.analyze(optimized),
        ),
        visual_difference=comparator.compare(original, optimized),
    )
