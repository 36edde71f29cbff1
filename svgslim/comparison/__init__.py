from .fingerprint import (
    FingerprintComparator,
    ShapeDescriptor,
    VisualDifference,
    extract_fingerprint,
)
from .preview import PreviewComparison, PreviewSide, generate_comparison

__all__ = [
    "FingerprintComparator",
    "ShapeDescriptor",
    "VisualDifference",
    "extract_fingerprint",
    "PreviewComparison",
    "PreviewSide",
    "generate_comparison",
]
