from .complexity import ComplexityAnalyzer, ComplexityAnalysis

__all__ = ["ComplexityAnalyzer", "ComplexityAnalysis"]
