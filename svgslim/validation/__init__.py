from .validator import SVGValidator, ValidationResult, DocumentStructure

__all__ = ["SVGValidator", "ValidationResult", "DocumentStructure"]
