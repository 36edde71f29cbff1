"""Structural checks and a cheap complexity smell-test."""
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List

from ..errors.exceptions import ParseError
from ..parsing.svg_parser import SVGParser
from ..parsing.tree import descendant_elements, localname
from ..utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class DocumentStructure:
    has_valid_root: bool = False
    has_view_box: bool = False
    element_count: int = 0
    path_count: int = 0
    complexity_score: int = 0


@dataclass
class ValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    structure: DocumentStructure = field(default_factory=DocumentStructure)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def basic_complexity(element_count: int, path_count: int) -> int:
    """Quick proxy score, capped at 100. See ComplexityAnalyzer for the full one."""
    return min(100, element_count * 2 + path_count * 5)


class SVGValidator:
    """Check that text is a well-formed, <svg>-rooted document."""

    def __init__(self, parser: SVGParser = None):
        self.parser = parser or SVGParser()

    def validate(self, svg_string: str) -> ValidationResult:
        if not isinstance(svg_string, str) or not svg_string.strip():
            return ValidationResult(is_valid=False, errors=["Empty SVG content"])

        try:
            root = self.parser.parse(svg_string)
        except ParseError as e:
            logger.debug(f"Validation parse failure: {e}")
            return ValidationResult(is_valid=False, errors=[f"XML parsing error: {e}"])

        errors: List[str] = []
        warnings: List[str] = []

        has_valid_root = localname(root.tag) == "svg"
        if not has_valid_root:
            errors.append("No valid SVG root element found")

        has_view_box = root.get("viewBox") is not None
        if not has_view_box:
            warnings.append("Missing viewBox attribute for better scalability")

        elements = descendant_elements(root)
        element_count = len(elements)
        path_count = sum(1 for el in elements if localname(el.tag) == "path")

        return ValidationResult(
            is_valid=not errors,
            errors=errors,
            warnings=warnings,
            structure=DocumentStructure(
                has_valid_root=has_valid_root,
                has_view_box=has_view_box,
                element_count=element_count,
                path_count=path_count,
                complexity_score=basic_complexity(element_count, path_count),
            ),
        )
