"""Complexity scoring and aggressiveness recommendation."""
import re
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from ..errors.exceptions import SvgError
from ..parsing.svg_parser import SVGParser
from ..parsing.tree import descendant_elements, localname
from ..utils.logger import get_logger

logger = get_logger(__name__)

INTER_TAG_WHITESPACE_RE = re.compile(r">\s+<")
LONG_DECIMAL_RE = re.compile(r"\d+\.\d{4,}")
DEFAULT_ATTRIBUTE_LITERALS = ('opacity="1"', 'stroke-width="1"')

# Signals that raise optimization potential, with their weights.
POTENTIAL_WEIGHTS = {
    "comments": 20,
    "whitespace": 15,
    "long_decimals": 25,
    "default_attributes": 20,
    "many_elements": 20,
}
MANY_ELEMENTS = 50

# Analyzer strategy -> aggressiveness tier
STRATEGY_TIERS = {
    "light": "conservative",
    "moderate": "moderate",
    "aggressive": "aggressive",
}


@dataclass
class ComplexityAnalysis:
    complexity_score: float = 0
    element_count: int = 0
    path_count: int = 0
    path_data_length: int = 0
    color_count: int = 0
    optimization_potential: int = 0
    recommended_strategy: str = "light"
    estimated_processing_time_ms: float = 0

    @property
    def recommended_aggressiveness(self) -> str:
        return STRATEGY_TIERS[self.recommended_strategy]

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["recommended_aggressiveness"] = self.recommended_aggressiveness
        return data


class ComplexityAnalyzer:
    """
    Estimate how complex a document is and how much there is to gain.

    Advisory only: analyze() never raises. Anything it cannot parse as an
    <svg> document gets an all-zero analysis with the 'light' strategy.
    """

    def __init__(self, config: Optional[dict] = None, parser: SVGParser = None):
        thresholds = (config or {}).get("analysis", {})
        self.light_below = thresholds.get("light_below", 20)
        self.moderate_below = thresholds.get("moderate_below", 60)
        self.parser = parser or SVGParser()

    def analyze(self, svg_string: str) -> ComplexityAnalysis:
        try:
            root = self.parser.parse(svg_string, require_svg_root=True)
        except SvgError as e:
            logger.debug(f"Analysis skipped: {e}")
            return ComplexityAnalysis()

        elements = descendant_elements(root)
        element_count = len(elements)
        paths = [el for el in elements if localname(el.tag) == "path"]
        path_count = len(paths)
        path_data_length = sum(len(p.get("d") or "") for p in paths)

        colors = set()
        for el in elements:
            for name in ("fill", "stroke"):
                value = el.get(name)
                if value and value != "none":
                    colors.add(value)

        complexity_score = min(
            100,
            element_count * 3 + path_count * 8 + path_data_length * 0.02 + len(colors) * 2,
        )

        return ComplexityAnalysis(
            complexity_score=complexity_score,
            element_count=element_count,
            path_count=path_count,
            path_data_length=path_data_length,
            color_count=len(colors),
            optimization_potential=self.optimization_potential(svg_string, element_count),
            recommended_strategy=self.recommend(complexity_score),
            estimated_processing_time_ms=max(
                10, element_count * 2 + path_data_length * 0.01 + path_count * 5
            ),
        )

    def recommend(self, complexity_score: float) -> str:
        if complexity_score < self.light_below:
            return "light"
        if complexity_score < self.moderate_below:
            return "moderate"
        return "aggressive"

    @staticmethod
    def optimization_potential(svg_string: str, element_count: int) -> int:
        signals = {
            "comments": "<!--" in svg_string,
            "whitespace": bool(INTER_TAG_WHITESPACE_RE.search(svg_string)),
            "long_decimals": bool(LONG_DECIMAL_RE.search(svg_string)),
            "default_attributes": any(lit in svg_string for lit in DEFAULT_ATTRIBUTE_LITERALS),
            "many_elements": element_count > MANY_ELEMENTS,
        }
        score = sum(POTENTIAL_WEIGHTS[name] for name, present in signals.items() if present)
        return min(100, score)
