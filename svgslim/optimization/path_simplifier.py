"""Simplify and clean individual SVG paths."""
import re

from .base import OptimizationPass
from ..parsing.tree import iter_elements, localname
from ..utils.logger import get_logger
from ..utils.numbers import round_numbers

logger = get_logger(__name__)

_NUMBER = r"-?[\d.]+(?:[eE][-+]?\d+)?"
# "L x y L x y" where the second segment repeats the first exactly.
DUPLICATE_LINETO_RE = re.compile(
    rf"L\s*({_NUMBER})[\s,]+({_NUMBER})\s*L\s*\1[\s,]+\2(?![\d.eE])"
)


class PathSimplifier(OptimizationPass):
    """Reduce path data size while keeping the drawn geometry."""

    step = "path simplification"
    option = "simplify_paths"

    def run(self, root, options, report):
        if "d" in options.preserve.attributes:
            return
        precision = options.coordinate_precision
        total = 0
        simplified_count = 0

        for element in iter_elements(root):
            if localname(element.tag) != "path":
                continue
            original_d = element.get("d")
            if not original_d:
                continue
            total += 1
            new_d = self._simplify_path_d(original_d, precision)
            if new_d != original_d:
                element.set("d", new_d)
                simplified_count += 1

        report.paths_simplified += simplified_count
        logger.debug(f"Simplified {simplified_count}/{total} paths")

    def _simplify_path_d(self, d: str, precision: int) -> str:
        """Simplify a single path d string."""
        d = self._round_path_d(d, precision)
        return self._collapse_duplicate_linetos(d)

    def _round_path_d(self, d: str, precision: int) -> str:
        """Round float literals via round_numbers; packed literals such as "1.2-0.04" keep a separator."""
        rounded, _ = round_numbers(d, precision)
        return rounded

    @staticmethod
    def _collapse_duplicate_linetos(d: str) -> str:
        while True:
            collapsed = DUPLICATE_LINETO_RE.sub(r"L \1 \2", d)
            if collapsed == d:
                return d
            d = collapsed
