"""Round numeric geometry attributes to the configured precision."""
import re

from .base import OptimizationPass
from ..parsing.tree import iter_elements
from ..utils.logger import get_logger
from ..utils.numbers import ROUNDING_EPSILON, format_number

logger = get_logger(__name__)

COORDINATE_ATTRIBUTES = (
    "x", "y", "cx", "cy", "x1", "y1", "x2", "y2", "r", "rx", "ry", "width", "height",
)

# A single length: number plus optional unit ("12.5", "-3e2", "50.125%", "4.0px")
LENGTH_RE = re.compile(
    r"^\s*([-+]?(?:\d*\.\d+|\d+\.?)(?:[eE][-+]?\d+)?)\s*(%|[a-zA-Z]{1,2})?\s*$"
)


def round_length(value: str, precision: int):
    """
    Round a length attribute value.

    Returns (new_value, changed) where `changed` is True only when the numeric
    value moved by more than ROUNDING_EPSILON. Lists, percentages with junk
    and other unparseable values come back untouched.
    """
    match = LENGTH_RE.match(value)
    if not match:
        return value, False
    number, unit = match.group(1), match.group(2) or ""
    original = float(number)
    rounded = format_number(original, precision)
    if abs(float(rounded) - original) <= ROUNDING_EPSILON:
        return value, False
    return rounded + unit, True


class CoordinateRounder(OptimizationPass):
    """Always runs; the tier decides how many digits survive."""

    step = "coordinate rounding"
    option = None

    def run(self, root, options, report):
        precision = options.coordinate_precision
        names = [n for n in COORDINATE_ATTRIBUTES if n not in options.preserve.attributes]
        rounded = 0
        for element in iter_elements(root):
            for name in names:
                value = element.get(name)
                if value is None:
                    continue
                new_value, changed = round_length(value, precision)
                if changed:
                    element.set(name, new_value)
                    rounded += 1
        report.coordinates_rounded += rounded
        logger.debug(f"Rounded {rounded} coordinates to {precision} digits")
