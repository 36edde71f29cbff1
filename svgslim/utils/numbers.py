"""Numeric literal rounding shared by the path and coordinate passes."""
import re
from typing import Tuple

# General numeric token (int or float, optional exponent)
NUM_TOKEN_RE = re.compile(r"[-+]?(?:\d*\.\d+|\d+\.|\d+)(?:[eE][-+]?\d+)?")

# Deltas at or below this are treated as unchanged when counting mutations.
ROUNDING_EPSILON = 1e-4


def is_float_literal(token: str) -> bool:
    return "." in token or "e" in token or "E" in token


def format_number(value: float, precision: int) -> str:
    """Round to `precision` decimals and trim trailing zeros: 10.500 -> 10.5, 3.000 -> 3."""
    text = f"{value:.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", "+0", ""):
        text = "0"
    return text


def round_numbers(text: str, precision: int) -> Tuple[str, int]:
    """
    Round every float literal in `text` to `precision` decimals.

    Integer literals pass through. Returns the rewritten text and the number
    of literals whose value moved by more than ROUNDING_EPSILON.

    Path data may pack numbers without separators ("10.5.5" is 10.5 then .5,
    "1.2-0.04" is 1.2 then -0.04). A space is inserted wherever rounding drops
    the sign or dot that kept two literals apart.
    """
    changed = 0

    def replace(match: re.Match) -> str:
        nonlocal changed
        token = match.group(0)
        if not is_float_literal(token):
            return token
        try:
            value = float(token)
        except ValueError:
            return token
        out = format_number(value, precision)
        if abs(float(out) - value) > ROUNDING_EPSILON:
            changed += 1

        source = match.string
        start = match.start()
        if start > 0 and (source[start - 1].isdigit() or source[start - 1] == ".") and out[0] != "-":
            out = " " + out
        return out

    return NUM_TOKEN_RE.sub(replace, text), changed
