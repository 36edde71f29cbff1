"""Color parsing and canonicalization helpers."""
import re
from typing import Optional, Tuple

RGB_RE = re.compile(r"^rgb\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*\)$", re.IGNORECASE)
# rgba() with an alpha that is a literal 1 ("1", "1.0", "1.00", ...)
RGBA_OPAQUE_RE = re.compile(
    r"^rgba\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*,\s*1(?:\.0*)?\s*\)$", re.IGNORECASE
)
SHORT_HEX_RE = re.compile(r"^#([0-9a-fA-F]{3})$")


def hex_to_rgb(hex_color: str) -> Optional[Tuple[int, int, int]]:
    """Parse #rgb or #rrggbb into channels, or None."""
    digits = hex_color.strip()
    if not digits.startswith("#"):
        return None
    digits = digits[1:]
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    if len(digits) != 6:
        return None
    try:
        return tuple(int(digits[i:i + 2], 16) for i in (0, 2, 4))
    except ValueError:
        return None


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Format channels as a 6-digit lowercase hex color, clamping to 0-255."""
    return "#" + "".join(f"{max(0, min(255, c)):02x}" for c in (r, g, b))


def canonicalize_color(value: str) -> str:
    """
    Rewrite rgb(r,g,b) and fully opaque rgba(r,g,b,1) as 6-digit hex.

    Every other syntax (named colors, hex, hsl, url(), currentColor) is
    returned unchanged.
    """
    stripped = value.strip()
    match = RGB_RE.match(stripped) or RGBA_OPAQUE_RE.match(stripped)
    if not match:
        return value
    r, g, b = (int(c) for c in match.groups())
    return rgb_to_hex(r, g, b)


def normalize_color(value: str) -> str:
    """Normalize a color for equality checks: canonical hex, lowercase, #abc expanded."""
    if not value:
        return ""
    color = canonicalize_color(value).strip().lower()
    short = SHORT_HEX_RE.match(color)
    if short:
        rgb = hex_to_rgb(color)
        color = rgb_to_hex(*rgb)
    return color
