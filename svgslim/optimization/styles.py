"""Move inline style declarations into presentation attributes."""
from typing import Dict

from .base import OptimizationPass
from ..parsing.tree import iter_elements, localname
from ..utils.logger import get_logger

logger = get_logger(__name__)

PRESENTATION_PROPERTIES = frozenset({
    "fill", "fill-opacity", "fill-rule",
    "stroke", "stroke-width", "stroke-opacity", "stroke-linecap", "stroke-linejoin",
    "stroke-miterlimit", "stroke-dasharray", "stroke-dashoffset",
    "opacity", "color", "display", "visibility",
    "clip-rule", "stop-color", "stop-opacity",
    "font-family", "font-size", "font-style", "font-weight", "text-anchor",
})


def parse_style(style_str: str) -> Dict[str, str]:
    out = {}
    for chunk in style_str.split(";"):
        if not chunk.strip() or ":" not in chunk:
            continue
        k, v = chunk.split(":", 1)
        out[k.strip()] = v.strip()
    return out


def serialize_style(declarations: Dict[str, str]) -> str:
    return ";".join(f"{k}:{v}" for k, v in declarations.items())


class StyleInliner(OptimizationPass):
    """
    Turn style="fill:red;opacity:1" into fill="red" opacity="1".

    Inline style outranks presentation attributes, so moved declarations
    overwrite existing attributes. Skipped entirely when the document has a
    <style> sheet, which would then outrank the moved values.
    """

    step = "style inlining"
    option = "inline_styles"

    def run(self, root, options, report):
        preserved = set(options.preserve.attributes)
        if "style" in preserved:
            return
        elements = list(iter_elements(root))
        if any(localname(el.tag) == "style" for el in elements):
            logger.debug("Document has a <style> sheet; leaving inline styles alone")
            return

        moved = 0
        for element in elements:
            style = element.get("style")
            if style is None:
                continue
            remaining = {}
            for prop, value in parse_style(style).items():
                if (
                    prop in PRESENTATION_PROPERTIES
                    and prop not in preserved
                    and "!important" not in value
                    and value
                ):
                    element.set(prop, value)
                    moved += 1
                else:
                    remaining[prop] = value
            if remaining:
                element.set("style", serialize_style(remaining))
            else:
                del element.attrib["style"]
        if moved:
            logger.debug(f"Moved {moved} style declarations into attributes")
