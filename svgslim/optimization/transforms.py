"""Strip identity sub-transforms from transform attributes."""
import re

from .base import OptimizationPass
from ..parsing.tree import iter_elements

_ZERO = r"[-+]?(?:0+(?:\.0*)?|\.0+)"
_ONE = r"\+?0*1(?:\.0*)?"
_SEP = r"\s*,?\s*"
_ANY = r"[-+]?[\d.]+(?:[eE][-+]?\d+)?"

IDENTITY_TRANSFORM_RES = (
    re.compile(rf"translate\(\s*{_ZERO}(?:{_SEP}{_ZERO})?\s*\)"),
    re.compile(rf"scale\(\s*{_ONE}(?:{_SEP}{_ONE})?\s*\)"),
    re.compile(rf"rotate\(\s*{_ZERO}(?:{_SEP}{_ANY}{_SEP}{_ANY})?\s*\)"),
    re.compile(rf"skew[XY]\(\s*{_ZERO}\s*\)"),
    re.compile(
        rf"matrix\(\s*{_ONE}{_SEP}{_ZERO}{_SEP}{_ZERO}{_SEP}{_ONE}{_SEP}{_ZERO}{_SEP}{_ZERO}\s*\)"
    ),
)
TRANSFORM_LIST_RE = re.compile(r"(?:\s*[A-Za-z]+\s*\([^()]*\)\s*,?)*\s*")
TRANSFORM_CALL_RE = re.compile(r"[A-Za-z]+\s*\([^()]*\)")
WHITESPACE_RE = re.compile(r"\s+")


def fold_transform(transform: str) -> str:
    """
    Remove identity transforms and collapse whitespace. May return ''.

    Values that are not a plain list of transform functions are returned
    unchanged.
    """
    if not TRANSFORM_LIST_RE.fullmatch(transform):
        return transform
    kept = []
    for call in TRANSFORM_CALL_RE.findall(transform):
        if any(pattern.fullmatch(call) for pattern in IDENTITY_TRANSFORM_RES):
            continue
        kept.append(WHITESPACE_RE.sub(" ", call))
    return " ".join(kept)


class TransformOptimizer(OptimizationPass):
    step = "transform optimization"
    option = "optimize_transforms"

    def run(self, root, options, report):
        if "transform" in options.preserve.attributes:
            return
        for element in iter_elements(root):
            transform = element.get("transform")
            if transform is None:
                continue
            optimized = fold_transform(transform)
            if optimized == transform:
                continue
            if optimized:
                element.set("transform", optimized)
            else:
                del element.attrib["transform"]
            report.transforms_optimized += 1
