"""
Approximate before/after equivalence via shape fingerprints.

Shapes are extracted straight from the text, compared positionally per
type, and scored. Nothing is rendered: this catches gross regressions
(lost shapes, resized shapes, recolored shapes), not pixel differences.
Reordering shapes of the same type shows up as a difference.
"""
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np

from ..utils.color import normalize_color
from ..utils.geometry import bbox_size, path_to_bbox
from ..utils.logger import get_logger

logger = get_logger(__name__)

SHAPE_TYPES = ("circle", "rect", "path")
SHAPE_TAG_RES = {tag: re.compile(rf"<{tag}\b[^>]*>") for tag in SHAPE_TYPES}

# Geometry compared for each shape type (relative change).
GEOMETRY_KEYS = {
    "circle": ("r",),
    "rect": ("width", "height"),
    "path": ("width", "height"),
}
PAINT_KEYS = ("fill", "stroke")
WHITESPACE_COMMA_RE = re.compile(r"[\s,]+")
LEADING_NUMBER_RE = re.compile(r"^\s*([-+]?(?:\d*\.\d+|\d+\.?)(?:[eE][-+]?\d+)?)")


def attribute_value(tag_text: str, name: str) -> Optional[str]:
    """Value of attribute `name` in a raw start tag (`r` never matches `rx`)."""
    match = re.search(rf"(?<![\w:-]){re.escape(name)}\s*=\s*([\"'])(.*?)\1", tag_text, re.DOTALL)
    return match.group(2) if match else None


def _number(value: Optional[str]) -> float:
    if not value:
        return 0.0
    match = LEADING_NUMBER_RE.match(value)
    return float(match.group(1)) if match else 0.0


@dataclass
class ShapeDescriptor:
    type: str
    geometry: Dict[str, float] = field(default_factory=dict)
    fill: str = ""
    stroke: str = ""
    d: str = ""


@dataclass
class VisualDifference:
    has_visible_changes: bool
    difference_score: float
    significant_differences: int = 0
    affected_elements: List[str] = field(default_factory=list)

    def to_dict(self):
        return {
            "has_visible_changes": self.has_visible_changes,
            "difference_score": self.difference_score,
            "significant_differences": self.significant_differences,
            "affected_elements": list(self.affected_elements),
        }


def extract_fingerprint(svg_string: str) -> List[ShapeDescriptor]:
    """Shape descriptors grouped by type (circles, then rects, then paths)."""
    shapes: List[ShapeDescriptor] = []
    for shape_type in SHAPE_TYPES:
        for match in SHAPE_TAG_RES[shape_type].finditer(svg_string or ""):
            shapes.append(_describe(shape_type, match.group(0)))
    return shapes


def _describe(shape_type: str, tag_text: str) -> ShapeDescriptor:
    shape = ShapeDescriptor(
        type=shape_type,
        fill=normalize_color(attribute_value(tag_text, "fill") or ""),
        stroke=normalize_color(attribute_value(tag_text, "stroke") or ""),
    )
    if shape_type == "circle":
        shape.geometry = {k: _number(attribute_value(tag_text, k)) for k in ("cx", "cy", "r")}
    elif shape_type == "rect":
        shape.geometry = {
            k: _number(attribute_value(tag_text, k)) for k in ("x", "y", "width", "height")
        }
    else:
        d = attribute_value(tag_text, "d") or ""
        shape.d = WHITESPACE_COMMA_RE.sub(" ", d).strip()
        bbox = path_to_bbox(d) if shape.d else None
        width, height = bbox_size(bbox) if bbox else (0.0, 0.0)
        shape.geometry = {"width": width, "height": height}
    return shape


class FingerprintComparator:
    """Score how visibly two documents differ."""

    def __init__(self, config: Optional[dict] = None):
        settings = (config or {}).get("comparison", {})
        self.geometry_tolerance = settings.get("geometry_tolerance", 0.1)
        self.count_mismatch_score = settings.get("count_mismatch_score", 50)
        self.missing_element_score = settings.get("missing_element_score", 30)
        self.geometry_score = settings.get("geometry_score", 25)
        self.color_score = settings.get("color_score", 15)

    def compare(self, original: str, optimized: str) -> VisualDifference:
        before = extract_fingerprint(original)
        after = extract_fingerprint(optimized)

        significant = 0
        score = 0.0
        affected: List[str] = []

        if len(before) != len(after):
            significant += 1
            score += self.count_mismatch_score
            affected.append("element-count")

        for shape_type in SHAPE_TYPES:
            before_shapes = [s for s in before if s.type == shape_type]
            after_shapes = [s for s in after if s.type == shape_type]
            for index, shape in enumerate(before_shapes):
                if index >= len(after_shapes):
                    significant += 1
                    score += self.missing_element_score
                    affected.append(shape_type)
                    continue
                is_significant, shape_score = self._compare_shapes(shape, after_shapes[index])
                if is_significant:
                    significant += 1
                    score += shape_score
                    affected.append(f"{shape_type}-properties")

        logger.debug(f"Fingerprint comparison: {significant} significant differences")
        return VisualDifference(
            has_visible_changes=significant > 0,
            difference_score=min(100, score),
            significant_differences=significant,
            affected_elements=affected,
        )

    def _compare_shapes(self, before: ShapeDescriptor, after: ShapeDescriptor) -> Tuple[bool, float]:
        significant = False
        score = 0.0

        keys = GEOMETRY_KEYS[before.type]
        old = np.array([before.geometry.get(k, 0.0) for k in keys], dtype=float)
        new = np.array([after.geometry.get(k, 0.0) for k in keys], dtype=float)
        relative = np.abs(old - new) / np.maximum(old, 1.0)
        if np.any(relative > self.geometry_tolerance):
            significant = True
            score += self.geometry_score

        for key in PAINT_KEYS:
            old_color, new_color = getattr(before, key), getattr(after, key)
            # A color that was only added or removed is not counted.
            if old_color and new_color and old_color != new_color:
                significant = True
                score += self.color_score
                break

        return significant, score
