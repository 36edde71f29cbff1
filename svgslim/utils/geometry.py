"""Shared geometry helper functions."""
from typing import Optional, Tuple

from svgpathtools import parse_path


def path_to_bbox(d: str) -> Optional[Tuple[float, float, float, float]]:
    """
    Compute accurate bounding box from SVG path d string
    using svgpathtools.
    Returns (xmin, ymin, xmax, ymax), or None if the path cannot be parsed.
    """
    try:
        path = parse_path(d)
        if len(path) == 0:
            return None
        xmin, xmax, ymin, ymax = path.bbox()
        return (xmin, ymin, xmax, ymax)
    except Exception:
        return None


def bbox_size(bbox: Tuple[float, float, float, float]) -> Tuple[float, float]:
    """Width and height of a bounding box."""
    xmin, ymin, xmax, ymax = bbox
    return (max(0.0, xmax - xmin), max(0.0, ymax - ymin))
