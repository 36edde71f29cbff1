"""Canonicalize rgb()/rgba() color values to hex."""
from .base import OptimizationPass
from ..parsing.tree import iter_elements
from ..utils.color import canonicalize_color

COLOR_ATTRIBUTES = ("fill", "stroke", "stop-color", "flood-color", "lighting-color", "color")


class ColorOptimizer(OptimizationPass):
    step = "color optimization"
    option = "optimize_colors"

    def run(self, root, options, report):
        preserved = set(options.preserve.attributes)
        for element in iter_elements(root):
            for name in COLOR_ATTRIBUTES:
                if name in preserved:
                    continue
                value = element.get(name)
                if not value:
                    continue
                optimized = canonicalize_color(value)
                if optimized != value:
                    element.set(name, optimized)
                    report.colors_optimized += 1
