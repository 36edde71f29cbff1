"""Structural cleanup passes: comments, default attributes, dead defs, empty and invisible nodes."""
import re
from types import MappingProxyType
from typing import Set

from .base import OptimizationPass
from ..parsing.tree import (
    is_element,
    iter_comments,
    iter_elements,
    iter_elements_post_order,
    localname,
    remove_node,
)
from ..utils.logger import get_logger

logger = get_logger(__name__)

# Attribute values that are no-ops for the given attribute.
DEFAULT_ATTRIBUTE_VALUES = MappingProxyType({
    "opacity": frozenset({"1", "1.0", "1.00"}),
    "stroke-width": frozenset({"1", "1.0", "1.000000"}),
    "fill-opacity": frozenset({"1", "1.0"}),
    "stroke-opacity": frozenset({"1", "1.0"}),
})

# Properties children inherit; a default on a child can undo an ancestor's value.
INHERITED_PROPERTIES = frozenset({"stroke-width", "fill-opacity", "stroke-opacity"})

URL_REF_RE = re.compile(r"url\(\s*['\"]?#([^)'\"\s]+)['\"]?\s*\)")
HASH_REF_RE = re.compile(r"^\s*#([^\s]+)\s*$")

REFERENCE_ATTRIBUTES = (
    "fill",
    "stroke",
    "clip-path",
    "mask",
    "filter",
    "marker-start",
    "marker-mid",
    "marker-end",
    "style",
)
HREF_ATTRIBUTES = ("href", "{http://www.w3.org/1999/xlink}href")

# Containers whose content is never rendered directly.
NON_RENDERED_CONTAINERS = frozenset(
    {"defs", "symbol", "clipPath", "mask", "marker", "pattern", "linearGradient", "radialGradient", "filter"}
)
INVISIBLE_CANDIDATES = frozenset(
    {"g", "path", "rect", "circle", "ellipse", "line", "polyline", "polygon", "image", "use", "text"}
)
ZERO_SIZE_ATTRIBUTES = MappingProxyType({
    "circle": ("r",),
    "rect": ("width", "height"),
    "ellipse": ("rx", "ry"),
    "image": ("width", "height"),
})
ZERO_RE = re.compile(r"^\s*[-+]?0*(?:\.0*)?(?:px)?\s*$")


class CommentRemover(OptimizationPass):
    """Remove comments, except those containing a preserved text."""

    step = "comment removal"
    option = "remove_comments"

    def run(self, root, options, report):
        keep = options.preserve.comments
        removed = 0
        for comment in list(iter_comments(root)):
            text = comment.text or ""
            if any(marker in text for marker in keep):
                continue
            if remove_node(comment):
                removed += 1
        report.elements_removed += removed
        logger.debug(f"Removed {removed} comments")


class DefaultAttributePruner(OptimizationPass):
    """Drop attributes whose value is a literal no-op (opacity="1", ...)."""

    step = "attribute cleanup"
    option = "remove_unnecessary_data"

    def run(self, root, options, report):
        preserved = set(options.preserve.attributes)
        removed = 0
        for element in iter_elements(root):
            for name, defaults in DEFAULT_ATTRIBUTE_VALUES.items():
                if name in preserved:
                    continue
                value = element.get(name)
                if value is None or value not in defaults:
                    continue
                if name in INHERITED_PROPERTIES and self._ancestor_overrides(element, name):
                    continue
                del element.attrib[name]
                removed += 1
        report.attributes_removed += removed
        logger.debug(f"Removed {removed} default attributes")

    @staticmethod
    def _ancestor_overrides(element, name: str) -> bool:
        """True if the nearest ancestor declaring `name` sets a non-default value."""
        for ancestor in element.iterancestors():
            value = ancestor.get(name)
            if value is not None:
                return value not in DEFAULT_ATTRIBUTE_VALUES[name]
        return False


def collect_referenced_ids(root) -> Set[str]:
    """Ids referenced via url(#id) in paint/clip/mask/filter/marker/style, href="#id" and <style> text."""
    used = set()
    for element in iter_elements(root):
        for name in REFERENCE_ATTRIBUTES:
            value = element.get(name)
            if value and "url(" in value:
                used.update(URL_REF_RE.findall(value))
        for name in HREF_ATTRIBUTES:
            value = element.get(name)
            if value:
                match = HASH_REF_RE.match(value)
                if match:
                    used.add(match.group(1))
        if localname(element.tag) == "style" and element.text:
            used.update(URL_REF_RE.findall(element.text))
    return used


class DefinitionCleaner(OptimizationPass):
    """
    Remove <defs> children nobody references, then <defs> left empty.

    Repeats until nothing changes, since dropping one definition can
    orphan another that only it referenced.
    """

    step = "definition cleanup"
    option = "cleanup_defs"

    def run(self, root, options, report):
        preserved = set(options.preserve.elements)
        total = 0
        while True:
            removed = self._sweep(root, preserved)
            total += removed
            if removed == 0:
                break
        report.elements_removed += total
        if total:
            logger.debug(f"Removed {total} unused definitions")

    @staticmethod
    def _sweep(root, preserved: Set[str]) -> int:
        used = collect_referenced_ids(root)
        removed = 0
        defs_elements = [el for el in iter_elements(root) if localname(el.tag) == "defs"]
        for defs in defs_elements:
            for child in [c for c in defs if is_element(c)]:
                definition_id = child.get("id")
                if not definition_id or definition_id in used:
                    continue
                if localname(child.tag) in preserved:
                    continue
                if remove_node(child):
                    removed += 1

            if "defs" not in preserved and not any(is_element(c) for c in defs):
                if remove_node(defs):
                    removed += 1
        return removed


class InvisibleElementRemover(OptimizationPass):
    """Remove rendered elements that can never paint anything."""

    step = "invisible element removal"
    option = "remove_invisible_elements"

    def run(self, root, options, report):
        preserved = set(options.preserve.elements)
        doomed = []
        stack = [root]
        while stack:
            element = stack.pop()
            tag = localname(element.tag)
            if tag in NON_RENDERED_CONTAINERS:
                continue
            if element is not root and tag in INVISIBLE_CANDIDATES and tag not in preserved:
                if element.get("id") is None and self._is_invisible(element, tag):
                    doomed.append(element)
                    continue
            stack.extend(child for child in element if is_element(child))

        for element in doomed:
            remove_node(element)
        report.elements_removed += len(doomed)
        if doomed:
            logger.debug(f"Removed {len(doomed)} invisible elements")

    @staticmethod
    def _is_invisible(element, tag: str) -> bool:
        if element.get("display", "").strip() == "none":
            return True
        if tag not in ("g", "text"):
            if element.get("visibility", "").strip() == "hidden":
                return True
            opacity = element.get("opacity")
            if opacity is not None and ZERO_RE.match(opacity):
                return True
        for name in ZERO_SIZE_ATTRIBUTES.get(tag, ()):
            value = element.get(name)
            if value is not None and ZERO_RE.match(value):
                return True
        return False


class EmptyContainerRemover(OptimizationPass):
    """Remove <g> elements with no children and no text, innermost first."""

    step = "container cleanup"
    option = "remove_empty_containers"

    def run(self, root, options, report):
        if "g" in options.preserve.elements:
            return
        removed = 0
        for element in list(iter_elements_post_order(root)):
            if element is root or localname(element.tag) != "g":
                continue
            if len(element) == 0 and not (element.text or "").strip():
                if remove_node(element):
                    removed += 1
        report.elements_removed += removed
        if removed:
            logger.debug(f"Removed {removed} empty groups")
