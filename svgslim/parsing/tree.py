"""Iterative tree walking over lxml elements."""
from typing import Iterator, List

from lxml import etree


def localname(tag) -> str:
    """Tag name without its namespace: '{http://www.w3.org/2000/svg}rect' -> 'rect'."""
    if not isinstance(tag, str):
        return ""
    if "}" in tag:
        return tag.split("}", 1)[1]
    return tag


def is_element(node) -> bool:
    """True for real elements; False for comments, PIs and entities."""
    return isinstance(node, etree._Element) and isinstance(node.tag, str)


def is_comment(node) -> bool:
    return isinstance(node, etree._Comment)


def iter_elements(root) -> Iterator[etree._Element]:
    """
    Pre-order walk over elements using an explicit stack.

    Children are snapshotted when their parent is visited, so callers may
    remove the element being visited or its descendants.
    """
    stack: List[etree._Element] = [root]
    while stack:
        node = stack.pop()
        yield node
        children = [child for child in node if is_element(child)]
        stack.extend(reversed(children))


def iter_elements_post_order(root) -> Iterator[etree._Element]:
    """Post-order walk (children before parents) using an explicit stack."""
    stack = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        if expanded:
            yield node
            continue
        stack.append((node, True))
        children = [child for child in node if is_element(child)]
        for child in reversed(children):
            stack.append((child, False))


def iter_comments(root) -> Iterator[etree._Comment]:
    """All comment nodes below `root`."""
    stack = [root]
    while stack:
        node = stack.pop()
        for child in node:
            if is_comment(child):
                yield child
            elif is_element(child):
                stack.append(child)


def remove_node(node) -> bool:
    """
    Detach `node` from its parent while keeping its tail text in place.

    Returns False when the node has no parent (the root).
    """
    parent = node.getparent()
    if parent is None:
        return False
    tail = node.tail
    if tail:
        previous = node.getprevious()
        if previous is not None:
            previous.tail = (previous.tail or "") + tail
        else:
            parent.text = (parent.text or "") + tail
    parent.remove(node)
    return True


def descendant_elements(root) -> List[etree._Element]:
    """Every element below `root`, excluding `root` itself."""
    walker = iter_elements(root)
    next(walker)
    return list(walker)
