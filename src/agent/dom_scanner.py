from __future__ import annotations
"""Generic DOM scanner for interactive elements (no app-specific selectors)."""

import logging
from enum import Enum
from typing import Callable, Iterator, List

from .dom import DomAccess
from .page_snapshot import ElementNode

INTERACTIVE_ELEMENTS = {"A", "BUTTON", "INPUT", "SELECT", "TEXTAREA"}


class NodeFilter(Enum):
    ACCEPT = "accept"
    # Drop this node but keep walking its children.
    SKIP = "skip"
    # Drop this node and its whole subtree.
    REJECT = "reject"


def walk_elements(root: ElementNode, accept: Callable[[ElementNode], NodeFilter]) -> Iterator[ElementNode]:
    """
    Pre-order depth-first walk over the descendants of ``root``.

    ``root`` itself is never yielded. ``accept`` decides for each node whether
    it is yielded and whether its children are visited at all.
    """

    stack: List[ElementNode] = list(reversed(root.children))
    while stack:
        node = stack.pop()
        decision = accept(node)
        if decision is NodeFilter.REJECT:
            continue
        if decision is NodeFilter.ACCEPT:
            yield node
        stack.extend(reversed(node.children))


def is_interactive(dom: DomAccess, element: ElementNode) -> bool:
    return dom.get_tag_name(element) in INTERACTIVE_ELEMENTS


# Visible interactive elements only; an invisible container hides everything
# below it even when a descendant would report itself visible.
def scan_interactive_elements(root: ElementNode, dom: DomAccess) -> List[ElementNode]:
    def accept(node: ElementNode) -> NodeFilter:
        if dom.is_visible(node):
            return NodeFilter.ACCEPT
        return NodeFilter.REJECT

    elements = [node for node in walk_elements(root, accept) if is_interactive(dom, node)]
    logging.debug("dom_scanner: root=%s interactive=%s", dom.get_tag_name(root), len(elements))
    return elements
