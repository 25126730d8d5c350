from __future__ import annotations
"""DOM access layer: pure queries over a captured PageSnapshot."""

import re
from collections import defaultdict
from functools import cached_property
from typing import Dict, List, Optional, Protocol

from .page_snapshot import ElementNode, PageSnapshot

_CSS_IDENT_RE = re.compile(r"^-?[A-Za-z_][\w-]*$")
_WHITESPACE_RE = re.compile(r"\s+")

BUTTON_INPUT_TYPES = {"submit", "reset", "button", "image"}


class DomAccess(Protocol):
    def get_id(self, element: ElementNode) -> str: ...

    def get_name(self, element: ElementNode) -> str: ...

    def get_text_content(self, element: ElementNode) -> str: ...

    def get_tag_name(self, element: ElementNode) -> str: ...

    def get_tag_index(self, element: ElementNode) -> int: ...

    def get_label(self, element: ElementNode) -> Optional[ElementNode]: ...

    def get_css_selector(self, element: ElementNode) -> str: ...

    def get_xpath(self, element: ElementNode) -> str: ...

    def get_class_name(self, element: ElementNode) -> str: ...

    def get_link_text(self, element: ElementNode) -> str: ...

    def get_tag_type(self, element: ElementNode) -> str: ...

    def is_visible(self, element: ElementNode) -> bool: ...


def collapse_whitespace(value: str) -> str:
    return _WHITESPACE_RE.sub(" ", value).strip()


def visible_text(element: ElementNode) -> str:
    parts: List[str] = []
    stack: list = [element]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
            continue
        if item is not element and not item.visible:
            continue
        stack.extend(reversed(item.content))
    return collapse_whitespace("".join(parts))


class SnapshotDom:
    """
    DomAccess implementation backed by a PageSnapshot.

    Document-wide lookups (tag indexes, ``label[for]`` targets) are computed
    once per snapshot; the snapshot is assumed not to change afterwards.
    """

    def __init__(self, snapshot: PageSnapshot) -> None:
        self.snapshot = snapshot

    @cached_property
    def _tag_indexes(self) -> Dict[ElementNode, int]:
        counters: Dict[str, int] = defaultdict(int)
        indexes: Dict[ElementNode, int] = {}
        document = self.snapshot.document
        for node in [document, *document.iter_descendants()]:
            counters[node.tag_name] += 1
            indexes[node] = counters[node.tag_name]
        return indexes

    @cached_property
    def _labels_by_target(self) -> Dict[str, ElementNode]:
        labels: Dict[str, ElementNode] = {}
        for node in self.snapshot.document.iter_descendants():
            if node.tag_name == "LABEL":
                target = node.attributes.get("for")
                if target and target not in labels:
                    labels[target] = node
        return labels

    def get_id(self, element: ElementNode) -> str:
        return element.id

    def get_name(self, element: ElementNode) -> str:
        return element.attributes.get("name", "")

    def get_text_content(self, element: ElementNode) -> str:
        return visible_text(element)

    def get_tag_name(self, element: ElementNode) -> str:
        return element.tag_name

    def get_tag_index(self, element: ElementNode) -> int:
        index = self._tag_indexes.get(element)
        if index is None:
            # Detached from the snapshot document: count among its own tree.
            top = element
            while top.parent is not None:
                top = top.parent
            nodes = [top, *top.iter_descendants()]
            same_tag = [node for node in nodes if node.tag_name == element.tag_name]
            index = same_tag.index(element) + 1
        return index

    def get_label(self, element: ElementNode) -> Optional[ElementNode]:
        if element.id and element.id in self._labels_by_target:
            return self._labels_by_target[element.id]
        return next((node for node in element.ancestors() if node.tag_name == "LABEL"), None)

    def get_css_selector(self, element: ElementNode) -> str:
        if element.id and _CSS_IDENT_RE.match(element.id):
            return f"#{element.id}"

        segments: List[str] = []
        node: Optional[ElementNode] = element
        while node is not None:
            if node is not element and node.id and _CSS_IDENT_RE.match(node.id):
                segments.append(f"#{node.id}")
                break
            tag = node.tag_name.lower()
            parent = node.parent
            if parent is None:
                segments.append(tag)
                break
            same_tag = [sibling for sibling in parent.children if sibling.tag_name == node.tag_name]
            if len(same_tag) > 1:
                tag = f"{tag}:nth-of-type({same_tag.index(node) + 1})"
            segments.append(tag)
            node = parent
        return " > ".join(reversed(segments))

    def get_xpath(self, element: ElementNode) -> str:
        segments: List[str] = []
        node: Optional[ElementNode] = element
        while node is not None:
            tag = node.tag_name.lower()
            parent = node.parent
            if parent is None:
                index = 1
            else:
                same_tag = [sibling for sibling in parent.children if sibling.tag_name == node.tag_name]
                index = same_tag.index(node) + 1
            segments.append(f"{tag}[{index}]")
            node = parent
        return "/" + "/".join(reversed(segments))

    def get_class_name(self, element: ElementNode) -> str:
        return collapse_whitespace(element.attributes.get("class", ""))

    def get_link_text(self, element: ElementNode) -> str:
        if element.tag_name != "A":
            return ""
        return visible_text(element)

    def get_tag_type(self, element: ElementNode) -> str:
        tag = element.tag_name
        if tag == "A":
            return "link"
        if tag == "BUTTON":
            return "button"
        if tag == "INPUT":
            return "button" if element.type in BUTTON_INPUT_TYPES else element.type
        if tag == "SELECT":
            return "multiselect" if "multiple" in element.attributes else "select"
        return tag.lower()

    def is_visible(self, element: ElementNode) -> bool:
        return element.visible
