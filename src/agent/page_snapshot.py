from __future__ import annotations
"""Materialized element tree captured from a page (live browser or static HTML)."""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Union

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag

NON_RENDERED_TAGS = {"HEAD", "SCRIPT", "STYLE", "TEMPLATE", "NOSCRIPT", "META", "LINK", "TITLE"}

_HIDDEN_STYLE_RE = re.compile(r"(?:^|;)\s*(?:display\s*:\s*none|visibility\s*:\s*hidden)\s*(?:!important)?\s*(?:;|$)", re.I)


@dataclass(eq=False)
class ElementNode:
    tag_name: str
    attributes: Dict[str, str] = field(default_factory=dict)
    content: List[Union["ElementNode", str]] = field(default_factory=list)
    visible: bool = True
    parent: Optional["ElementNode"] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.tag_name = self.tag_name.upper()

    @property
    def children(self) -> List["ElementNode"]:
        return [child for child in self.content if isinstance(child, ElementNode)]

    @property
    def id(self) -> str:
        return self.attributes.get("id", "")

    @property
    def value(self) -> str:
        return self.attributes.get("value", "")

    @property
    def href(self) -> str:
        return self.attributes.get("href", "")

    @property
    def type(self) -> str:
        # Mirrors the DOM ``type`` property defaults for form controls.
        raw = self.attributes.get("type", "").strip().lower()
        if self.tag_name == "INPUT":
            return raw or "text"
        if self.tag_name == "BUTTON":
            return raw if raw in {"submit", "reset", "button"} else "submit"
        return raw

    def append(self, child: Union["ElementNode", str]) -> Union["ElementNode", str]:
        if isinstance(child, ElementNode):
            child.parent = self
        self.content.append(child)
        return child

    def iter_descendants(self) -> Iterator["ElementNode"]:
        """Pre-order iteration over every descendant element (self excluded)."""
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def ancestors(self) -> Iterator["ElementNode"]:
        node = self.parent
        while node is not None:
            yield node
            node = node.parent


@dataclass
class PageSnapshot:
    root: ElementNode
    document: ElementNode
    url: Optional[str] = None


def _is_rendered(tag_name: str, attributes: Dict[str, str]) -> bool:
    if tag_name in NON_RENDERED_TAGS:
        return False
    if "hidden" in attributes:
        return False
    if tag_name == "INPUT" and attributes.get("type", "").strip().lower() == "hidden":
        return False
    style = attributes.get("style", "")
    if style and _HIDDEN_STYLE_RE.search(style):
        return False
    return True


def _attributes_from_tag(tag: Tag) -> Dict[str, str]:
    attrs: Dict[str, str] = {}
    for key, val in tag.attrs.items():
        if isinstance(val, (list, tuple)):
            val = " ".join(val)
        attrs[key.lower()] = "" if val is None else str(val)
    return attrs


def _convert_tag(tag: Tag, mapping: Dict[int, ElementNode]) -> ElementNode:
    attrs = _attributes_from_tag(tag)
    node = ElementNode(tag_name=tag.name, attributes=attrs)
    node.visible = _is_rendered(node.tag_name, attrs)
    mapping[id(tag)] = node
    for child in tag.children:
        if isinstance(child, Tag):
            node.append(_convert_tag(child, mapping))
        elif isinstance(child, NavigableString) and not isinstance(child, PreformattedString):
            node.append(str(child))
    return node


def parse_html(html: str, root_selector: Optional[str] = None, url: Optional[str] = None) -> Optional[PageSnapshot]:
    """
    Build a PageSnapshot from static HTML.

    Visibility can only be approximated without a layout engine: the ``hidden``
    attribute, inline ``display:none``/``visibility:hidden``, hidden inputs and
    non-rendered tags mark an element invisible. Returns None when
    ``root_selector`` matches nothing.
    """

    soup = BeautifulSoup(html, "html.parser")
    mapping: Dict[int, ElementNode] = {}

    html_tag = soup.find("html")
    if html_tag is not None:
        document = _convert_tag(html_tag, mapping)
    else:
        # Fragments get a synthetic document element so paths stay absolute.
        document = ElementNode(tag_name="html")
        for child in soup.children:
            if isinstance(child, Tag):
                document.append(_convert_tag(child, mapping))
            elif isinstance(child, NavigableString) and not isinstance(child, PreformattedString):
                document.append(str(child))

    if root_selector:
        match = soup.select_one(root_selector)
        if match is None or id(match) not in mapping:
            logging.debug("parse_html: root_not_found selector=%s", root_selector)
            return None
        root = mapping[id(match)]
    else:
        body = soup.find("body")
        root = mapping[id(body)] if body is not None and id(body) in mapping else document

    return PageSnapshot(root=root, document=document, url=url)


def _node_from_payload(payload: Dict[str, Any], roots: List[ElementNode]) -> ElementNode:
    node = ElementNode(
        tag_name=payload.get("tag") or "",
        attributes={str(k): "" if v is None else str(v) for k, v in (payload.get("attributes") or {}).items()},
        visible=bool(payload.get("visible", True)),
    )
    if payload.get("root"):
        roots.append(node)
    for child in payload.get("children") or []:
        if isinstance(child, dict):
            node.append(_node_from_payload(child, roots))
        elif isinstance(child, str):
            node.append(child)
    return node


def snapshot_from_capture(payload: Dict[str, Any], url: Optional[str] = None) -> PageSnapshot:
    """Turn the JSON tree produced by the in-page capture script into a PageSnapshot."""

    roots: List[ElementNode] = []
    document = _node_from_payload(payload, roots)
    root = roots[0] if roots else document
    return PageSnapshot(root=root, document=document, url=url)
