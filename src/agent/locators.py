from __future__ import annotations

from dataclasses import replace
from typing import List, Sequence

from ..models import Locator
from .dom import DomAccess
from .page_snapshot import ElementNode
from .profiles import LOCATOR_STRATEGIES, Profile


def candidate_locators(element: ElementNode, dom: DomAccess) -> List[Locator]:
    """Every locator strategy for ``element``, in priority order, usable or not."""

    tag_name = dom.get_tag_name(element)
    link_text = dom.get_link_text(element)
    values = {
        "id": dom.get_id(element),
        "linkText": link_text,
        "partialLinkText": link_text,
        "name": dom.get_name(element),
        "css": dom.get_css_selector(element),
        "className": dom.get_class_name(element),
        "tagName": tag_name,
        "xpath": dom.get_xpath(element),
    }
    locators = [Locator(name=name, locator=values[name] or "") for name in LOCATOR_STRATEGIES[:-1]]
    locators.append(
        Locator(
            name="tagIndex",
            locator=f"{tag_name}{dom.get_tag_index(element)}",
            selected=True,
            always=True,
            hidden=True,
        )
    )
    return locators


def filter_locators(candidates: Sequence[Locator], profile: Profile) -> List[Locator]:
    return [loc for loc in candidates if profile.allows(loc.name) or loc.always]


def select_locator(locators: Sequence[Locator]) -> List[Locator]:
    """
    Return a copy of ``locators`` with exactly one locator selected.

    The first locator with a non-empty value wins. When none has one, the last
    locator (the ``tagIndex`` fallback) stays selected.
    """

    if not locators:
        return []
    chosen = next((i for i, loc in enumerate(locators) if loc.locator), len(locators) - 1)
    return [replace(loc, selected=(i == chosen)) for i, loc in enumerate(locators)]


class LocatorBuilder:
    def __init__(self, dom: DomAccess) -> None:
        self.dom = dom

    def get_locators(self, element: ElementNode, profile: Profile) -> List[Locator]:
        candidates = candidate_locators(element, self.dom)
        return select_locator(filter_locators(candidates, profile))
