from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional

LocatorName = Literal[
    "id",
    "linkText",
    "partialLinkText",
    "name",
    "css",
    "className",
    "tagName",
    "xpath",
    "tagIndex",
]


@dataclass(frozen=True)
class Locator:
    name: LocatorName
    locator: str
    selected: bool = False
    always: bool = False
    hidden: bool = False


@dataclass(frozen=True)
class Entity:
    name: str
    locators: List[Locator]
    tag_name: str
    type: str

    @property
    def selected_locator(self) -> Optional[Locator]:
        return next((loc for loc in self.locators if loc.selected), None)

    def locator(self, name: str) -> Optional[Locator]:
        return next((loc for loc in self.locators if loc.name == name), None)


@dataclass
class Model:
    """Catalogue of interactive entities discovered on a page.

    ``used_names`` is the de-duplication registry shared by every name generated
    for this model; it only grows. ``entities`` keeps discovery order.
    """

    used_names: Dict[str, int] = field(default_factory=dict)
    entities: List[Entity] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "Model":
        return cls()

    @property
    def names(self) -> List[str]:
        return [entity.name for entity in self.entities]
