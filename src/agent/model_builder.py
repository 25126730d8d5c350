from __future__ import annotations

import logging
from typing import Optional

from ..models import Entity, Model
from .dom import DomAccess
from .dom_scanner import scan_interactive_elements
from .locators import LocatorBuilder
from .naming import NameGenerator
from .page_snapshot import ElementNode
from .profiles import Profile, ProfileRegistry


class ModelBuilder:
    """
    Builds a Model of the interactive entities below an element.

    The builder keeps no state between calls: the name registry lives on the
    Model, and the profile is resolved per call. A Model must not be extended
    by two calls at the same time.
    """

    def __init__(
        self,
        dom: DomAccess,
        profiles: Optional[ProfileRegistry] = None,
        max_name_length: Optional[int] = None,
    ) -> None:
        self.dom = dom
        self.profiles = profiles if profiles is not None else ProfileRegistry()
        self.names = NameGenerator(dom, max_length=max_name_length)
        self.locators = LocatorBuilder(dom)

    def create_entity(self, element: ElementNode, model: Model, profile: Profile) -> Entity:
        return Entity(
            name=self.names.generate_name(element, model),
            locators=self.locators.get_locators(element, profile),
            tag_name=self.dom.get_tag_name(element),
            type=self.dom.get_tag_type(element),
        )

    def create_model(
        self,
        element: ElementNode,
        active_profile: str,
        existing_model: Optional[Model] = None,
    ) -> Optional[Model]:
        """
        Scan ``element`` into a Model, or append it to ``existing_model``.

        With ``existing_model`` the element itself becomes one new entity, with no
        visibility or tag filtering. Otherwise a fresh Model is built from the
        visible interactive descendants of ``element``; None means nothing
        qualified.
        """

        profile = self.profiles.require(active_profile)
        logging.info(
            "model_builder: create_model profile=%s mode=%s",
            profile.name,
            "incremental" if existing_model is not None else "fresh",
        )

        if existing_model is not None:
            entity = self.create_entity(element, existing_model, profile)
            existing_model.entities.append(entity)
            return existing_model

        model = Model.empty()
        for child in scan_interactive_elements(element, self.dom):
            entity = self.create_entity(child, model, profile)
            logging.debug(
                "model_builder: entity name=%s tag=%s selected=%s",
                entity.name,
                entity.tag_name,
                entity.selected_locator.name if entity.selected_locator else None,
            )
            model.entities.append(entity)

        if not model.entities:
            logging.info("model_builder: no_entities root=%s", self.dom.get_tag_name(element))
            return None
        return model
