from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, field_validator

from ..config import settings

LOCATOR_STRATEGIES = (
    "id",
    "linkText",
    "partialLinkText",
    "name",
    "css",
    "className",
    "tagName",
    "xpath",
    "tagIndex",
)

WEBDRIVER_LOCATORS = ["id", "linkText", "partialLinkText", "name", "css", "className", "tagName", "xpath"]


class UnknownProfileError(KeyError):
    def __init__(self, name: str, available: Iterable[str] = ()) -> None:
        self.name = name
        self.available = sorted(available)
        super().__init__(name)

    def __str__(self) -> str:
        return f"Unknown profile {self.name!r}; available: {', '.join(self.available) or 'none'}"


class Profile(BaseModel):
    name: str
    locators: List[str]
    description: str = ""

    @field_validator("locators")
    @classmethod
    def _known_locators(cls, value: List[str]) -> List[str]:
        unknown = [loc for loc in value if loc not in LOCATOR_STRATEGIES]
        if unknown:
            raise ValueError(f"unknown locator strategies: {', '.join(unknown)}")
        return value

    def allows(self, locator_name: str) -> bool:
        return locator_name in self.locators


DEFAULT_PROFILES: List[Profile] = [
    Profile(name="java-webdriver", locators=WEBDRIVER_LOCATORS, description="Java / Selenium WebDriver"),
    Profile(name="csharp-webdriver", locators=WEBDRIVER_LOCATORS, description="C# / Selenium WebDriver"),
    Profile(name="python-webdriver", locators=WEBDRIVER_LOCATORS, description="Python / Selenium WebDriver"),
    Profile(name="javascript-webdriver", locators=WEBDRIVER_LOCATORS, description="JavaScript / WebdriverIO"),
    Profile(
        name="robot-framework",
        locators=["id", "name", "linkText", "partialLinkText", "css", "xpath"],
        description="Robot Framework SeleniumLibrary",
    ),
    Profile(
        name="protractor",
        locators=["id", "linkText", "partialLinkText", "name", "css", "className", "tagName", "xpath"],
        description="Protractor",
    ),
    Profile(name="playwright", locators=["id", "linkText", "css", "xpath"], description="Playwright"),
    Profile(name="puppeteer", locators=["id", "css", "xpath"], description="Puppeteer"),
    Profile(name="cypress", locators=["id", "css"], description="Cypress"),
    Profile(name="testcafe", locators=["id", "css"], description="TestCafe"),
    Profile(name="nightwatch", locators=["id", "css", "xpath"], description="Nightwatch.js"),
]


class ProfileRegistry:
    def __init__(self, profiles: Optional[Iterable[Profile]] = None) -> None:
        self._profiles: Dict[str, Profile] = {}
        for profile in DEFAULT_PROFILES if profiles is None else profiles:
            self.register(profile)

    def register(self, profile: Profile) -> None:
        if profile.name in self._profiles:
            logging.debug("profiles: overriding name=%s", profile.name)
        self._profiles[profile.name] = profile

    def get(self, name: str) -> Optional[Profile]:
        return self._profiles.get(name)

    def require(self, name: str) -> Profile:
        profile = self.get(name)
        if profile is None:
            raise UnknownProfileError(name, self._profiles)
        return profile

    def names(self) -> List[str]:
        return list(self._profiles)

    def __contains__(self, name: object) -> bool:
        return name in self._profiles

    def load_file(self, path: str | Path) -> int:
        """Merge profiles from a JSON file holding a list of profile objects."""

        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(data, list):
            raise ValueError(f"Profile file {path} must contain a JSON list")
        for item in data:
            self.register(Profile.model_validate(item))
        logging.info("profiles: loaded path=%s count=%s", path, len(data))
        return len(data)


def get_profile_registry() -> ProfileRegistry:
    registry = ProfileRegistry()
    if settings.profiles_path:
        registry.load_file(settings.profiles_path)
    return registry
