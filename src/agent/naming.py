from __future__ import annotations

import logging
import re
import unicodedata
from typing import Dict, Optional, Tuple

from ..config import settings
from ..models import Model
from .dom import DomAccess
from .page_snapshot import ElementNode

LABELABLE_ELEMENTS = {"INPUT", "BUTTON", "SELECT", "TEXTAREA", "PROGRESS", "METER"}

_APOSTROPHE_RE = re.compile(r"['’]")
_LEADING_DIGIT_RE = re.compile(r"^[0-9]")
# Acronym followed by a capitalized word, capitalized/lower words, bare acronyms,
# ordinals, digit runs, then any other run of letters (non-latin scripts).
_WORD_RE = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|[0-9]*(?:1st|2nd|3rd|(?![123])[0-9]th)(?=\b|[A-Z_])|[0-9]*(?:1ST|2ND|3RD|(?![123])[0-9]TH)(?=\b|[a-z_])|[0-9]+|[^\W\d_A-Za-z]+")

_LIGATURES = {
    "ß": "ss",
    "æ": "ae",
    "Æ": "Ae",
    "œ": "oe",
    "Œ": "Oe",
    "ø": "o",
    "Ø": "O",
    "ð": "d",
    "Ð": "D",
    "đ": "d",
    "Đ": "D",
    "þ": "th",
    "Þ": "Th",
    "ł": "l",
    "Ł": "L",
}


def deburr(value: str) -> str:
    value = "".join(_LIGATURES.get(ch, ch) for ch in value)
    decomposed = unicodedata.normalize("NFKD", value)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return unicodedata.normalize("NFC", stripped)


def split_words(value: str) -> list[str]:
    return _WORD_RE.findall(deburr(_APOSTROPHE_RE.sub("", value)))


def upper_first(value: str) -> str:
    return value[:1].upper() + value[1:]


def camel_case(value: str) -> str:
    """
    Camel-case ``value`` the way lodash's ``camelCase`` does.

    >>> camel_case("Email Address")
    'emailAddress'
    >>> camel_case("jane.doeEmailLink")
    'janeDoeEmailLink'
    >>> camel_case("--")
    ''
    """

    words = split_words(value)
    return "".join(
        word.lower() if index == 0 else upper_first(word.lower()) for index, word in enumerate(words)
    )


def dedupe_name(name: str, used_names: Dict[str, int]) -> str:
    """
    Make ``name`` unique against ``used_names`` and record it.

    The first use of a base name is kept as-is. Later uses are suffixed with the
    number of earlier uses: ``Submit``, ``Submit1``, ``Submit2``. A suffixed
    name is registered too, so a later element whose own base name happens to
    be ``Submit1`` gets ``Submit11`` instead of a duplicate.
    """

    if name not in used_names:
        used_names[name] = 1
        return name

    while True:
        suffix = used_names[name]
        used_names[name] += 1
        candidate = f"{name}{suffix}"
        if candidate not in used_names:
            used_names[candidate] = 1
            return candidate


class NameGenerator:
    def __init__(self, dom: DomAccess, max_length: Optional[int] = None) -> None:
        self.dom = dom
        self.max_length = max_length if max_length is not None else settings.max_name_length

    def name_source(self, element: ElementNode) -> Tuple[str, str]:
        """
        Pick the most meaningful string to derive a name from.

        Label text is the label's visible text: parts of the label hidden in the
        snapshot (e.g. a hidden "Required:" marker) do not end up in the name.

        Returns ``(source, digit_prefix)``; ``digit_prefix`` is the tag name when
        the source is visible text, which may start with a digit.
        """

        dom = self.dom
        tag_name = dom.get_tag_name(element)

        if tag_name in LABELABLE_ELEMENTS:
            label = dom.get_label(element)
            label_text = dom.get_text_content(label) if label is not None else ""
            if label_text:
                return label_text, ""

            if tag_name == "BUTTON" or element.type in {"submit", "reset"}:
                value = element.value.strip()
                if value:
                    return value, ""

        name = dom.get_name(element)
        if name:
            return name, ""

        element_id = dom.get_id(element)
        if element_id:
            return element_id, ""

        href = element.href
        if tag_name == "A" and href.startswith("mailto:"):
            local_part = href[len("mailto:"):].split("@")[0]
            return f"{local_part}EmailLink", ""

        text = dom.get_text_content(element)
        if text:
            return text, tag_name

        return f"{tag_name}{dom.get_tag_index(element)}", ""

    def clean_name(self, value: str, model: Model, digit_prefix: str = "") -> str:
        # camel_case drops strings made only of separators; keep the raw value then.
        cleaned = camel_case(value) or value
        if digit_prefix and _LEADING_DIGIT_RE.match(cleaned):
            cleaned = f"{digit_prefix}{cleaned}"
        base = upper_first(cleaned)[: self.max_length]
        return dedupe_name(base, model.used_names)

    def generate_name(self, element: ElementNode, model: Model) -> str:
        source, digit_prefix = self.name_source(element)
        name = self.clean_name(source, model, digit_prefix)
        logging.debug("naming: source=%r name=%s", source, name)
        return name
