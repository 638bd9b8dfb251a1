from __future__ import annotations

from dataclasses import dataclass, field
import re
import unicodedata

_NON_ALPHANUMERIC = re.compile(r"[^A-Za-z0-9]+")
_TURKISH_TABLE = str.maketrans(
    {
        "ç": "c",
        "Ç": "C",
        "ğ": "g",
        "Ğ": "G",
        "ı": "i",
        "İ": "I",
        "ö": "o",
        "Ö": "O",
        "ş": "s",
        "Ş": "S",
        "ü": "u",
        "Ü": "U",
    }
)

_ELEMENT_SUFFIXES = {
    "button": "Button",
    "mat-button": "Button",
    "a": "Link",
    "input": "Input",
    "table": "Table",
    "mat-table": "Table",
}


def to_pascal_case(value: str | None) -> str:
    if not value:
        return ""
    words = [word for word in _NON_ALPHANUMERIC.split(fold_to_ascii(value)) if word]
    return "".join(word[0].upper() + word[1:].lower() for word in words)


def fold_to_ascii(value: str) -> str:
    decomposed = unicodedata.normalize("NFKD", value.translate(_TURKISH_TABLE))
    return "".join(char for char in decomposed if not unicodedata.combining(char))


def element_type_suffix(element_type: str) -> str:
    return _ELEMENT_SUFFIXES.get(element_type.strip().lower(), "Element")


def strip_handler_prefix(handler_name: str) -> str:
    if len(handler_name) > 2 and handler_name[:2].lower() == "on":
        return handler_name[2:]
    return handler_name


@dataclass(slots=True)
class NameRegistry:
    """Collision table for one component.

    Tracks claimed property names and the opening-tag offsets of elements
    that already produced a selector. Created per component and threaded
    through every extractor pass in run order; first claim wins.
    """

    names: set[str] = field(default_factory=set)
    elements: set[int] = field(default_factory=set)

    def is_taken(self, name: str) -> bool:
        return name in self.names

    def is_element_claimed(self, element_start: int) -> bool:
        return element_start >= 0 and element_start in self.elements

    def claim(self, name: str, element_start: int | None = None) -> bool:
        if not name or name in self.names:
            return False
        self.names.add(name)
        self._claim_element(element_start)
        return True

    def claim_with_counter(self, base: str, element_start: int | None = None, start: int = 1) -> str:
        name = base
        counter = start
        while name in self.names:
            name = f"{base}{counter}"
            counter += 1
        self.names.add(name)
        self._claim_element(element_start)
        return name

    def _claim_element(self, element_start: int | None) -> None:
        if element_start is not None and element_start >= 0:
            self.elements.add(element_start)
