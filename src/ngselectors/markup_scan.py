from __future__ import annotations

from functools import lru_cache
import re
from typing import Iterator

from .selector_rules import ICON_TAGS, normalize_space

UNKNOWN_ELEMENT = "unknown"

# Opening-tag attributes up to the closing `>`, skipping `>` inside quoted values.
TAG_BODY = r"""(?:[^>"']|"[^"]*"|'[^']*')*"""

_OPENING_TAG = re.compile(r"<([A-Za-z][\w-]*)")
_ANY_TAG = re.compile(rf"<{TAG_BODY}>")


@lru_cache(maxsize=64)
def attribute_pattern(name: str) -> re.Pattern[str]:
    # Plain attributes only: `[name]=`, `[attr.name]=` and `data-name=` bindings never match.
    return re.compile(rf"(?<![\w.\-\[]){re.escape(name)}\s*=\s*([\"'])(.*?)\1", re.DOTALL)


def iter_attribute_values(markup: str, name: str) -> Iterator[tuple[int, str]]:
    for match in attribute_pattern(name).finditer(markup):
        value = match.group(2)
        if value.strip():
            yield match.start(), value


def extract_attribute(fragment: str, name: str) -> str | None:
    match = attribute_pattern(name).search(fragment)
    if not match:
        return None
    value = match.group(2).strip()
    return value or None


def find_element_start(markup: str, position: int) -> int:
    start = markup.rfind("<", 0, position + 1)
    # A `<` inside a bound expression such as `*ngIf="a < b"` is not a tag start.
    while start >= 0 and not markup[start + 1 : start + 2].isalpha():
        start = markup.rfind("<", 0, start)
    return start


def find_tag_end(markup: str, position: int) -> int:
    if position < 0:
        return -1

    quote = ""
    for index in range(position, len(markup)):
        char = markup[index]
        if quote:
            if char == quote:
                quote = ""
        elif char in "\"'":
            quote = char
        elif char == ">":
            return index
    return -1


def element_type_at(markup: str, position: int) -> str:
    start = find_element_start(markup, position)
    if start < 0:
        return UNKNOWN_ELEMENT
    match = _OPENING_TAG.match(markup, start)
    return match.group(1).lower() if match else UNKNOWN_ELEMENT


def text_after_tag(markup: str, position: int) -> str | None:
    tag_end = find_tag_end(markup, position)
    if tag_end < 0:
        return None
    text_end = markup.find("<", tag_end + 1)
    if text_end < 0:
        return None
    text = normalize_space(markup[tag_end + 1 : text_end])
    return text or None


def opening_tag_at(markup: str, element_start: int) -> str:
    if element_start < 0:
        return ""
    tag_end = find_tag_end(markup, element_start)
    if tag_end < 0:
        return markup[element_start:]
    return markup[element_start : tag_end + 1]


def inner_text(fragment: str) -> str:
    """Visible text of an element body with icon glyph elements removed."""
    stripped = fragment
    for icon_tag in ICON_TAGS:
        stripped = re.sub(
            rf"<{re.escape(icon_tag)}\b{TAG_BODY}>.*?</{re.escape(icon_tag)}\s*>",
            " ",
            stripped,
            flags=re.IGNORECASE | re.DOTALL,
        )
    return normalize_space(_ANY_TAG.sub(" ", stripped))


def tag_occurrences(markup: str, tag: str) -> list[int]:
    pattern = re.compile(rf"<{re.escape(tag)}(?=[\s>/])", re.IGNORECASE)
    return [match.start() for match in pattern.finditer(markup)]
