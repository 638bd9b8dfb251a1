from __future__ import annotations

import re

from .models import INTERPOLATION_MARKER

TEST_ID_ATTRIBUTE = "data-testid"

STANDARD_HTML_TAGS = frozenset(
    {
        "div", "span", "p", "h1", "h2", "h3", "h4", "h5", "h6",
        "a", "button", "input", "form", "label", "select", "option",
        "table", "tr", "td", "th", "thead", "tbody", "tfoot",
        "ul", "ol", "li", "nav", "header", "footer", "main", "section",
        "article", "aside", "img", "video", "audio", "canvas", "svg",
        "b", "i", "em", "strong", "small", "code", "pre", "textarea", "legend",
        "caption", "dt", "dd", "dl", "summary", "details", "fieldset", "blockquote",
        "figure", "figcaption", "time", "abbr", "mark", "sup", "sub", "u", "s", "q",
        "cite", "ng-container", "ng-template", "optgroup", "title", "style", "script",
    }
)

MATERIAL_BUTTON_MARKERS = (
    "mat-button",
    "mat-raised-button",
    "mat-flat-button",
    "mat-stroked-button",
    "mat-icon-button",
    "mat-fab",
    "mat-mini-fab",
)

COMPOSITE_TABLE_MARKERS = ("mat-table", "[matSort]")
ICON_TAGS = ("mat-icon",)

GENERIC_CLASS_TOKENS = frozenset(
    {
        "cb",
        "form",
        "input",
        "control",
        "field",
        "mat",
        "mdc",
        "ng",
        "col",
        "row",
        "w",
        "full",
        "block",
        "xs",
        "sm",
        "md",
        "lg",
        "xl",
    }
)

_WHITESPACE = re.compile(r"\s+")


def normalize_space(value: str | None, limit: int = 200) -> str:
    if not value:
        return ""
    compact = _WHITESPACE.sub(" ", str(value)).strip()
    return compact[:limit] if compact else ""


def is_dynamic_value(value: str | None) -> bool:
    return bool(value) and INTERPOLATION_MARKER in value


def is_static_text(value: str | None) -> bool:
    return bool(value and value.strip()) and not is_dynamic_value(value)


def is_standard_html_tag(tag: str) -> bool:
    return tag.strip().lower() in STANDARD_HTML_TAGS


def has_composite_table_marker(fragment: str) -> bool:
    return any(marker in fragment for marker in COMPOSITE_TABLE_MARKERS)


def meaningful_class_word(class_value: str | None) -> str | None:
    if not class_value or is_dynamic_value(class_value):
        return None
    for word in re.split(r"[\s_-]+", class_value):
        if not word:
            continue
        if word.lower() in GENERIC_CLASS_TOKENS:
            continue
        if not any(char.isalpha() for char in word):
            continue
        return word
    return None
