from __future__ import annotations

from dataclasses import dataclass
import re

from .markup_scan import UNKNOWN_ELEMENT
from .models import ElementSelector, SelectorStrategy
from .selector_rules import TEST_ID_ATTRIBUTE

_CSS_IDENTIFIER = re.compile(r"-?[A-Za-z_][\w-]*")
_DOUBLE_QUOTE = '"'
_ROLE_BY_ELEMENT = {"button": "button", "a": "link"}


@dataclass(slots=True)
class SelectorDraft:
    strategy: SelectorStrategy
    element_type: str
    value: str | None = None
    text: str | None = None
    attribute: str | None = None
    css: str | None = None
    label_tag: str | None = None
    click_handler_name: str | None = None
    is_link: bool = False
    is_table: bool = False
    is_platform_widget: bool = False
    is_dynamic: bool = False


def assemble_selector(draft: SelectorDraft, property_name: str) -> ElementSelector:
    return ElementSelector(
        element_type=draft.element_type or UNKNOWN_ELEMENT,
        strategy=draft.strategy,
        selector_expression=format_expression(draft),
        property_name=property_name,
        text_content=draft.text,
        has_click_handler=draft.click_handler_name is not None,
        click_handler_name=draft.click_handler_name,
        is_link=draft.is_link,
        is_table=draft.is_table,
        is_platform_widget=draft.is_platform_widget,
        is_dynamic=draft.is_dynamic,
    )


def format_expression(draft: SelectorDraft) -> str:
    strategy = draft.strategy
    if strategy == "TestId":
        return attribute_selector(TEST_ID_ATTRIBUTE, draft.value or "")
    if strategy == "Id":
        if draft.css:
            return draft.css
        return id_selector(draft.value or "")
    if strategy == "Role":
        return role_selector(_ROLE_BY_ELEMENT.get(draft.element_type, "button"), draft.text or "")
    if strategy == "Text":
        return text_selector(draft.element_type, draft.text or "")
    if strategy == "Placeholder":
        return attribute_selector("placeholder", draft.text or "", tag=_known_tag(draft.element_type))
    if strategy == "Label":
        return label_selector(draft.element_type, draft.label_tag or "label", draft.text or "")
    if draft.css:
        return draft.css
    if draft.attribute and draft.value:
        return attribute_selector(draft.attribute, draft.value)
    return _known_tag(draft.element_type) or "*"


def quote_literal(value: str, preferred: str = "'") -> str:
    """Quote ``value`` for a selector, switching to the other quote style when needed.

    Values holding both quote styles fall back to backslash escaping of the
    preferred quote.
    """
    alternate = '"' if preferred == "'" else "'"
    if preferred not in value:
        return f"{preferred}{value}{preferred}"
    if alternate not in value:
        return f"{alternate}{value}{alternate}"
    escaped = value.replace("\\", "\\\\").replace(preferred, f"\\{preferred}")
    return f"{preferred}{escaped}{preferred}"


def attribute_selector(attribute: str, value: str, tag: str = "") -> str:
    return f"{tag}[{attribute}={quote_literal(value)}]"


def id_selector(value: str) -> str:
    if _CSS_IDENTIFIER.fullmatch(value):
        return f"#{value}"
    return attribute_selector("id", value)


def role_selector(role: str, name: str) -> str:
    return f"role={role}[name={quote_literal(name, _DOUBLE_QUOTE)}]"


def text_selector(element_type: str, text: str) -> str:
    tag = _known_tag(element_type)
    if not tag:
        return f"text={quote_literal(text, _DOUBLE_QUOTE)}"
    return f"{tag}:has-text({quote_literal(text, _DOUBLE_QUOTE)})"


def label_selector(container: str, label_tag: str, text: str) -> str:
    return f"{container}:has({label_tag}:has-text({quote_literal(text, _DOUBLE_QUOTE)}))"


def nth_selector(tag: str, index: int | None) -> str:
    if index is None:
        return tag
    return f"{tag} >> nth={index}"


def _known_tag(element_type: str | None) -> str:
    tag = (element_type or "").strip().lower()
    if not tag or tag == UNKNOWN_ELEMENT:
        return ""
    return tag
