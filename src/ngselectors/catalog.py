from __future__ import annotations

import json
from typing import Any, Iterable

from .models import ComponentDescriptor, ElementSelector, SelectorInvariantError

CATALOG_VERSION = 1

_SELECTOR_FIELDS = (
    ("element_type", "elementType"),
    ("strategy", "strategy"),
    ("selector_expression", "selectorExpression"),
    ("property_name", "propertyName"),
    ("text_content", "textContent"),
    ("has_click_handler", "hasClickHandler"),
    ("click_handler_name", "clickHandlerName"),
    ("is_link", "isLink"),
    ("is_table", "isTable"),
    ("is_platform_widget", "isPlatformWidget"),
    ("is_dynamic", "isDynamic"),
)


def selector_to_payload(selector: ElementSelector) -> dict[str, Any]:
    payload = {key: getattr(selector, attribute) for attribute, key in _SELECTOR_FIELDS}
    payload["accessorKind"] = selector.accessor_kind
    return payload


def descriptor_to_payload(descriptor: ComponentDescriptor) -> dict[str, Any]:
    return {
        "name": descriptor.name,
        "tagSelector": descriptor.tag_selector,
        "sourcePath": descriptor.source_path,
        "templateSource": descriptor.template_source,
        "selectors": [selector_to_payload(selector) for selector in descriptor.selectors],
        "inputs": list(descriptor.inputs),
        "outputs": list(descriptor.outputs),
        "routePath": descriptor.route_path,
    }


def dump_catalog(descriptors: Iterable[ComponentDescriptor]) -> str:
    payload = {
        "version": CATALOG_VERSION,
        "components": [descriptor_to_payload(descriptor) for descriptor in descriptors],
    }
    return json.dumps(payload, ensure_ascii=True, indent=2, sort_keys=True)


def load_catalog(text: str) -> list[ComponentDescriptor]:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Catalog is not valid JSON: {exc}") from exc

    if not isinstance(payload, dict) or not isinstance(payload.get("components"), list):
        raise ValueError("Catalog must be an object with a 'components' list.")
    if payload.get("version") != CATALOG_VERSION:
        raise ValueError(f"Unsupported catalog version: {payload.get('version')!r}")

    return [_descriptor_from_payload(item) for item in payload["components"]]


def _descriptor_from_payload(item: Any) -> ComponentDescriptor:
    if not isinstance(item, dict):
        raise ValueError("Catalog component entries must be objects.")
    try:
        return ComponentDescriptor(
            name=str(item["name"]),
            tag_selector=str(item["tagSelector"]),
            source_path=str(item["sourcePath"]),
            template_source=item.get("templateSource"),
            selectors=tuple(_selector_from_payload(selector) for selector in item.get("selectors", [])),
            inputs=tuple(str(name) for name in item.get("inputs", [])),
            outputs=tuple(str(name) for name in item.get("outputs", [])),
            route_path=item.get("routePath"),
        )
    except KeyError as exc:
        raise ValueError(f"Catalog component entry is missing {exc.args[0]!r}.") from exc


def _selector_from_payload(item: Any) -> ElementSelector:
    if not isinstance(item, dict):
        raise ValueError("Catalog selector entries must be objects.")
    values: dict[str, Any] = {}
    for attribute, key in _SELECTOR_FIELDS:
        if key in item:
            values[attribute] = item[key]
    for required in ("element_type", "strategy", "selector_expression", "property_name"):
        if required not in values:
            raise ValueError(f"Catalog selector entry is missing {required!r}.")
    try:
        return ElementSelector(**values)
    except (SelectorInvariantError, TypeError, AttributeError) as exc:
        raise ValueError(f"Catalog selector entry is invalid: {exc}") from exc
