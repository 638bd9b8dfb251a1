import json

import pytest

from ngselectors.catalog import dump_catalog, load_catalog
from ngselectors.models import ComponentDescriptor, ElementSelector


def _descriptor() -> ComponentDescriptor:
    return ComponentDescriptor(
        name="LoginComponent",
        tag_selector="app-login",
        source_path="src/app/login/login.component.ts",
        template_source="src/app/login/login.component.html",
        selectors=(
            ElementSelector(
                element_type="button",
                strategy="Role",
                selector_expression='role=button[name="Giriş"]',
                property_name="GirisButton",
                text_content="Giriş",
                has_click_handler=True,
                click_handler_name="onLogin",
            ),
            ElementSelector(
                element_type="h1",
                strategy="Css",
                selector_expression="h1",
                property_name="H1Text",
                is_dynamic=True,
            ),
        ),
        inputs=("username",),
        outputs=("submitted",),
        route_path="login",
    )


def test_dump_catalog_uses_camel_case_keys() -> None:
    payload = json.loads(dump_catalog([_descriptor()]))

    assert payload["version"] == 1
    component = payload["components"][0]
    assert component["tagSelector"] == "app-login"
    assert component["routePath"] == "login"
    assert component["selectors"][0]["selectorExpression"] == 'role=button[name="Giriş"]'
    assert component["selectors"][0]["accessorKind"] == "click"
    assert component["selectors"][1]["isDynamic"] is True
    assert component["selectors"][1]["textContent"] is None


def test_dump_catalog_is_stable_ascii() -> None:
    first = dump_catalog([_descriptor()])

    assert first == dump_catalog([_descriptor()])
    assert first.isascii()


def test_load_catalog_rebuilds_descriptors() -> None:
    original = _descriptor()

    assert load_catalog(dump_catalog([original])) == [original]


def test_load_catalog_rejects_malformed_documents() -> None:
    with pytest.raises(ValueError):
        load_catalog("{not json")
    with pytest.raises(ValueError):
        load_catalog('{"version": 1}')
    with pytest.raises(ValueError):
        load_catalog('{"version": 99, "components": []}')
    with pytest.raises(ValueError):
        load_catalog('{"version": 1, "components": [{"name": "X"}]}')
    with pytest.raises(ValueError):
        load_catalog(_catalog_with_selector({"strategy": "Bogus"}))
    with pytest.raises(ValueError):
        load_catalog(_catalog_with_selector({"strategy": "Role", "elementType": "button"}))


def _catalog_with_selector(overrides: dict[str, object]) -> str:
    selector = {
        "elementType": "div",
        "strategy": "Css",
        "selectorExpression": "div",
        "propertyName": "Panel",
    }
    selector.update(overrides)
    component = {"name": "X", "tagSelector": "app-x", "sourcePath": "x.ts", "selectors": [selector]}
    return json.dumps({"version": 1, "components": [component]})
