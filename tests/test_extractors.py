import pytest

from ngselectors.extractors import (
    DEFAULT_EXTRACTORS,
    INTERACTIVE_EXTRACTORS,
    DataTestIdExtractor,
    IdExtractor,
    SelectorSynthesizer,
    TemplateExtractor,
    synthesize_selectors,
)
from ngselectors.models import AnalyzerConfigurationError, ElementSelector


def _by_name(selectors: list[ElementSelector]) -> dict[str, ElementSelector]:
    return {selector.property_name: selector for selector in selectors}


def test_test_id_button_yields_single_selector() -> None:
    selectors = synthesize_selectors('<button data-testid="submit">Save</button>')

    assert len(selectors) == 1
    assert selectors[0].strategy == "TestId"
    assert selectors[0].selector_expression == "[data-testid='submit']"
    assert selectors[0].property_name == "Submit"


def test_interpolated_heading_only_gets_dynamic_accessor() -> None:
    selectors = synthesize_selectors("<h1>{{ title }}</h1>")

    assert len(selectors) == 1
    heading = selectors[0]
    assert heading.strategy == "Css"
    assert heading.is_dynamic
    assert heading.selector_expression == "h1"
    assert heading.property_name == "H1Text"
    assert heading.text_content is None
    assert heading.accessor_kind == "assert"


def test_form_control_input_uses_binding_attribute() -> None:
    selectors = synthesize_selectors('<input formControlName="username" />')

    assert len(selectors) == 1
    assert selectors[0].strategy == "Css"
    assert selectors[0].selector_expression == "[formControlName='username']"
    assert selectors[0].property_name == "UsernameInput"
    assert selectors[0].accessor_kind == "fill"


def test_test_id_wins_over_id_on_same_element() -> None:
    selectors = synthesize_selectors('<button id="go" data-testid="go-btn">Go</button>')

    assert len(selectors) == 1
    assert selectors[0].strategy == "TestId"
    assert selectors[0].property_name == "GoBtn"


def test_id_skipped_when_derived_name_already_claimed() -> None:
    markup = '<span data-testid="status">ok</span><div id="status">Other</div>'

    selectors = synthesize_selectors(markup, INTERACTIVE_EXTRACTORS)

    assert [(item.strategy, item.property_name) for item in selectors] == [("TestId", "Status")]


def test_button_text_records_click_handler() -> None:
    selectors = synthesize_selectors('<button (click)="onSave()">Save</button>')

    assert len(selectors) == 1
    button = selectors[0]
    assert button.strategy == "Role"
    assert button.property_name == "SaveButton"
    assert button.selector_expression == 'role=button[name="Save"]'
    assert button.text_content == "Save"
    assert button.click_handler_name == "onSave"


def test_dynamic_button_text_never_becomes_role_selector() -> None:
    selectors = synthesize_selectors("<button>{{ label }}</button>")

    assert len(selectors) == 1
    assert selectors[0].strategy == "Css"
    assert selectors[0].is_dynamic
    assert selectors[0].property_name == "ButtonText"


def test_typed_inputs_prefer_placeholder_then_checkbox_then_type() -> None:
    markup = (
        '<input type="email" placeholder="Email address">'
        '<input type="checkbox">'
        '<input type="checkbox">'
        '<input type="password" class="form-control secret">'
        '<input type="text">'
    )

    selectors = _by_name(synthesize_selectors(markup))

    assert selectors["EmailAddressInput"].strategy == "Placeholder"
    assert selectors["EmailAddressInput"].selector_expression == "input[placeholder='Email address']"
    assert selectors["Checkbox"].selector_expression == "input[type='checkbox']"
    assert selectors["Checkbox1"].strategy == "Css"
    assert selectors["SecretInput"].selector_expression == "input[type='password']"
    assert selectors["TextInput"].strategy == "Css"
    assert len(selectors) == 5


def test_dynamic_placeholder_falls_back_to_css() -> None:
    selectors = synthesize_selectors('<input type="search" placeholder="{{ hint }}">')

    assert len(selectors) == 1
    assert selectors[0].strategy == "Css"
    assert selectors[0].property_name == "SearchInput"


def test_click_handler_with_text_uses_text_strategy() -> None:
    selectors = synthesize_selectors('<div (click)="openMenu()">Menu</div>')

    assert len(selectors) == 1
    menu = selectors[0]
    assert menu.strategy == "Text"
    assert menu.property_name == "MenuElement"
    assert menu.selector_expression == 'div:has-text("Menu")'
    assert menu.has_click_handler
    assert menu.accessor_kind == "click"


def test_click_handler_button_without_text() -> None:
    labelled = synthesize_selectors('<button (click)="onClose()" aria-label="Close dialog"></button>')
    bare = synthesize_selectors('<button (click)="onClose()"></button>')

    assert labelled[0].strategy == "Role"
    assert labelled[0].property_name == "CloseButton"
    assert labelled[0].text_content == "Close dialog"
    assert bare[0].strategy == "Css"
    assert bare[0].selector_expression == "button"
    assert bare[0].property_name == "CloseButton"


def test_router_link_with_static_text() -> None:
    selectors = synthesize_selectors('<a routerLink="/home">Home</a><a [routerLink]="link">{{ name }}</a>')

    links = [selector for selector in selectors if selector.is_link]
    assert len(links) == 1
    assert links[0].strategy == "Text"
    assert links[0].property_name == "HomeLink"
    assert links[0].selector_expression == 'a:has-text("Home")'


def test_material_button_with_icon() -> None:
    markup = '<button mat-raised-button color="primary"><mat-icon>save</mat-icon> Save</button>'

    selectors = _by_name(synthesize_selectors(markup))

    button = selectors["SaveButton"]
    assert button.strategy == "Role"
    assert button.is_platform_widget
    assert button.text_content == "Save"


def test_material_form_field_label() -> None:
    markup = (
        "<mat-form-field><mat-label>Email</mat-label>"
        '<input matInput formControlName="email"></mat-form-field>'
    )

    selectors = _by_name(synthesize_selectors(markup))

    field = selectors["EmailField"]
    assert field.strategy == "Label"
    assert field.is_platform_widget
    assert field.selector_expression == 'mat-form-field:has(mat-label:has-text("Email"))'
    assert field.accessor_kind == "fill"
    assert selectors["EmailInput"].strategy == "Css"


def test_tables_named_with_running_count() -> None:
    markup = '<table id="users"></table><table></table><table></table>'

    selectors = synthesize_selectors(markup)
    tables = [selector for selector in selectors if selector.is_table]

    assert [(table.property_name, table.strategy) for table in tables] == [
        ("UsersTable", "Id"),
        ("Table", "Css"),
        ("Table2", "Css"),
    ]
    assert tables[0].selector_expression == "#users"
    assert "Users" in _by_name(selectors)


def test_composite_table_is_platform_widget() -> None:
    selectors = synthesize_selectors('<table mat-table [dataSource]="rows" matSort></table>')

    assert len(selectors) == 1
    table = selectors[0]
    assert table.property_name == "DataTable"
    assert table.is_platform_widget
    assert table.selector_expression == "mat-table, table[mat-table], [mat-table]"
    assert table.accessor_kind == "assert"


def test_custom_element_text_skips_standard_tags() -> None:
    markup = "<app-badge>New</app-badge><span>Plain</span><app-user>{{ user }}</app-user>"

    selectors = synthesize_selectors(markup, INTERACTIVE_EXTRACTORS)

    assert [(item.property_name, item.selector_expression) for item in selectors] == [
        ("NewElement", 'app-badge:has-text("New")'),
    ]


def test_repeated_dynamic_tags_use_nth_and_counter() -> None:
    selectors = synthesize_selectors("<p>{{ a }}</p><p>{{ b }}</p>")

    assert [(item.property_name, item.selector_expression) for item in selectors] == [
        ("PText", "p >> nth=0"),
        ("PText2", "p >> nth=1"),
    ]


def test_no_text_bound_selector_carries_interpolation() -> None:
    markup = (
        "<button>{{ a }}</button><a routerLink='/x'>{{ b }}</a>"
        "<input type='text' placeholder='{{ c }}'><app-chip>{{ d }}</app-chip>"
        "<mat-form-field><mat-label>{{ e }}</mat-label></mat-form-field>"
    )

    for selector in synthesize_selectors(markup):
        if selector.strategy in {"Text", "Role", "Placeholder", "Label"}:
            assert "{{" not in (selector.text_content or "")


def test_property_names_unique_and_output_deterministic() -> None:
    markup = (
        '<form><input type="checkbox"><input type="checkbox"><button (click)="save()">Save</button>'
        '<button mat-button>Save</button><table></table><table></table>'
        "<h2>{{ a }}</h2><h2>{{ b }}</h2></form>"
    )

    first = synthesize_selectors(markup)
    second = synthesize_selectors(markup)

    names = [selector.property_name for selector in first]
    assert len(names) == len(set(names))
    assert first == second


def test_extractor_order_is_explicit() -> None:
    assert [extractor.name for extractor in DEFAULT_EXTRACTORS] == [
        "test_id",
        "id",
        "button_text",
        "form_control",
        "typed_input",
        "click_handler",
        "router_link",
        "platform_button",
        "platform_form_field",
        "table",
        "custom_element_text",
        "dynamic_content",
    ]


def test_custom_extractor_list_changes_precedence() -> None:
    selectors = synthesize_selectors('<button id="go" data-testid="go-btn">Go</button>', [IdExtractor(), DataTestIdExtractor()])

    assert [(item.strategy, item.property_name) for item in selectors] == [("Id", "Go")]


def test_empty_extractor_list_is_rejected() -> None:
    with pytest.raises(AnalyzerConfigurationError):
        SelectorSynthesizer([])


class _BrokenExtractor(TemplateExtractor):
    name = "broken"

    def extract(self, markup: str):
        raise RuntimeError("boom")


def test_partial_selectors_kept_when_a_pass_fails() -> None:
    synthesizer = SelectorSynthesizer([DataTestIdExtractor(), _BrokenExtractor()])

    with pytest.raises(RuntimeError):
        synthesizer.synthesize('<button data-testid="ok">Ok</button>')

    assert [selector.property_name for selector in synthesizer.selectors] == ["Ok"]


def test_greater_than_inside_bound_attribute_does_not_end_the_tag() -> None:
    button = synthesize_selectors('<button [disabled]="count > 0">Clear</button>')
    link = synthesize_selectors('<a routerLink="/cart" *ngIf="items.length > 0">Cart</a>')
    menu = synthesize_selectors('<div (click)="open()" [class.on]="xs.some(x => x.on)">Menu</div>')

    assert [(item.strategy, item.property_name, item.text_content) for item in button] == [
        ("Role", "ClearButton", "Clear")
    ]
    assert button[0].selector_expression == 'role=button[name="Clear"]'
    assert [(item.property_name, item.text_content, item.selector_expression) for item in link] == [
        ("CartLink", "Cart", 'a:has-text("Cart")')
    ]
    assert [(item.property_name, item.text_content) for item in menu] == [("MenuElement", "Menu")]
    assert menu[0].click_handler_name == "open"


def test_bound_comparisons_in_other_passes() -> None:
    markup = (
        '<input type="text" [disabled]="n > 0" placeholder="Name">'
        '<button mat-button [disabled]="n > 0"><mat-icon>add</mat-icon> Add</button>'
        '<table mat-table [dataSource]="rows" *ngIf="rows.length > 0"></table>'
        '<app-tag [hidden]="n > 1">Tag</app-tag>'
        '<span [class.big]="n > 9">{{ n }}</span>'
    )

    selectors = _by_name(synthesize_selectors(markup))

    assert selectors["NameInput"].strategy == "Placeholder"
    assert selectors["AddButton"].text_content == "Add"
    assert selectors["DataTable"].is_platform_widget
    assert selectors["TagElement"].selector_expression == 'app-tag:has-text("Tag")'
    assert selectors["SpanText"].is_dynamic
    for selector in selectors.values():
        assert '">' not in (selector.text_content or "")


def test_interpolated_attribute_values_never_become_selectors() -> None:
    markup = (
        '<div data-testid="row-{{ i }}">Row</div>'
        '<span id="{{ x }}">Label</span>'
        '<input formControlName="{{ c }}">'
        '<table id="{{ t }}"></table>'
    )

    selectors = synthesize_selectors(markup)

    assert [(item.property_name, item.strategy, item.selector_expression) for item in selectors] == [
        ("Table", "Css", "table")
    ]
    for selector in selectors:
        assert "{{" not in selector.selector_expression
        assert selector.strategy not in {"TestId", "Id"}
