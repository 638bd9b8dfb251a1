from ngselectors.component_parser import UNKNOWN_COMPONENT_NAME, UNKNOWN_TAG_SELECTOR, parse_component

LOGIN_SOURCE = """
import { Component, EventEmitter, Input, Output, input, model, output } from '@angular/core';

@Component({
  selector: 'app-login',
  templateUrl: './login.component.html',
  styles: [`:host { display: block; }`],
})
export class LoginComponent {
  @Input() username = '';
  @Input('mode') set displayMode(value: string) {}
  @Output() submitted = new EventEmitter<void>();
  readonly title = input.required<string>();
  readonly tags = input<Array<string>>([]);
  readonly closed = output<void>();
  readonly checked = model(false);
  @Input() username2 = '';
}
"""


def test_parse_component_metadata() -> None:
    declaration = parse_component(LOGIN_SOURCE)

    assert declaration is not None
    assert declaration.name == "LoginComponent"
    assert declaration.tag_selector == "app-login"
    assert declaration.inputs == ("username", "displayMode", "title", "tags", "checked", "username2")
    assert declaration.outputs == ("submitted", "closed", "checkedChange")
    assert declaration.decorator.startswith("@Component(")
    assert declaration.decorator.endswith("}")


def test_non_component_source_skipped() -> None:
    assert parse_component("@Injectable()\nexport class AuthService {}") is None


def test_defaults_when_selector_and_class_missing() -> None:
    declaration = parse_component("@Component({ template: '<p>x</p>' })\nclass Hidden {}")

    assert declaration is not None
    assert declaration.tag_selector == UNKNOWN_TAG_SELECTOR
    assert declaration.name == UNKNOWN_COMPONENT_NAME


def test_selector_outside_decorator_ignored() -> None:
    source = "@Component({ template: '' })\nexport class Host { selector: 'not-me' }"

    declaration = parse_component(source)

    assert declaration is not None
    assert declaration.tag_selector == UNKNOWN_TAG_SELECTOR
    assert declaration.name == "Host"
