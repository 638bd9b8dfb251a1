from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

SelectorStrategy = Literal["TestId", "Id", "Role", "Text", "Placeholder", "Label", "Css"]
AccessorKind = Literal["click", "fill", "assert"]
WarningKind = Literal["unreadable_source", "unreadable_template", "extraction_failed"]

SELECTOR_STRATEGIES: tuple[SelectorStrategy, ...] = ("TestId", "Id", "Role", "Text", "Placeholder", "Label", "Css")
TEXT_BOUND_STRATEGIES = frozenset({"Text", "Role", "Placeholder", "Label"})
INTERPOLATION_MARKER = "{{"

_FILLABLE_ELEMENTS = {"input", "textarea", "select"}
_CLICKABLE_ELEMENTS = {"button", "a"}


class SelectorInvariantError(AssertionError):
    pass


class AnalyzerConfigurationError(ValueError):
    pass


@dataclass(frozen=True, slots=True)
class ElementSelector:
    element_type: str
    strategy: SelectorStrategy
    selector_expression: str
    property_name: str
    text_content: str | None = None
    has_click_handler: bool = False
    click_handler_name: str | None = None
    is_link: bool = False
    is_table: bool = False
    is_platform_widget: bool = False
    is_dynamic: bool = False

    def __post_init__(self) -> None:
        if self.strategy not in SELECTOR_STRATEGIES:
            raise SelectorInvariantError(f"Unknown selector strategy {self.strategy!r} for {self.property_name}.")
        if not self.property_name:
            raise SelectorInvariantError("Selector property name must not be empty.")
        if self.strategy in TEXT_BOUND_STRATEGIES:
            text = (self.text_content or "").strip()
            if not text:
                raise SelectorInvariantError(
                    f"{self.strategy} selector {self.property_name} requires static text content."
                )
            if INTERPOLATION_MARKER in text:
                raise SelectorInvariantError(
                    f"{self.strategy} selector {self.property_name} was built from dynamic text {text!r}."
                )

    @property
    def accessor_kind(self) -> AccessorKind:
        if self.is_dynamic or self.is_table:
            return "assert"
        if self.element_type in _FILLABLE_ELEMENTS or self.strategy == "Label":
            return "fill"
        if self.element_type in _CLICKABLE_ELEMENTS or self.is_link or self.has_click_handler:
            return "click"
        if self.is_platform_widget and self.strategy == "Role":
            return "click"
        return "assert"


@dataclass(frozen=True, slots=True)
class ComponentDescriptor:
    name: str
    tag_selector: str
    source_path: str
    template_source: str | None = None
    selectors: tuple[ElementSelector, ...] = ()
    inputs: tuple[str, ...] = ()
    outputs: tuple[str, ...] = ()
    route_path: str | None = None

    def property_names(self) -> list[str]:
        return [selector.property_name for selector in self.selectors]


@dataclass(frozen=True, slots=True)
class Candidate:
    position: int
    element_start: int
    element_type: str
    value: str | None = None
    text: str | None = None
    attributes: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class RouteInfo:
    path: str
    component: str | None = None
    redirect_to: str | None = None
    is_lazy_loaded: bool = False


@dataclass(frozen=True, slots=True)
class ComponentSource:
    path: Path
    source_text: str | None = None


@dataclass(frozen=True, slots=True)
class AnalysisWarning:
    kind: WarningKind
    source_path: str
    message: str
    component_name: str | None = None
