from __future__ import annotations

from dataclasses import dataclass, field
import re
from typing import Sequence

from .markup_scan import (
    TAG_BODY,
    element_type_at,
    extract_attribute,
    find_element_start,
    inner_text,
    iter_attribute_values,
    opening_tag_at,
    tag_occurrences,
    text_after_tag,
)
from .models import AnalyzerConfigurationError, Candidate, ElementSelector
from .name_suggester import NameRegistry, element_type_suffix, strip_handler_prefix, to_pascal_case
from .selector_assembler import SelectorDraft, assemble_selector, attribute_selector, nth_selector
from .selector_rules import (
    MATERIAL_BUTTON_MARKERS,
    TEST_ID_ATTRIBUTE,
    has_composite_table_marker,
    is_dynamic_value,
    is_standard_html_tag,
    is_static_text,
    meaningful_class_word,
    normalize_space,
)

_BUTTON_WITH_TEXT = re.compile(rf"<button\b{TAG_BODY}>([^<]+)</button\s*>", re.IGNORECASE)
_INPUT_TAG = re.compile(rf"<input\b{TAG_BODY}>", re.IGNORECASE)
_CLICK_HANDLER = re.compile(r"\(click\)\s*=\s*([\"'])\s*([A-Za-z_$][\w$]*)\s*\([^)]*\)\s*;?\s*\1")
_ROUTER_LINK = re.compile(
    r"(?<![\w.\-\[])routerLink\s*=\s*[\"']([^\"']+)[\"']|\[routerLink\]\s*=\s*[\"']([^\"']+)[\"']"
)
_BUTTON_ELEMENT = re.compile(rf"<button\b({TAG_BODY})>(.*?)</button\s*>", re.IGNORECASE | re.DOTALL)
_MAT_FORM_FIELD = re.compile(rf"<mat-form-field\b{TAG_BODY}>(.*?)</mat-form-field\s*>", re.IGNORECASE | re.DOTALL)
_MAT_LABEL = re.compile(rf"<mat-label\b{TAG_BODY}>(.*?)</mat-label\s*>", re.IGNORECASE | re.DOTALL)
_OPENING_TAG = re.compile(rf"<([A-Za-z][\w-]*)(?=[\s>/]){TAG_BODY}>")
_MAT_TABLE_ATTRIBUTE = re.compile(r"(?<![\w-])mat-table(?![\w-])")
_ELEMENT_WITH_TEXT = re.compile(rf"<([A-Za-z][\w-]*)\b{TAG_BODY}>([^<]+)</\1\s*>", re.IGNORECASE)
_ELEMENT_WITH_INTERPOLATION = re.compile(
    rf"<([A-Za-z][\w-]*)\b{TAG_BODY}>([^<]*\{{\{{[^<]*)</\1\s*>", re.IGNORECASE
)

_COMPOSITE_TABLE_CSS = "mat-table, table[mat-table], [mat-table]"
_TABLE_TAGS = {"table", "mat-table"}


@dataclass(slots=True)
class SynthesisContext:
    markup: str
    names: NameRegistry = field(default_factory=NameRegistry)
    selectors: list[ElementSelector] = field(default_factory=list)

    @property
    def table_count(self) -> int:
        return sum(1 for selector in self.selectors if selector.is_table)

    def add(self, draft: SelectorDraft, property_name: str, element_start: int) -> ElementSelector | None:
        if not self.names.claim(property_name, element_start):
            return None
        return self._append(draft, property_name)

    def add_with_counter(
        self,
        draft: SelectorDraft,
        base_name: str,
        element_start: int,
        start: int = 1,
    ) -> ElementSelector:
        property_name = self.names.claim_with_counter(base_name, element_start, start=start)
        return self._append(draft, property_name)

    def _append(self, draft: SelectorDraft, property_name: str) -> ElementSelector:
        selector = assemble_selector(draft, property_name)
        self.selectors.append(selector)
        return selector


class TemplateExtractor:
    """One independent pass over raw template markup.

    ``extract`` only reads the markup. ``build`` turns a candidate into a
    selector against the shared per-component context and may decline it.
    """

    name: str = "base"
    respects_element_claims: bool = True

    def extract(self, markup: str) -> list[Candidate]:
        raise NotImplementedError

    def build(self, candidate: Candidate, context: SynthesisContext) -> ElementSelector | None:
        raise NotImplementedError


class _AttributeExtractor(TemplateExtractor):
    attribute: str = ""

    def extract(self, markup: str) -> list[Candidate]:
        candidates: list[Candidate] = []
        for position, value in iter_attribute_values(markup, self.attribute):
            if is_dynamic_value(value):
                continue
            candidates.append(
                Candidate(
                    position=position,
                    element_start=find_element_start(markup, position),
                    element_type=element_type_at(markup, position),
                    value=value.strip(),
                )
            )
        return candidates


class DataTestIdExtractor(_AttributeExtractor):
    name = "test_id"
    attribute = TEST_ID_ATTRIBUTE

    def build(self, candidate: Candidate, context: SynthesisContext) -> ElementSelector | None:
        property_name = to_pascal_case(candidate.value)
        if not property_name:
            return None
        draft = SelectorDraft(strategy="TestId", element_type=candidate.element_type, value=candidate.value)
        return context.add(draft, property_name, candidate.element_start)


class IdExtractor(_AttributeExtractor):
    name = "id"
    attribute = "id"

    def build(self, candidate: Candidate, context: SynthesisContext) -> ElementSelector | None:
        property_name = to_pascal_case(candidate.value)
        if not property_name:
            return None
        draft = SelectorDraft(strategy="Id", element_type=candidate.element_type, value=candidate.value)
        return context.add(draft, property_name, candidate.element_start)


class ButtonTextExtractor(TemplateExtractor):
    name = "button_text"

    def extract(self, markup: str) -> list[Candidate]:
        candidates: list[Candidate] = []
        for match in _BUTTON_WITH_TEXT.finditer(markup):
            text = normalize_space(match.group(1))
            if not is_static_text(text):
                continue
            candidates.append(
                Candidate(
                    position=match.start(),
                    element_start=match.start(),
                    element_type="button",
                    text=text,
                    attributes=_handler_attributes(opening_tag_at(markup, match.start())),
                )
            )
        return candidates

    def build(self, candidate: Candidate, context: SynthesisContext) -> ElementSelector | None:
        base = to_pascal_case(candidate.text)
        if not base:
            return None
        draft = SelectorDraft(
            strategy="Role",
            element_type="button",
            text=candidate.text,
            click_handler_name=candidate.attributes.get("handler"),
        )
        return context.add(draft, f"{base}Button", candidate.element_start)


class FormControlExtractor(_AttributeExtractor):
    name = "form_control"
    attribute = "formControlName"

    def build(self, candidate: Candidate, context: SynthesisContext) -> ElementSelector | None:
        base = to_pascal_case(candidate.value)
        if not base:
            return None
        element_type = candidate.element_type if candidate.element_type != "unknown" else "input"
        draft = SelectorDraft(
            strategy="Css",
            element_type=element_type,
            attribute=self.attribute,
            value=candidate.value,
        )
        return context.add(draft, f"{base}Input", candidate.element_start)


class TypedInputExtractor(TemplateExtractor):
    name = "typed_input"

    def extract(self, markup: str) -> list[Candidate]:
        candidates: list[Candidate] = []
        for match in _INPUT_TAG.finditer(markup):
            fragment = match.group(0)
            if "formControlName" in fragment:
                continue
            input_type = (extract_attribute(fragment, "type") or "").lower()
            if not input_type or is_dynamic_value(input_type):
                continue
            attributes: dict[str, str] = {}
            for key in ("placeholder", "class"):
                value = extract_attribute(fragment, key)
                if value:
                    attributes[key] = value
            candidates.append(
                Candidate(
                    position=match.start(),
                    element_start=match.start(),
                    element_type="input",
                    value=input_type,
                    attributes=attributes,
                )
            )
        return candidates

    def build(self, candidate: Candidate, context: SynthesisContext) -> ElementSelector | None:
        input_type = candidate.value or "text"
        placeholder = candidate.attributes.get("placeholder")
        type_css = attribute_selector("type", input_type, tag="input")

        if is_static_text(placeholder) and to_pascal_case(placeholder):
            draft = SelectorDraft(strategy="Placeholder", element_type="input", text=placeholder)
            base = f"{to_pascal_case(placeholder)}Input"
        elif input_type == "checkbox":
            draft = SelectorDraft(strategy="Css", element_type="input", css=type_css)
            base = "Checkbox"
        else:
            draft = SelectorDraft(strategy="Css", element_type="input", css=type_css)
            class_word = meaningful_class_word(candidate.attributes.get("class"))
            base = f"{to_pascal_case(class_word or input_type)}Input"

        return context.add_with_counter(draft, base, candidate.element_start)


class ClickHandlerExtractor(TemplateExtractor):
    name = "click_handler"

    def extract(self, markup: str) -> list[Candidate]:
        candidates: list[Candidate] = []
        for match in _CLICK_HANDLER.finditer(markup):
            element_start = find_element_start(markup, match.start())
            attributes: dict[str, str] = {}
            aria_label = extract_attribute(opening_tag_at(markup, element_start), "aria-label")
            if aria_label:
                attributes["aria-label"] = aria_label
            candidates.append(
                Candidate(
                    position=match.start(),
                    element_start=element_start,
                    element_type=element_type_at(markup, match.start()),
                    value=match.group(2),
                    text=text_after_tag(markup, match.start()),
                    attributes=attributes,
                )
            )
        return candidates

    def build(self, candidate: Candidate, context: SynthesisContext) -> ElementSelector | None:
        handler = candidate.value or ""
        element_type = candidate.element_type
        suffix = element_type_suffix(element_type)

        text = candidate.text
        if is_static_text(text) and to_pascal_case(text):
            draft = SelectorDraft(strategy="Text", element_type=element_type, text=text, click_handler_name=handler)
            return context.add(draft, f"{to_pascal_case(text)}{suffix}", candidate.element_start)

        base = to_pascal_case(strip_handler_prefix(handler))
        if not base:
            return None
        aria_label = candidate.attributes.get("aria-label")
        if element_type == "button" and is_static_text(aria_label):
            draft = SelectorDraft(strategy="Role", element_type="button", text=aria_label, click_handler_name=handler)
        else:
            draft = SelectorDraft(strategy="Css", element_type=element_type, click_handler_name=handler)
        return context.add(draft, f"{base}{suffix}", candidate.element_start)


class RouterLinkExtractor(TemplateExtractor):
    name = "router_link"

    def extract(self, markup: str) -> list[Candidate]:
        candidates: list[Candidate] = []
        for match in _ROUTER_LINK.finditer(markup):
            text = text_after_tag(markup, match.start())
            if not is_static_text(text):
                continue
            candidates.append(
                Candidate(
                    position=match.start(),
                    element_start=find_element_start(markup, match.start()),
                    element_type=element_type_at(markup, match.start()),
                    value=match.group(1) or match.group(2),
                    text=text,
                )
            )
        return candidates

    def build(self, candidate: Candidate, context: SynthesisContext) -> ElementSelector | None:
        base = to_pascal_case(candidate.text)
        if not base:
            return None
        draft = SelectorDraft(strategy="Text", element_type=candidate.element_type, text=candidate.text, is_link=True)
        return context.add(draft, f"{base}Link", candidate.element_start)


class MaterialButtonExtractor(TemplateExtractor):
    name = "platform_button"

    def extract(self, markup: str) -> list[Candidate]:
        candidates: list[Candidate] = []
        for match in _BUTTON_ELEMENT.finditer(markup):
            opening_attributes = match.group(1)
            if not any(_has_marker(opening_attributes, marker) for marker in MATERIAL_BUTTON_MARKERS):
                continue
            text = inner_text(match.group(2))
            if not is_static_text(text):
                continue
            candidates.append(
                Candidate(
                    position=match.start(),
                    element_start=match.start(),
                    element_type="button",
                    text=text,
                    attributes=_handler_attributes(opening_attributes),
                )
            )
        return candidates

    def build(self, candidate: Candidate, context: SynthesisContext) -> ElementSelector | None:
        base = to_pascal_case(candidate.text)
        if not base:
            return None
        draft = SelectorDraft(
            strategy="Role",
            element_type="button",
            text=candidate.text,
            click_handler_name=candidate.attributes.get("handler"),
            is_platform_widget=True,
        )
        return context.add(draft, f"{base}Button", candidate.element_start)


class MaterialFormFieldExtractor(TemplateExtractor):
    name = "platform_form_field"

    def extract(self, markup: str) -> list[Candidate]:
        candidates: list[Candidate] = []
        for match in _MAT_FORM_FIELD.finditer(markup):
            label_match = _MAT_LABEL.search(match.group(1))
            if not label_match:
                continue
            label = inner_text(label_match.group(1))
            if not is_static_text(label):
                continue
            candidates.append(
                Candidate(
                    position=match.start(),
                    element_start=match.start(),
                    element_type="mat-form-field",
                    text=label,
                )
            )
        return candidates

    def build(self, candidate: Candidate, context: SynthesisContext) -> ElementSelector | None:
        base = to_pascal_case(candidate.text)
        if not base:
            return None
        draft = SelectorDraft(
            strategy="Label",
            element_type="mat-form-field",
            text=candidate.text,
            label_tag="mat-label",
            is_platform_widget=True,
        )
        return context.add(draft, f"{base}Field", candidate.element_start)


class TableExtractor(TemplateExtractor):
    name = "table"
    respects_element_claims = False

    def extract(self, markup: str) -> list[Candidate]:
        candidates: list[Candidate] = []
        for match in _OPENING_TAG.finditer(markup):
            tag = match.group(1).lower()
            fragment = match.group(0)
            if tag not in _TABLE_TAGS and not _MAT_TABLE_ATTRIBUTE.search(fragment):
                continue
            attributes: dict[str, str] = {}
            for key in ("id", TEST_ID_ATTRIBUTE):
                value = extract_attribute(fragment, key)
                if value and not is_dynamic_value(value):
                    attributes[key] = value
            if has_composite_table_marker(fragment):
                attributes["composite"] = "true"
            candidates.append(
                Candidate(
                    position=match.start(),
                    element_start=match.start(),
                    element_type=tag,
                    attributes=attributes,
                )
            )
        return candidates

    def build(self, candidate: Candidate, context: SynthesisContext) -> ElementSelector | None:
        is_composite = "composite" in candidate.attributes
        element_id = candidate.attributes.get("id")
        test_id = candidate.attributes.get(TEST_ID_ATTRIBUTE)
        table_key = element_id or test_id

        if table_key and to_pascal_case(table_key):
            base = f"{to_pascal_case(table_key)}Table"
        else:
            base = "DataTable" if is_composite else "Table"

        if element_id:
            draft = SelectorDraft(strategy="Id", element_type=candidate.element_type, value=element_id)
        elif test_id:
            draft = SelectorDraft(
                strategy="Id",
                element_type=candidate.element_type,
                value=test_id,
                css=attribute_selector(TEST_ID_ATTRIBUTE, test_id),
            )
        else:
            css = _COMPOSITE_TABLE_CSS if is_composite else candidate.element_type
            draft = SelectorDraft(strategy="Css", element_type=candidate.element_type, css=css)
        draft.is_table = True
        draft.is_platform_widget = is_composite

        property_name = base
        if context.names.is_taken(property_name):
            property_name = f"{base}{context.table_count}"
        return context.add_with_counter(draft, property_name, candidate.element_start)


class CustomElementTextExtractor(TemplateExtractor):
    name = "custom_element_text"

    def extract(self, markup: str) -> list[Candidate]:
        candidates: list[Candidate] = []
        for match in _ELEMENT_WITH_TEXT.finditer(markup):
            tag = match.group(1).lower()
            if is_standard_html_tag(tag):
                continue
            text = normalize_space(match.group(2))
            if not is_static_text(text):
                continue
            candidates.append(
                Candidate(
                    position=match.start(),
                    element_start=match.start(),
                    element_type=tag,
                    text=text,
                )
            )
        return candidates

    def build(self, candidate: Candidate, context: SynthesisContext) -> ElementSelector | None:
        base = to_pascal_case(candidate.text)
        if not base:
            return None
        draft = SelectorDraft(strategy="Text", element_type=candidate.element_type, text=candidate.text)
        return context.add(draft, f"{base}{element_type_suffix(candidate.element_type)}", candidate.element_start)


class DynamicContentExtractor(TemplateExtractor):
    name = "dynamic_content"

    def extract(self, markup: str) -> list[Candidate]:
        candidates: list[Candidate] = []
        for match in _ELEMENT_WITH_INTERPOLATION.finditer(markup):
            tag = match.group(1).lower()
            occurrences = tag_occurrences(markup, tag)
            nth = occurrences.index(match.start()) if len(occurrences) > 1 and match.start() in occurrences else None
            candidates.append(
                Candidate(
                    position=match.start(),
                    element_start=match.start(),
                    element_type=tag,
                    value=nth_selector(tag, nth),
                )
            )
        return candidates

    def build(self, candidate: Candidate, context: SynthesisContext) -> ElementSelector | None:
        draft = SelectorDraft(
            strategy="Css",
            element_type=candidate.element_type,
            css=candidate.value,
            is_dynamic=True,
        )
        return context.add_with_counter(
            draft,
            f"{to_pascal_case(candidate.element_type)}Text",
            candidate.element_start,
            start=2,
        )


INTERACTIVE_EXTRACTORS: tuple[TemplateExtractor, ...] = (
    DataTestIdExtractor(),
    IdExtractor(),
    ButtonTextExtractor(),
    FormControlExtractor(),
    TypedInputExtractor(),
    ClickHandlerExtractor(),
    RouterLinkExtractor(),
    MaterialButtonExtractor(),
    MaterialFormFieldExtractor(),
    TableExtractor(),
    CustomElementTextExtractor(),
)

DEFAULT_EXTRACTORS: tuple[TemplateExtractor, ...] = INTERACTIVE_EXTRACTORS + (DynamicContentExtractor(),)


class SelectorSynthesizer:
    def __init__(self, extractors: Sequence[TemplateExtractor] = DEFAULT_EXTRACTORS) -> None:
        if not extractors:
            raise AnalyzerConfigurationError("At least one template extractor must be registered.")
        self.extractors = tuple(extractors)
        self.selectors: list[ElementSelector] = []

    def synthesize(self, markup: str) -> list[ElementSelector]:
        context = SynthesisContext(markup=markup)
        # Partial results stay reachable through ``self.selectors`` if a pass fails.
        self.selectors = context.selectors
        for extractor in self.extractors:
            for candidate in extractor.extract(markup):
                if extractor.respects_element_claims and context.names.is_element_claimed(candidate.element_start):
                    continue
                extractor.build(candidate, context)
        return list(context.selectors)


def synthesize_selectors(
    markup: str,
    extractors: Sequence[TemplateExtractor] = DEFAULT_EXTRACTORS,
) -> list[ElementSelector]:
    return SelectorSynthesizer(extractors).synthesize(markup)


def _handler_attributes(opening_tag: str) -> dict[str, str]:
    match = _CLICK_HANDLER.search(opening_tag)
    if not match:
        return {}
    return {"handler": match.group(2)}


def _has_marker(attributes: str, marker: str) -> bool:
    return re.search(rf"(?<![\w-]){re.escape(marker)}(?![\w-])", attributes) is not None
