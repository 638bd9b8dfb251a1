from __future__ import annotations

from dataclasses import dataclass
import re

_COMPONENT_DECORATOR = re.compile(r"@Component\s*\(\s*\{")
_TAG_SELECTOR = re.compile(r"selector\s*:\s*['\"]([^'\"]+)['\"]")
_EXPORTED_CLASS = re.compile(r"export\s+(?:default\s+)?(?:abstract\s+)?class\s+(\w+)")

_DECORATED_INPUT = re.compile(r"@Input\([^)]*\)\s*(?:(?:public|protected|readonly)\s+)*(?:set\s+)?(\w+)")
_DECORATED_OUTPUT = re.compile(r"@Output\([^)]*\)\s*(?:(?:public|protected|readonly)\s+)*(\w+)")
_SIGNAL_INPUT = re.compile(r"\b(\w+)\s*=\s*input(?:\.required)?\s*(?:<.*?>)?\s*\(")
_SIGNAL_MODEL = re.compile(r"\b(\w+)\s*=\s*model(?:\.required)?\s*(?:<.*?>)?\s*\(")
_SIGNAL_OUTPUT = re.compile(r"\b(\w+)\s*=\s*output\s*(?:<.*?>)?\s*\(")

UNKNOWN_TAG_SELECTOR = "unknown"
UNKNOWN_COMPONENT_NAME = "UnknownComponent"


@dataclass(frozen=True, slots=True)
class ComponentDeclaration:
    name: str
    tag_selector: str
    decorator: str
    inputs: tuple[str, ...] = ()
    outputs: tuple[str, ...] = ()


def parse_component(source_text: str) -> ComponentDeclaration | None:
    decorator_match = _COMPONENT_DECORATOR.search(source_text)
    if not decorator_match:
        return None

    open_brace_index = decorator_match.end() - 1
    close_brace_index = _find_matching_brace(source_text, open_brace_index)
    if close_brace_index is None:
        close_brace_index = source_text.find("}", open_brace_index)
        if close_brace_index < 0:
            close_brace_index = len(source_text) - 1
    decorator = source_text[decorator_match.start() : close_brace_index + 1]

    selector_match = _TAG_SELECTOR.search(decorator)
    class_match = _EXPORTED_CLASS.search(source_text, decorator_match.start()) or _EXPORTED_CLASS.search(source_text)

    models = list(_SIGNAL_MODEL.finditer(source_text))
    inputs = _names_in_source_order(
        [_DECORATED_INPUT, _SIGNAL_INPUT],
        source_text,
        extra=[(match.start(), match.group(1)) for match in models],
    )
    outputs = _names_in_source_order(
        [_DECORATED_OUTPUT, _SIGNAL_OUTPUT],
        source_text,
        extra=[(match.start(), f"{match.group(1)}Change") for match in models],
    )

    return ComponentDeclaration(
        name=class_match.group(1) if class_match else UNKNOWN_COMPONENT_NAME,
        tag_selector=selector_match.group(1).strip() if selector_match else UNKNOWN_TAG_SELECTOR,
        decorator=decorator,
        inputs=inputs,
        outputs=outputs,
    )


def _find_matching_brace(text: str, open_brace_index: int) -> int | None:
    if open_brace_index >= len(text) or text[open_brace_index] != "{":
        return None

    depth = 0
    for index in range(open_brace_index, len(text)):
        char = text[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index
    return None


def _names_in_source_order(
    patterns: list[re.Pattern[str]],
    source_text: str,
    extra: list[tuple[int, str]],
) -> tuple[str, ...]:
    found = list(extra)
    for pattern in patterns:
        found.extend((match.start(), match.group(1)) for match in pattern.finditer(source_text))

    seen: set[str] = set()
    ordered: list[str] = []
    for _, value in sorted(found):
        if value in seen:
            continue
        seen.add(value)
        ordered.append(value)
    return tuple(ordered)
