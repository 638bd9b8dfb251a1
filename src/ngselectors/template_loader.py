from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import re
from typing import Callable

_TEMPLATE_URL = re.compile(r"templateUrl\s*:\s*['\"]([^'\"]+)['\"]")
_INLINE_TEMPLATE_PATTERNS = (
    re.compile(r"template\s*:\s*`([^`]*)`", re.DOTALL),
    re.compile(r"template\s*:\s*'([^']*)'", re.DOTALL),
    re.compile(r"template\s*:\s*\"([^\"]*)\"", re.DOTALL),
)


@dataclass(frozen=True, slots=True)
class ResolvedTemplate:
    markup: str
    template_path: Path | None = None

    @property
    def is_inline(self) -> bool:
        return self.template_path is None


class TemplateUnavailableError(OSError):
    def __init__(self, template_path: Path, reason: str) -> None:
        super().__init__(f"Template {template_path} could not be read: {reason}")
        self.template_path = template_path


def read_template_text(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="ignore")


def resolve_template(
    component_path: Path,
    source_text: str,
    read_text: Callable[[Path], str] = read_template_text,
) -> ResolvedTemplate | None:
    declared = declared_template_path(component_path, source_text)
    if declared is not None:
        return ResolvedTemplate(markup=_read_required(declared, read_text), template_path=declared)

    for sibling in convention_template_paths(component_path):
        if sibling.is_file():
            return ResolvedTemplate(markup=_read_required(sibling, read_text), template_path=sibling)

    inline = extract_inline_template(source_text)
    if inline is not None:
        return ResolvedTemplate(markup=inline)
    return None


def declared_template_path(component_path: Path, source_text: str) -> Path | None:
    match = _TEMPLATE_URL.search(source_text)
    if not match:
        return None
    return component_path.parent / match.group(1).strip()


def convention_template_paths(component_path: Path) -> list[Path]:
    paths: list[Path] = []
    name = component_path.name
    if name.endswith(".component.ts"):
        paths.append(component_path.with_name(name[: -len(".component.ts")] + ".component.html"))
    plain = component_path.with_suffix(".html")
    if plain not in paths:
        paths.append(plain)
    return paths


def extract_inline_template(source_text: str) -> str | None:
    for pattern in _INLINE_TEMPLATE_PATTERNS:
        match = pattern.search(source_text)
        if match:
            return match.group(1)
    return None


def _read_required(path: Path, read_text: Callable[[Path], str]) -> str:
    if not path.is_file():
        raise TemplateUnavailableError(path, "file not found")
    try:
        return read_text(path)
    except OSError as exc:
        raise TemplateUnavailableError(path, str(exc)) from exc
