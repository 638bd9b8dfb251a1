from __future__ import annotations

from dataclasses import replace
import re
from typing import Iterable

from .models import ComponentDescriptor, RouteInfo

_ROUTE_PATH = re.compile(r"\bpath\s*:\s*['\"]([^'\"]*)['\"]")
_ROUTE_COMPONENT = re.compile(r"\bcomponent\s*:\s*(\w+)")
_LAZY_COMPONENT = re.compile(r"loadComponent\s*:.*?\.then\(\s*\(?\s*(\w+)\s*\)?\s*=>\s*\1\.(\w+)", re.DOTALL)
_ROUTE_REDIRECT = re.compile(r"redirectTo\s*:\s*['\"]([^'\"]*)['\"]")
_LAZY_MARKERS = ("loadChildren", "loadComponent")


def parse_routes(source_text: str) -> list[RouteInfo]:
    matches = list(_ROUTE_PATH.finditer(source_text))
    routes: list[RouteInfo] = []
    for index, match in enumerate(matches):
        entry_start = source_text.rfind("{", 0, match.start())
        if entry_start < 0:
            entry_start = match.start()
        entry_end = matches[index + 1].start() if index + 1 < len(matches) else len(source_text)
        entry = source_text[entry_start:entry_end]

        component_match = _ROUTE_COMPONENT.search(entry)
        lazy_match = _LAZY_COMPONENT.search(entry)
        component = None
        if component_match:
            component = component_match.group(1)
        elif lazy_match:
            component = lazy_match.group(2)

        redirect_match = _ROUTE_REDIRECT.search(entry)
        routes.append(
            RouteInfo(
                path=match.group(1),
                component=component,
                redirect_to=redirect_match.group(1) if redirect_match else None,
                is_lazy_loaded=any(marker in entry for marker in _LAZY_MARKERS),
            )
        )
    return routes


def assign_routes(
    descriptors: Iterable[ComponentDescriptor],
    routes: Iterable[RouteInfo],
) -> list[ComponentDescriptor]:
    route_by_component: dict[str, str] = {}
    for route in routes:
        if route.component and route.component not in route_by_component:
            route_by_component[route.component] = route.path

    assigned: list[ComponentDescriptor] = []
    for descriptor in descriptors:
        route_path = route_by_component.get(descriptor.name)
        if route_path is not None and descriptor.route_path is None:
            descriptor = replace(descriptor, route_path=route_path)
        assigned.append(descriptor)
    return assigned
