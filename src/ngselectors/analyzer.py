from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Callable, Iterable, Sequence

from .component_parser import parse_component
from .config import AnalyzerConfig
from .deduplication import deduplicate_components
from .extractors import DEFAULT_EXTRACTORS, SelectorSynthesizer, TemplateExtractor
from .models import (
    AnalysisWarning,
    AnalyzerConfigurationError,
    ComponentDescriptor,
    ComponentSource,
    ElementSelector,
    RouteInfo,
)
from .project_discovery import list_component_sources, list_routing_sources, load_component_source
from .route_parser import assign_routes, parse_routes
from .template_loader import ResolvedTemplate, TemplateUnavailableError, resolve_template

logger = logging.getLogger("ngselectors.analyzer")

SourceReader = Callable[[Path], str]
TemplateResolver = Callable[[Path, str], ResolvedTemplate | None]
WarningCallback = Callable[[AnalysisWarning], None]


@dataclass(frozen=True, slots=True)
class ComponentOutcome:
    descriptor: ComponentDescriptor | None
    warnings: tuple[AnalysisWarning, ...] = ()


@dataclass(frozen=True, slots=True)
class AnalysisReport:
    descriptors: list[ComponentDescriptor] = field(default_factory=list)
    routes: list[RouteInfo] = field(default_factory=list)
    warnings: list[AnalysisWarning] = field(default_factory=list)


def analyze(
    sources: Iterable[ComponentSource],
    *,
    extractors: Sequence[TemplateExtractor] = DEFAULT_EXTRACTORS,
    routes: Sequence[RouteInfo] = (),
    max_workers: int = 1,
    strict: bool = False,
    read_source: SourceReader = load_component_source,
    resolve: TemplateResolver = resolve_template,
    on_warning: WarningCallback | None = None,
) -> list[ComponentDescriptor]:
    if not extractors:
        raise AnalyzerConfigurationError("At least one template extractor must be registered.")
    if max_workers < 1:
        raise AnalyzerConfigurationError(f"max_workers must be at least 1, got {max_workers}.")

    source_list = list(sources)
    logger.info("Analyzing %d component sources.", len(source_list))

    def _run(source: ComponentSource) -> ComponentOutcome:
        return analyze_component(
            source,
            extractors=extractors,
            strict=strict,
            read_source=read_source,
            resolve=resolve,
        )

    if max_workers == 1 or len(source_list) < 2:
        outcomes = [_run(source) for source in source_list]
    else:
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="ngselectors") as pool:
            outcomes = list(pool.map(_run, source_list))

    descriptors: list[ComponentDescriptor] = []
    for outcome in outcomes:
        if on_warning is not None:
            for warning in outcome.warnings:
                on_warning(warning)
        if outcome.descriptor is not None:
            descriptors.append(outcome.descriptor)

    unique = deduplicate_components(descriptors)
    if routes:
        unique = assign_routes(unique, routes)
    logger.info("Analyzed %d components (%d after deduplication).", len(descriptors), len(unique))
    return unique


def analyze_component(
    source: ComponentSource,
    *,
    extractors: Sequence[TemplateExtractor] = DEFAULT_EXTRACTORS,
    strict: bool = False,
    read_source: SourceReader = load_component_source,
    resolve: TemplateResolver = resolve_template,
) -> ComponentOutcome:
    path = Path(source.path)
    source_path = path.as_posix()

    source_text = source.source_text
    if source_text is None:
        try:
            source_text = read_source(path)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read component source %s: %s", source_path, exc)
            return ComponentOutcome(
                descriptor=None,
                warnings=(AnalysisWarning(kind="unreadable_source", source_path=source_path, message=str(exc)),),
            )

    declaration = parse_component(source_text)
    if declaration is None:
        return ComponentOutcome(descriptor=None)

    warnings: list[AnalysisWarning] = []
    template: ResolvedTemplate | None = None
    template_source: str | None = None
    try:
        template = resolve(path, source_text)
    except TemplateUnavailableError as exc:
        template_source = exc.template_path.as_posix()
        warnings.append(_template_warning(source_path, declaration.name, exc))
    except (OSError, UnicodeDecodeError) as exc:
        warnings.append(_template_warning(source_path, declaration.name, exc))

    if template is not None and template.template_path is not None:
        template_source = template.template_path.as_posix()

    selectors: tuple[ElementSelector, ...] = ()
    if template is not None and template.markup.strip():
        synthesizer = SelectorSynthesizer(extractors)
        try:
            selectors = tuple(synthesizer.synthesize(template.markup))
        except Exception as exc:
            if strict:
                raise
            logger.exception("Selector synthesis failed for %s in %s.", declaration.name, source_path)
            selectors = tuple(synthesizer.selectors)
            warnings.append(
                AnalysisWarning(
                    kind="extraction_failed",
                    source_path=source_path,
                    message=str(exc) or exc.__class__.__name__,
                    component_name=declaration.name,
                )
            )

    descriptor = ComponentDescriptor(
        name=declaration.name,
        tag_selector=declaration.tag_selector,
        source_path=source_path,
        template_source=template_source,
        selectors=selectors,
        inputs=declaration.inputs,
        outputs=declaration.outputs,
    )
    return ComponentOutcome(descriptor=descriptor, warnings=tuple(warnings))


def analyze_directory(
    project_root: Path,
    config: AnalyzerConfig | None = None,
    *,
    extractors: Sequence[TemplateExtractor] = DEFAULT_EXTRACTORS,
    on_warning: WarningCallback | None = None,
) -> AnalysisReport:
    settings = config or AnalyzerConfig()
    warnings: list[AnalysisWarning] = []

    def _collect(warning: AnalysisWarning) -> None:
        warnings.append(warning)
        if on_warning is not None:
            on_warning(warning)

    routes: list[RouteInfo] = []
    for routing_file in list_routing_sources(project_root, settings):
        try:
            routes.extend(parse_routes(load_component_source(routing_file)))
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read routing source %s: %s", routing_file.as_posix(), exc)
            _collect(AnalysisWarning(kind="unreadable_source", source_path=routing_file.as_posix(), message=str(exc)))

    descriptors = analyze(
        list_component_sources(project_root, settings),
        extractors=extractors,
        routes=routes,
        max_workers=settings.max_workers,
        strict=settings.strict,
        on_warning=_collect,
    )
    return AnalysisReport(descriptors=descriptors, routes=routes, warnings=warnings)


def _template_warning(source_path: str, component_name: str, exc: Exception) -> AnalysisWarning:
    logger.warning("Could not read template for %s (%s): %s", component_name, source_path, exc)
    return AnalysisWarning(
        kind="unreadable_template",
        source_path=source_path,
        message=str(exc),
        component_name=component_name,
    )
