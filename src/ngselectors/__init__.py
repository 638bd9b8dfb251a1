from __future__ import annotations

from .analyzer import AnalysisReport, analyze, analyze_component, analyze_directory
from .catalog import dump_catalog, load_catalog
from .config import AnalyzerConfig, load_analyzer_config
from .extractors import DEFAULT_EXTRACTORS, INTERACTIVE_EXTRACTORS, SelectorSynthesizer, synthesize_selectors
from .models import (
    AnalysisWarning,
    AnalyzerConfigurationError,
    ComponentDescriptor,
    ComponentSource,
    ElementSelector,
    RouteInfo,
    SelectorInvariantError,
)

__version__ = "0.1.0"

__all__ = [
    "AnalysisReport",
    "AnalysisWarning",
    "AnalyzerConfig",
    "AnalyzerConfigurationError",
    "ComponentDescriptor",
    "ComponentSource",
    "DEFAULT_EXTRACTORS",
    "ElementSelector",
    "INTERACTIVE_EXTRACTORS",
    "RouteInfo",
    "SelectorInvariantError",
    "SelectorSynthesizer",
    "analyze",
    "analyze_component",
    "analyze_directory",
    "dump_catalog",
    "load_analyzer_config",
    "load_catalog",
    "synthesize_selectors",
]
