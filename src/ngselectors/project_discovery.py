from __future__ import annotations

import logging
from pathlib import Path

from .config import AnalyzerConfig
from .models import ComponentSource

logger = logging.getLogger("ngselectors.discovery")

ROUTING_FILE_PATTERNS = ("*routing*.ts", "*routes*.ts")


def list_component_sources(project_root: Path, config: AnalyzerConfig | None = None) -> list[ComponentSource]:
    if not project_root.is_dir():
        return []

    settings = config or AnalyzerConfig()
    sources: list[ComponentSource] = []
    for ts_file in _sorted_files(project_root, project_root.rglob("*.ts")):
        if _is_in_excluded_dir(project_root, ts_file, settings):
            continue
        if _is_excluded_file(ts_file, settings):
            continue
        sources.append(ComponentSource(path=ts_file))

    logger.info("Discovered %d candidate component sources under %s.", len(sources), project_root)
    return sources


def list_routing_sources(project_root: Path, config: AnalyzerConfig | None = None) -> list[Path]:
    if not project_root.is_dir():
        return []

    settings = config or AnalyzerConfig()
    found: set[Path] = set()
    for pattern in ROUTING_FILE_PATTERNS:
        for routing_file in project_root.rglob(pattern):
            if _is_in_excluded_dir(project_root, routing_file, settings):
                continue
            if routing_file.name.endswith(".spec.ts"):
                continue
            found.add(routing_file)
    return _sorted_files(project_root, found)


def load_component_source(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="ignore")


def _sorted_files(project_root: Path, paths) -> list[Path]:
    files = [path for path in paths if path.is_file()]
    return sorted(files, key=lambda item: item.relative_to(project_root).as_posix())


def _is_in_excluded_dir(project_root: Path, path: Path, config: AnalyzerConfig) -> bool:
    parts = path.relative_to(project_root).parts[:-1]
    return any(part in config.excluded_dirs for part in parts)


def _is_excluded_file(path: Path, config: AnalyzerConfig) -> bool:
    name = path.name
    if name in config.excluded_names:
        return True
    return any(name.endswith(suffix) for suffix in config.excluded_suffixes)
