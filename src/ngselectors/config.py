from __future__ import annotations

from dataclasses import dataclass, fields
import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger("ngselectors.config")

CONFIG_DIR = Path.home() / ".ngselectors"
CONFIG_PATH = CONFIG_DIR / "config.json"

DEFAULT_EXCLUDED_SUFFIXES = (
    ".spec.ts",
    ".module.ts",
    ".service.ts",
    ".guard.ts",
    ".interceptor.ts",
    ".model.ts",
    ".pipe.ts",
    ".directive.ts",
    ".config.ts",
    ".routes.ts",
    ".d.ts",
)
DEFAULT_EXCLUDED_NAMES = ("index.ts", "main.ts")
DEFAULT_EXCLUDED_DIRS = ("node_modules", "dist", ".angular", ".git")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(slots=True)
class AnalyzerConfig:
    max_workers: int = 1
    strict: bool = False
    log_level: str = "INFO"
    excluded_suffixes: tuple[str, ...] = DEFAULT_EXCLUDED_SUFFIXES
    excluded_names: tuple[str, ...] = DEFAULT_EXCLUDED_NAMES
    excluded_dirs: tuple[str, ...] = DEFAULT_EXCLUDED_DIRS


def load_analyzer_config(config_path: Path | None = None) -> AnalyzerConfig:
    path = config_path or CONFIG_PATH
    if not path.exists() or not path.is_file():
        return AnalyzerConfig()

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, TypeError, UnicodeDecodeError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", path, exc)
        return AnalyzerConfig()

    if not isinstance(payload, dict):
        logger.warning("Ignoring config %s: expected a JSON object.", path)
        return AnalyzerConfig()

    known = {item.name for item in fields(AnalyzerConfig)}
    unknown = sorted(key for key in payload if key not in known)
    if unknown:
        logger.warning("Ignoring unknown config keys in %s: %s", path, ", ".join(unknown))

    defaults = AnalyzerConfig()
    return AnalyzerConfig(
        max_workers=_positive_int(payload, "max_workers", defaults.max_workers),
        strict=_boolean(payload, "strict", defaults.strict),
        log_level=_log_level(payload, "log_level", defaults.log_level),
        excluded_suffixes=_string_tuple(payload, "excluded_suffixes", defaults.excluded_suffixes),
        excluded_names=_string_tuple(payload, "excluded_names", defaults.excluded_names),
        excluded_dirs=_string_tuple(payload, "excluded_dirs", defaults.excluded_dirs),
    )


def _positive_int(payload: dict[str, Any], key: str, default: int) -> int:
    value = payload.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        _log_fallback(key, value, default)
        return default
    return value


def _boolean(payload: dict[str, Any], key: str, default: bool) -> bool:
    value = payload.get(key, default)
    if not isinstance(value, bool):
        _log_fallback(key, value, default)
        return default
    return value


def _log_level(payload: dict[str, Any], key: str, default: str) -> str:
    value = payload.get(key, default)
    if not isinstance(value, str) or value.strip().upper() not in LOG_LEVELS:
        _log_fallback(key, value, default)
        return default
    return value.strip().upper()


def _string_tuple(payload: dict[str, Any], key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    value = payload.get(key, default)
    if not isinstance(value, (list, tuple)) or not all(isinstance(item, str) for item in value):
        _log_fallback(key, value, default)
        return default
    return tuple(item for item in value if item)


def _log_fallback(key: str, value: object, default: object) -> None:
    logger.warning("Config key %s has invalid value %r; using %r.", key, value, default)
