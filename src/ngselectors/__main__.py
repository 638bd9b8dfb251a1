from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys
from typing import Sequence

from .analyzer import analyze_directory
from .catalog import dump_catalog
from .config import load_analyzer_config
from .models import AnalysisWarning, AnalyzerConfigurationError

logger = logging.getLogger("ngselectors.cli")


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ngselectors",
        description="Synthesize test selectors for the components of an Angular project.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  ngselectors ./my-app
  ngselectors ./my-app --workers 4 --output catalog.json
  ngselectors ./my-app --strict --verbose
""",
    )
    parser.add_argument("root", type=str, help="Angular project root to scan")
    parser.add_argument("--config", type=str, default=None, help="Config file path (default: ~/.ngselectors/config.json)")
    parser.add_argument("--workers", type=int, default=None, help="Number of components analyzed in parallel")
    parser.add_argument("--strict", action="store_true", help="Fail on the first selector invariant violation")
    parser.add_argument("--output", type=str, default=None, help="Write the catalog to this file instead of stdout")
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    if sys.version_info < (3, 11):
        raise SystemExit(
            "ngselectors requires Python 3.11+. "
            f"Current interpreter: {sys.executable} (Python {sys.version.split()[0]})"
        )

    args = create_parser().parse_args(argv)
    config = load_analyzer_config(Path(args.config) if args.config else None)
    if args.workers is not None:
        config.max_workers = args.workers
    if args.strict:
        config.strict = True
    if args.verbose:
        config.log_level = "DEBUG"

    logging.basicConfig(level=config.log_level, format="%(levelname)s %(name)s: %(message)s")

    root = Path(args.root)
    if not root.is_dir():
        print(f"[ngselectors] not a directory: {root}", file=sys.stderr)
        return 2

    def _report(warning: AnalysisWarning) -> None:
        logger.warning("%s: %s (%s)", warning.kind, warning.source_path, warning.message)

    try:
        report = analyze_directory(root, config, on_warning=_report)
    except AnalyzerConfigurationError as exc:
        print(f"[ngselectors] configuration error: {exc}", file=sys.stderr)
        return 1

    catalog = dump_catalog(report.descriptors) + "\n"
    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(catalog, encoding="utf-8")
    else:
        sys.stdout.write(catalog)

    logger.info(
        "Catalog ready: %d components, %d routes, %d warnings.",
        len(report.descriptors),
        len(report.routes),
        len(report.warnings),
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
