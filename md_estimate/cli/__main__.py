from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from md_estimate.config.loader import ConfigError, load_settings
from md_estimate.logging.init import log_summary, setup_logging
from md_estimate.services.orchestrator import process_all
from md_estimate.services.rasterize import IMAGE_TYPES
from md_estimate.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env (overrides existing environment) and settings
- Render every given Markdown file into an estimate image / HTML page
- Print a SUMMARY line and exit with 0 (all ok), 2 (a document failed) or 1 (fatal)
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env via python-dotenv so ESTIMATE_* variables take priority."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="md-estimate",
        description="Generate an estimate image from a markdown file.",
    )
    p.add_argument("markdown", nargs="+", type=Path, help="Path to a Markdown file.")
    p.add_argument(
        "-t", "--type",
        choices=IMAGE_TYPES,
        default=None,
        help="Image type to generate (png, jpeg or html). Defaults to the settings value (png).",
    )
    p.add_argument("-o", "--output-dir", type=Path, default=None, help="Directory for generated files")
    p.add_argument("-c", "--config", type=Path, default=None, help="Settings YAML (default: config/estimate.yml)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None only -> read sys.argv (an empty list must stay empty in tests)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)

    if args.debug:
        for h in logger.handlers:
            h.setLevel("DEBUG")
        logger.setLevel("DEBUG")
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"), override=True)
    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    logger.info(f"Image generation started... ({len(args.markdown)} file(s))")
    result = process_all(args.markdown, settings, image_type=args.type, output_dir=args.output_dir)

    log_summary(render_summary_line(result)[len("SUMMARY "):])

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
