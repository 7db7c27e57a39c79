from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from ..config.loader import EstimateSettings
from ..logging.error_log import ErrorLogBuffer
from ..markdown.front_matter import MetadataError
from ..markdown.table import MissingColumnError, NoTableError, TableValidationError
from ..models.error_record import ErrorRecord
from ..models.processing_result import FileStat, FileStatus, ProcessingResult
from ..utils.values import output_image_name
from .progress import ProgressTracker
from .rasterize import RasterizeError, rasterize
from .renderer import TemplateError, build_html

"""Service orchestration for one CLI run.

Each Markdown document is processed on its own: read -> render -> write.
A failing document never stops the others; its errors are buffered as
ErrorRecords and flushed once at the end of the run.
"""

logger = logging.getLogger(__name__)

INVALID_MARKDOWN_MESSAGE = "Please provide a valid markdown file path."


class InputError(Exception):
    """Raised when an input path is not an existing .md file."""


@dataclass(frozen=True)
class DocumentOutcome:
    status: FileStatus
    output: Path | None = None
    error: str | None = None


def validate_markdown_path(path: Path) -> None:
    """Raises InputError unless ``path`` is an existing file with a .md extension."""
    if not path.exists() or not path.is_file() or path.suffix.lower() != ".md":
        raise InputError(INVALID_MARKDOWN_MESSAGE)


def _error_records(file_name: str, error: Exception) -> list[ErrorRecord]:
    """Classify an exception into one or more error log records."""
    if isinstance(error, TableValidationError):
        return [
            ErrorRecord.create(file_name, v.row, v.error_type, v.message, column=v.column)
            for v in error.violations
        ]
    if isinstance(error, MissingColumnError):
        return [ErrorRecord.create(file_name, -1, "MISSING_COLUMN", str(error), column=error.column)]
    error_type = {
        InputError: "INPUT_ERROR",
        NoTableError: "NO_TABLE",
        MetadataError: "METADATA_ERROR",
        TemplateError: "TEMPLATE_ERROR",
        RasterizeError: "RASTERIZE_ERROR",
    }.get(type(error), "ARITHMETIC_ERROR" if isinstance(error, ArithmeticError) else "UNEXPECTED_ERROR")
    return [ErrorRecord.create(file_name, -1, error_type, str(error))]


def process_document(
    path: Path,
    settings: EstimateSettings,
    image_type: str,
    output_dir: Path,
    progress: ProgressTracker | None = None,
) -> Path:
    """Render one Markdown document and write its output artifact.

    Raises:
        InputError, MetadataError, TableError, ArithmeticError, TemplateError, RasterizeError
    """
    def stage(text: str) -> None:
        logger.debug(f"{path.name}: {text}")
        if progress is not None:
            progress.stage(text)

    stage("Retrieving Markdown content...")
    validate_markdown_path(path)
    try:
        markdown_text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise InputError(f"cannot read {path}: {e}") from e

    html = build_html(markdown_text, settings)

    stamp = int(time.time() * 1000)
    output = output_dir / output_image_name(image_type, stamp)
    while output.exists():
        stamp += 1
        output = output_dir / output_image_name(image_type, stamp)
    stage("Generating image from Markdown...")
    return rasterize(html, output, image_type, settings.quality)


def process_all(
    paths: list[Path],
    settings: EstimateSettings,
    image_type: str | None = None,
    output_dir: Path | None = None,
) -> ProcessingResult:
    """Process every input document and aggregate the results.

    Args:
        paths: Markdown files in the order given on the command line
        settings: Loaded settings
        image_type: Overrides ``settings.image_type`` when given
        output_dir: Overrides ``settings.output_directory`` when given

    Returns:
        ProcessingResult with one FileStat per input
    """
    start_time = datetime.now(UTC)
    error_log = ErrorLogBuffer(Path(settings.error_log_directory))
    kind = image_type or settings.image_type
    target_dir = output_dir if output_dir is not None else Path(settings.output_directory)

    file_stats: list[FileStat] = []
    success_count = 0
    failed_count = 0

    with ProgressTracker(len(paths)) as progress:
        for path in paths:
            progress.start_file(path)
            file_start = datetime.now(UTC)
            try:
                output = process_document(path, settings, kind, target_dir, progress)
            except (
                InputError,
                MetadataError,
                NoTableError,
                MissingColumnError,
                TableValidationError,
                ArithmeticError,
                TemplateError,
                RasterizeError,
            ) as e:
                failed_count += 1
                error_log.extend(_error_records(path.name, e))
                logger.error(f"{path}: {e}")
                outcome = DocumentOutcome(FileStatus.FAILED, error=str(e))
            except Exception as e:
                failed_count += 1
                error_log.extend(_error_records(path.name, e))
                logger.error(f"{path}: unexpected error: {e}")
                logger.debug("traceback", exc_info=True)
                outcome = DocumentOutcome(FileStatus.FAILED, error=str(e))
            else:
                success_count += 1
                logger.info(f"Image successfully created! Output Path: [{output}]")
                outcome = DocumentOutcome(FileStatus.SUCCESS, output=output)

            elapsed = (datetime.now(UTC) - file_start).total_seconds()
            file_stats.append(
                FileStat(
                    file_name=path.name,
                    status=outcome.status.value,
                    elapsed_seconds=elapsed,
                    output=str(outcome.output) if outcome.output is not None else None,
                    error=outcome.error,
                )
            )
            progress.finish_file(success=outcome.status == FileStatus.SUCCESS)

    try:
        log_path = error_log.flush()
    except OSError as e:
        # not fatal
        logger.warning(f"failed to write error log: {e}")
    else:
        if log_path is not None:
            logger.info(f"error details written to {log_path}")

    end_time = datetime.now(UTC)
    return ProcessingResult(
        success_files=success_count,
        failed_files=failed_count,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        file_stats=file_stats,
    )
