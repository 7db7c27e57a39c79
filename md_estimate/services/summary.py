from __future__ import annotations

from ..models.processing_result import ProcessingResult

"""SUMMARY line rendering for the end of a CLI run."""


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation for tiny durations
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(value)


def render_summary_line(result: ProcessingResult) -> str:
    """Render the SUMMARY line.

    Format:
    SUMMARY files={total} success={success} failed={failed} elapsed_sec={elapsed}

    Examples:
        >>> from datetime import datetime, timezone
        >>> start = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2024, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = ProcessingResult(
        ...     success_files=2, failed_files=1, start_time=start, end_time=end,
        ...     elapsed_seconds=2.0,
        ... )
        >>> render_summary_line(result)
        'SUMMARY files=3 success=2 failed=1 elapsed_sec=2'
    """
    total_files = result.success_files + result.failed_files
    return (
        f"SUMMARY files={total_files} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
