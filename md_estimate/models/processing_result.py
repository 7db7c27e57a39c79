from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

"""Processing result models for a CLI run over one or more Markdown documents."""


class FileStatus(Enum):
    """Per-document outcome: pending -> (success | failed)."""
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class FileStat:
    """Per-document processing statistics."""
    file_name: str
    status: str  # success/failed
    elapsed_seconds: float
    output: str | None = None  # written artifact path
    error: str | None = None  # failure reason summary


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results used for the SUMMARY line and exit code."""
    success_files: int
    failed_files: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_stats: list[FileStat] | None = None
