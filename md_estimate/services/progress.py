from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Progress display with tqdm (TTY only).

One bar over the input documents; in non-TTY environments (CI, pipes) the bar
is disabled so no control sequences end up in captured output.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class ProgressTracker:
    """File level progress bar.

    Stage messages (reading, rendering, writing) replace the bar description
    while a document is being processed.
    """

    def __init__(self, total_files: int, *, description: str = "Generating estimates") -> None:
        self.total_files = total_files
        self.description = description
        self.current_file = 0
        self.current_name = ""
        self.succeeded = 0
        self.failed = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_files,
                desc=description,
                unit="file",
                disable=False,
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def start_file(self, file_path: Path) -> None:
        self.current_file += 1
        self.current_name = file_path.name
        if self.enabled and self.pbar is not None:
            self.pbar.set_description(f"{self.description} ({file_path.name})")

    def stage(self, text: str) -> None:
        """Show the current pipeline stage for the running document."""
        if self.enabled and self.pbar is not None:
            self.pbar.set_description(f"{text} ({self.current_name})")

    def finish_file(self, success: bool = True) -> None:
        """Count the finished document and show the running success / failed totals."""
        if success:
            self.succeeded += 1
        else:
            self.failed += 1
        if self.enabled and self.pbar is not None:
            self.pbar.update(1)
            self.pbar.set_postfix(success=self.succeeded, failed=self.failed)
            self.pbar.set_description(self.description)

    def close(self) -> None:
        if self.enabled and self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
