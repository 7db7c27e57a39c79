from __future__ import annotations

from dataclasses import dataclass

"""RowViolation model for table cell validation.

One instance per offending cell; rows are 1-based data row indexes
(the header row is not counted).
"""

__all__ = [
    "RowViolation",
]

_LABELS = {
    "price": "Price",
    "qty": "Qty",
}


@dataclass(frozen=True)
class RowViolation:
    row: int  # 1-based
    column: str  # canonical column name (price | qty)

    @property
    def message(self) -> str:
        label = _LABELS.get(self.column, self.column.title())
        return f"Object {self.row}: Invalid {label}"

    @property
    def error_type(self) -> str:
        """UPPER_SNAKE classification used by the error log."""
        return f"INVALID_{self.column.upper()}"
