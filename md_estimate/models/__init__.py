"""Domain models for the Markdown -> estimate image tool.

Value objects created fresh for every processed document; nothing here is
shared between documents.
"""

from .error_record import ErrorRecord
from .invoice import InvoiceParameters, InvoiceTotals
from .line_item import EXPECTED_COLUMNS, PricedLineItem, ValidatedLineItem
from .metadata import ClientInfo, DeveloperInfo, DocumentMetadata, ProjectInfo
from .processing_result import FileStat, FileStatus, ProcessingResult
from .row_violation import RowViolation

__all__ = [
    # Table models
    "EXPECTED_COLUMNS",
    "ValidatedLineItem",
    "PricedLineItem",
    "RowViolation",
    # Invoice models
    "InvoiceParameters",
    "InvoiceTotals",
    # Metadata models
    "DeveloperInfo",
    "ClientInfo",
    "ProjectInfo",
    "DocumentMetadata",
    # Run bookkeeping
    "ErrorRecord",
    "FileStat",
    "FileStatus",
    "ProcessingResult",
]
