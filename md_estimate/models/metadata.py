from __future__ import annotations

from dataclasses import dataclass

from .invoice import InvoiceParameters

"""Document metadata models organized from front-matter.

Field names follow the front-matter keys (camelCase) because they double as
template placeholder names.
"""

__all__ = [
    "DeveloperInfo",
    "ClientInfo",
    "ProjectInfo",
    "DocumentMetadata",
]


@dataclass(frozen=True)
class DeveloperInfo:
    devName: str = ""
    devEmail: str = ""
    devSkype: str = ""
    devTwitter: str = ""
    devWebsite: str = ""
    devLocation: str = ""


@dataclass(frozen=True)
class ClientInfo:
    clientName: str = ""
    clientCompany: str = ""
    clientLocation: str = ""
    clientEmail: str = ""


@dataclass(frozen=True)
class ProjectInfo:
    """Project section. ``description`` and ``notes`` already hold HTML fragments."""
    title: str
    description: str
    notes: str
    date: str  # formatted for display


@dataclass(frozen=True)
class DocumentMetadata:
    developer: DeveloperInfo
    client: ClientInfo
    project: ProjectInfo
    parameters: InvoiceParameters
