"""Configuration objects and constants for the office and fetch pipelines."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

DEFAULT_OFFICE_CONNECTION = (
    "uno:socket,host=localhost,port=2002;urp;StarOffice.ComponentContext"
)
OFFICE_CONNECTION_ENV = "DOCFETCH_OFFICE_CONNECTION"

# Filter names as registered in share/registry/writer.xcd
HTML_FILTER = "HTML (StarWriter)"
FODT_FILTER = "OpenDocument Text Flat XML"
PDF_FILTER = "writer_pdf_Export"

DOC_API_URL_TEMPLATE = "https://{host}/api/redhat_node/{id}"


def _default_connection() -> str:
    return os.getenv(OFFICE_CONNECTION_ENV) or DEFAULT_OFFICE_CONNECTION


@dataclass
class FetchConfig:
    """Settings that control doc page downloads."""

    output_root: Path
    skip_downloads: bool = False
    timeout: Optional[float] = None


@dataclass
class OfficeConfig:
    """Settings for talking to a running office instance."""

    connection: str = field(default_factory=_default_connection)
    embed_images: bool = True
    fix_embedded_sizes: bool = False
