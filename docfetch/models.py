"""Data models shared by the office and fetch pipelines."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class GraphicReference:
    """Snapshot of a graphic object after the embedding pass."""

    display_name: str
    source_url: str
    pixel_width: int
    pixel_height: int
    embedded: bool = False
    resized: bool = False


@dataclass(frozen=True)
class DocPage:
    """Version tag and HTML body extracted from a doc page payload."""

    version: str
    body: str
