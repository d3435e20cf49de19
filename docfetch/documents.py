"""Capabilities of office documents used by the embedding and saving code.

Each capability is a small abstract class. The pyuno adapters in
``docfetch.uno_bridge`` implement them against a live office process; the
tests implement them in memory.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterator, Mapping, Tuple

TEXT_GRAPHIC_OBJECT_SERVICE = "com.sun.star.text.TextGraphicObject"
# Embedded graphics are addressed as vnd.sun.star.GraphicObject:<id>
INTERNAL_URL_MARKER = "vnd.sun."


def is_internal_url(url: str) -> bool:
    return INTERNAL_URL_MARKER in url


class GraphicObject(ABC):
    """A named graphic placed in a text document."""

    @abstractmethod
    def supports_service(self, service: str) -> bool:
        ...

    @property
    @abstractmethod
    def display_name(self) -> str:
        ...

    @property
    @abstractmethod
    def graphic_url(self) -> str:
        ...

    @graphic_url.setter
    @abstractmethod
    def graphic_url(self, value: str) -> None:
        ...

    @abstractmethod
    def pixel_size(self) -> Tuple[int, int]:
        """Width and height of the underlying bitmap in pixels."""

    @abstractmethod
    def set_size(self, width: int, height: int) -> None:
        """Set the display size in 1/100 mm."""

    def property_names(self) -> Tuple[str, ...]:
        return ()


class BitmapTable(ABC):
    """Document-wide registry of embedded bitmaps keyed by display name."""

    @abstractmethod
    def __contains__(self, name: str) -> bool:
        ...

    @abstractmethod
    def __getitem__(self, name: str) -> str:
        ...

    @abstractmethod
    def insert(self, name: str, url: str) -> None:
        ...

    def embed(self, name: str, url: str) -> str:
        """Register ``url`` under ``name`` unless present and return the embedded reference."""
        if name not in self:
            self.insert(name, url)
        return self[name]


class Document(ABC):
    """An open text document."""

    @abstractmethod
    def graphic_objects(self) -> Iterator[GraphicObject]:
        ...

    @abstractmethod
    def bitmap_table(self) -> BitmapTable:
        ...

    @abstractmethod
    def add_action_lock(self) -> None:
        ...

    @abstractmethod
    def remove_action_lock(self) -> None:
        ...

    @abstractmethod
    def store_as_url(self, url: str, properties: Mapping[str, Any]) -> None:
        """Persist to ``url`` and rebind the document to it."""

    @abstractmethod
    def store_to_url(self, url: str, properties: Mapping[str, Any]) -> None:
        """Export a copy to ``url`` without changing the document's location."""

    def close(self) -> None:
        pass


class DocumentLoader(ABC):
    """Something that opens documents, usually the office desktop."""

    @abstractmethod
    def load(self, url: str, properties: Mapping[str, Any]) -> Document:
        ...
