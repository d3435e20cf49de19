"""pyuno adapters connecting the document capabilities to a running office.

Start the office with something like::

    soffice --headless --accept="socket,host=localhost,port=2002;urp;"
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, Mapping, Tuple

import uno
from com.sun.star.beans import PropertyValue
from com.sun.star.connection import NoConnectException

from .config import OfficeConfig
from .documents import BitmapTable, Document, DocumentLoader, GraphicObject

logger = logging.getLogger("docfetch.uno")

TEXT_DOCUMENT_SERVICE = "com.sun.star.text.TextDocument"
BITMAP_TABLE_SERVICE = "com.sun.star.drawing.BitmapTable"


class OfficeConnectionError(RuntimeError):
    """Raised when no office process answers on the configured connection."""


class DocumentLoadError(OSError):
    """Raised when the office cannot open a URL as a text document."""


def property_values(properties: Mapping[str, Any]) -> Tuple[PropertyValue, ...]:
    values = []
    for name, value in properties.items():
        prop = PropertyValue()
        prop.Name = name
        prop.Value = value
        values.append(prop)
    return tuple(values)


class UnoGraphicObject(GraphicObject):
    def __init__(self, content: Any) -> None:
        self._content = content

    def supports_service(self, service: str) -> bool:
        return bool(self._content.supportsService(service))

    @property
    def display_name(self) -> str:
        return str(self._content.getPropertyValue("LinkDisplayName"))

    @property
    def graphic_url(self) -> str:
        return str(self._content.getPropertyValue("GraphicURL"))

    @graphic_url.setter
    def graphic_url(self, value: str) -> None:
        self._content.setPropertyValue("GraphicURL", value)

    def pixel_size(self) -> Tuple[int, int]:
        # https://www.openoffice.org/api/docs/common/ref/com/sun/star/graphic/GraphicDescriptor.html
        graphic = self._content.getPropertyValue("Graphic")
        size = graphic.getPropertyValue("SizePixel")
        return size.Width, size.Height

    def set_size(self, width: int, height: int) -> None:
        size = uno.createUnoStruct("com.sun.star.awt.Size", width, height)
        self._content.setPropertyValue("Size", size)

    def property_names(self) -> Tuple[str, ...]:
        graphic = self._content.getPropertyValue("Graphic")
        info = graphic.getPropertySetInfo()
        return tuple(prop.Name for prop in info.getProperties())


class UnoBitmapTable(BitmapTable):
    def __init__(self, container: Any) -> None:
        self._container = container

    def __contains__(self, name: str) -> bool:
        return bool(self._container.hasByName(name))

    def __getitem__(self, name: str) -> str:
        return str(self._container.getByName(name))

    def insert(self, name: str, url: str) -> None:
        self._container.insertByName(name, url)


class UnoTextDocument(Document):
    """A loaded Writer component."""

    def __init__(self, component: Any) -> None:
        if component is None or not component.supportsService(TEXT_DOCUMENT_SERVICE):
            raise TypeError("component is not a text document")
        self.component = component
        self._bitmaps: UnoBitmapTable | None = None

    def graphic_objects(self) -> Iterator[GraphicObject]:
        graphics = self.component.getGraphicObjects()
        for name in graphics.getElementNames():
            yield UnoGraphicObject(graphics.getByName(name))

    def bitmap_table(self) -> BitmapTable:
        if self._bitmaps is None:
            self._bitmaps = UnoBitmapTable(
                self.component.createInstance(BITMAP_TABLE_SERVICE)
            )
        return self._bitmaps

    def add_action_lock(self) -> None:
        self.component.addActionLock()

    def remove_action_lock(self) -> None:
        self.component.removeActionLock()

    def store_as_url(self, url: str, properties: Mapping[str, Any]) -> None:
        self.component.storeAsURL(url, property_values(properties))

    def store_to_url(self, url: str, properties: Mapping[str, Any]) -> None:
        self.component.storeToURL(url, property_values(properties))

    def close(self) -> None:
        self.component.close(True)


class OfficeSession(DocumentLoader):
    """Connection to an office desktop over a UNO bridge."""

    def __init__(self, config: OfficeConfig) -> None:
        self.config = config
        self._desktop: Any = None

    def connect(self) -> "OfficeSession":
        local_context = uno.getComponentContext()
        resolver = local_context.ServiceManager.createInstanceWithContext(
            "com.sun.star.bridge.UnoUrlResolver", local_context
        )
        try:
            context = resolver.resolve(self.config.connection)
        except NoConnectException as exc:
            raise OfficeConnectionError(
                f"No office listening on {self.config.connection}"
            ) from exc
        self._desktop = context.ServiceManager.createInstanceWithContext(
            "com.sun.star.frame.Desktop", context
        )
        logger.debug("Connected to office via %s", self.config.connection)
        return self

    def load(self, url: str, properties: Mapping[str, Any]) -> Document:
        if self._desktop is None:
            self.connect()
        component = self._desktop.loadComponentFromURL(
            url, "_default", 0, property_values(properties)
        )
        if component is None:
            raise DocumentLoadError(f"Office could not load {url}")
        if not component.supportsService(TEXT_DOCUMENT_SERVICE):
            component.close(True)
            raise DocumentLoadError(f"{url} is not a text document")
        return UnoTextDocument(component)

    def __enter__(self) -> "OfficeSession":
        if self._desktop is None:
            self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self._desktop = None
