"""Opening, locking and saving office documents."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, TypeVar, Union

from .config import FODT_FILTER, HTML_FILTER, PDF_FILTER
from .documents import Document, DocumentLoader
from .images import embed_all_images
from .utils import to_file_url

logger = logging.getLogger("docfetch")

T = TypeVar("T")
Target = Union[str, Path]

HTML_SUFFIXES = {".html", ".htm"}


@contextmanager
def action_lock(document: Document) -> Iterator[Document]:
    """Hold the document's action lock so edits are applied as one batch."""
    document.add_action_lock()
    try:
        yield document
    finally:
        document.remove_action_lock()


def with_locked_ui(document: Document, operation: Callable[[], T]) -> T:
    with action_lock(document):
        return operation()


def open_document(loader: DocumentLoader, source: Target) -> Document:
    url = to_file_url(source)
    logger.debug("Opening %s", url)
    return loader.load(url, {})


def open_html(loader: DocumentLoader, source: Target) -> Document:
    url = to_file_url(source)
    logger.debug("Opening %s with %s", url, HTML_FILTER)
    return loader.load(url, {"FilterName": HTML_FILTER})


def save_as_fodt(document: Document, target: Target) -> str:
    url = to_file_url(target)
    document.store_as_url(url, {"Overwrite": True, "FilterName": FODT_FILTER})
    logger.info("Saved %s", url)
    return url


def save_as_pdf(document: Document, target: Target) -> str:
    url = to_file_url(target)
    document.store_to_url(url, {"Overwrite": True, "FilterName": PDF_FILTER})
    logger.info("Exported %s", url)
    return url


SAVERS = {
    "fodt": save_as_fodt,
    "pdf": save_as_pdf,
}


def convert_document(
    loader: DocumentLoader,
    source: Path,
    output_dir: Path,
    formats: Iterable[str] = ("fodt",),
    embed_images: bool = True,
    fix_embedded_sizes: bool = False,
) -> List[Path]:
    """Open ``source``, embed its images and write the requested formats."""
    opener = open_html if source.suffix.lower() in HTML_SUFFIXES else open_document
    document = opener(loader, source)
    outputs: List[Path] = []
    try:
        if embed_images:
            with_locked_ui(
                document,
                lambda: embed_all_images(document, fix_embedded_sizes=fix_embedded_sizes),
            )
        output_dir.mkdir(parents=True, exist_ok=True)
        for fmt in formats:
            target = output_dir / f"{source.stem}.{fmt}"
            SAVERS[fmt](document, target)
            outputs.append(target)
    finally:
        document.close()
    return outputs
