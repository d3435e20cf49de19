"""Embedding of linked graphics and size correction."""

from __future__ import annotations

import logging
from typing import List

from .documents import (
    TEXT_GRAPHIC_OBJECT_SERVICE,
    Document,
    GraphicObject,
    is_internal_url,
)
from .models import GraphicReference

logger = logging.getLogger("docfetch")

# Screen bitmaps are 96 DPI and the document unit is 1/100 mm: 2540 / 96 ~= 26.458.
# 26.45 matches what the "Original Size" button produces.
PIXEL_TO_HMM = 26.45


def pixels_to_hmm(pixels: int) -> int:
    return int(pixels * PIXEL_TO_HMM)


def describe_properties(graphic: GraphicObject) -> None:
    for name in graphic.property_names():
        logger.debug("  %s", name)


def fix_size(graphic: GraphicObject) -> bool:
    """Resize a graphic to its pixel size at 96 DPI; returns False when skipped."""
    width, height = graphic.pixel_size()
    if width == 0 or height == 0:
        logger.warning(
            "SizePixel of %s is %dx%d, skipping image",
            graphic.display_name,
            width,
            height,
        )
        if logger.isEnabledFor(logging.DEBUG):
            describe_properties(graphic)
        return False
    graphic.set_size(pixels_to_hmm(width), pixels_to_hmm(height))
    return True


def embed_all_images(
    document: Document,
    fix_embedded_sizes: bool = False,
) -> List[GraphicReference]:
    """Embed every linked graphic of ``document`` into its bitmap table.

    Graphics that are already embedded keep their reference. Their size is
    only corrected when ``fix_embedded_sizes`` is set; linked graphics are
    always resized after embedding.
    """
    bitmaps = document.bitmap_table()
    references: List[GraphicReference] = []
    for graphic in document.graphic_objects():
        if not graphic.supports_service(TEXT_GRAPHIC_OBJECT_SERVICE):
            continue
        name = graphic.display_name
        url = graphic.graphic_url
        embedded = False
        if is_internal_url(url):
            logger.debug("%s is already embedded", name)
            if not fix_embedded_sizes:
                continue
        else:
            graphic.graphic_url = bitmaps.embed(name, url)
            embedded = True
            logger.debug("Embedded %s from %s", name, url)

        width, height = graphic.pixel_size()
        references.append(
            GraphicReference(
                display_name=name,
                source_url=url,
                pixel_width=width,
                pixel_height=height,
                embedded=embedded,
                resized=fix_size(graphic),
            )
        )
    logger.info("Embedded %d graphics", sum(ref.embedded for ref in references))
    return references
