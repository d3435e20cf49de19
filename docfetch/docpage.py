"""Doc page downloads: revision id scraping, content API fetch and HTML rendering."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional, Tuple, Union
from urllib.parse import urlparse

import requests
from lxml import etree

from .config import DOC_API_URL_TEMPLATE, FetchConfig
from .models import DocPage
from .utils import atomic_write_bytes, atomic_write_text, url_filename

logger = logging.getLogger("docfetch")

REVISION_PATTERN = re.compile(
    r'<meta name="revision" content="n_(\d+)_introducing-red-hat-jboss-a-mq-7'
    r'_version_7.0-Beta_edition_1.0_release_(\d+)-revision_(\d+)" />'
)

VERSION_XPATH = etree.XPath("string(//result/vid)")
BODY_XPATH = etree.XPath("string(//result/body/en/item/value)")

# Single-page guides keep their whole body in one text node, beyond libxml2's 10 MB default.
XML_PARSER = etree.XMLParser(huge_tree=True, resolve_entities=False, no_network=True)
XML_DECLARATION = re.compile(r"\A\s*<\?xml[^>]*\?>")

HTML_SHELL = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>Title</title>
</head>
<body>
{body}
</body>
</html>"""


class DocPageIdError(RuntimeError):
    """Raised when a page carries no recognisable revision meta tag."""


def parse_revision(html: str) -> Tuple[str, str, str]:
    """Return the (id, release, revision) triple from the revision meta tag."""
    match = REVISION_PATTERN.search(html)
    if match is None:
        raise DocPageIdError("Parsing id failed")
    return match.group(1), match.group(2), match.group(3)


def parse_doc_page_id(html: str) -> str:
    node_id, _release, _revision = parse_revision(html)
    return node_id


def api_url(host: str, node_id: str) -> str:
    return DOC_API_URL_TEMPLATE.format(host=host, id=node_id)


def parse_doc_page_xml(payload: Union[str, bytes]) -> DocPage:
    """Extract the version tag and body fragment from a content API payload."""
    if isinstance(payload, str):
        # Already decoded, so a declared encoding no longer applies
        payload = XML_DECLARATION.sub("", payload, count=1).encode("utf-8")
    document = etree.fromstring(payload, XML_PARSER)
    return DocPage(
        version=str(VERSION_XPATH(document)),
        body=str(BODY_XPATH(document)),
    )


def render_doc_page(page: DocPage) -> str:
    return HTML_SHELL.format(body=page.body)


class DocPageDownloader:
    """Downloads doc pages into ``config.output_root``."""

    def __init__(
        self,
        config: FetchConfig,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config
        self.session = session or requests.Session()

    @property
    def directory(self) -> Path:
        return self.config.output_root

    def destination_for(self, url: str) -> Path:
        """HTML destination for a page; pages sharing a filename collide."""
        return self.directory / (url_filename(url) + ".html")

    def cache_path(self, node_id: str) -> Path:
        return self.directory / f"{node_id}.xml"

    def _get(self, url: str) -> requests.Response:
        logger.debug("GET %s", url)
        response = self.session.get(url, timeout=self.config.timeout)
        response.raise_for_status()
        return response

    def download_page_xml(self, url: str) -> bytes:
        """Fetch the page, resolve its node id and cache the content API payload."""
        host = urlparse(url).hostname or ""
        node_id = parse_doc_page_id(self._get(url).text)
        logger.info("Resolved %s to node %s", url, node_id)

        payload = self._get(api_url(host, node_id)).content
        cache_path = atomic_write_bytes(self.cache_path(node_id), payload)
        logger.debug("Cached content payload at %s", cache_path)
        return payload

    def download_doc_page(self, url: str) -> Path:
        output = self.destination_for(url)
        if self.config.skip_downloads:
            logger.debug("Skipping download of %s", url)
            return output

        page = parse_doc_page_xml(self.download_page_xml(url))
        logger.debug("Parsed %s (version %s)", url, page.version or "<none>")
        atomic_write_text(output, render_doc_page(page))
        logger.info("Saved doc page to %s", output)
        return output
