"""
Unit tests for locking, opening and saving documents.
"""

import shutil
import tempfile
import unittest
from pathlib import Path

from docfetch.config import FODT_FILTER, HTML_FILTER, PDF_FILTER
from docfetch.storage import (
    action_lock,
    convert_document,
    open_document,
    open_html,
    save_as_fodt,
    save_as_pdf,
    with_locked_ui,
)
from docfetch.utils import to_file_url

from office_fakes import FakeDocument, FakeGraphic, FakeLoader


class TestActionLock(unittest.TestCase):
    """Action lock scoping."""

    def test_lock_held_during_operation(self):
        document = FakeDocument()
        seen = []

        result = with_locked_ui(document, lambda: seen.append(document.lock_count) or "done")

        self.assertEqual(result, "done")
        self.assertEqual(seen, [1])
        self.assertEqual(document.lock_count, 0)

    def test_lock_released_when_operation_raises(self):
        document = FakeDocument()

        def fail():
            raise ValueError("boom")

        with self.assertRaises(ValueError):
            with_locked_ui(document, fail)
        self.assertEqual(document.lock_count, 0)
        self.assertEqual(document.lock_history, [1, 0])

    def test_context_manager_yields_document(self):
        document = FakeDocument()
        with action_lock(document) as locked:
            self.assertIs(locked, document)
            self.assertEqual(document.lock_count, 1)
        self.assertEqual(document.lock_count, 0)


class TestSaveOperations(unittest.TestCase):
    """Store calls and their filter properties."""

    def test_save_as_fodt_uses_store_as_url(self):
        document = FakeDocument()
        url = save_as_fodt(document, "file:///tmp/out.fodt")
        self.assertEqual(url, "file:///tmp/out.fodt")
        self.assertEqual(
            document.stored,
            [("storeAsURL", "file:///tmp/out.fodt", {"Overwrite": True, "FilterName": FODT_FILTER})],
        )

    def test_save_as_pdf_uses_store_to_url(self):
        document = FakeDocument()
        save_as_pdf(document, "file:///tmp/out.pdf")
        self.assertEqual(
            document.stored,
            [("storeToURL", "file:///tmp/out.pdf", {"Overwrite": True, "FilterName": PDF_FILTER})],
        )

    def test_local_paths_become_file_urls(self):
        document = FakeDocument()
        url = save_as_pdf(document, Path("/tmp/report.pdf"))
        self.assertEqual(url, "file:///tmp/report.pdf")

    def test_filter_names(self):
        self.assertEqual(HTML_FILTER, "HTML (StarWriter)")
        self.assertEqual(FODT_FILTER, "OpenDocument Text Flat XML")
        self.assertEqual(PDF_FILTER, "writer_pdf_Export")


class TestOpenAndConvert(unittest.TestCase):
    """Loading documents and the convert pipeline."""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def test_open_document_without_properties(self):
        loader = FakeLoader()
        open_document(loader, "file:///tmp/in.odt")
        self.assertEqual(loader.calls, [("file:///tmp/in.odt", {})])

    def test_open_html_uses_html_filter(self):
        loader = FakeLoader()
        open_html(loader, "file:///tmp/page.html")
        self.assertEqual(loader.calls, [("file:///tmp/page.html", {"FilterName": HTML_FILTER})])

    def test_convert_embeds_under_lock_and_saves(self):
        graphic = FakeGraphic("logo", "https://example.com/logo.png", pixels=(100, 200))
        document = FakeDocument([graphic])
        loader = FakeLoader(document)
        source = self.temp_dir / "page.html"

        outputs = convert_document(loader, source, self.temp_dir / "out", formats=["fodt", "pdf"])

        self.assertEqual(loader.calls[0][1], {"FilterName": HTML_FILTER})
        self.assertEqual(document.lock_history, [1, 0])
        self.assertTrue(graphic.graphic_url.startswith("vnd.sun.star."))
        self.assertEqual(
            outputs,
            [self.temp_dir / "out" / "page.fodt", self.temp_dir / "out" / "page.pdf"],
        )
        self.assertEqual(
            [(call, url) for call, url, _ in document.stored],
            [
                ("storeAsURL", to_file_url(self.temp_dir / "out" / "page.fodt")),
                ("storeToURL", to_file_url(self.temp_dir / "out" / "page.pdf")),
            ],
        )
        self.assertTrue(document.closed)

    def test_convert_without_embedding(self):
        graphic = FakeGraphic("logo", "https://example.com/logo.png")
        document = FakeDocument([graphic])
        loader = FakeLoader(document)

        convert_document(loader, self.temp_dir / "in.odt", self.temp_dir, embed_images=False)

        self.assertEqual(loader.calls[0][1], {})
        self.assertEqual(graphic.graphic_url, "https://example.com/logo.png")
        self.assertEqual(document.lock_history, [])
        self.assertEqual(len(document.stored), 1)

    def test_document_closed_when_save_fails(self):
        document = FakeDocument()

        def broken_store(url, properties):
            raise OSError("disk full")

        document.store_as_url = broken_store
        with self.assertRaises(OSError):
            convert_document(FakeLoader(document), self.temp_dir / "in.odt", self.temp_dir)
        self.assertTrue(document.closed)


if __name__ == '__main__':
    unittest.main()
