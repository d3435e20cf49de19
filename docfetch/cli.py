"""Command-line entry point for docfetch."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Iterable, List, Sequence

from .config import FetchConfig, OfficeConfig
from .docpage import DocPageDownloader

logger = logging.getLogger("docfetch.cli")


def _ensure_command_prefix(argv: Sequence[str], commands: Iterable[str]) -> Sequence[str]:
    if not argv:
        return argv
    first = argv[0]
    if first in commands or first.startswith("-"):
        return argv
    return ("fetch", *argv)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--output",
        default="output",
        type=Path,
        help="Directory where generated files should be written",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def _add_fetch_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("urls", nargs="+", help="One or more doc page URLs")
    parser.add_argument(
        "--skip-downloads",
        action="store_true",
        help="Only report destination paths, do not touch the network",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Network timeout in seconds (default: no timeout)",
    )
    _add_common_arguments(parser)


def _add_convert_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="Documents to open in the office suite (HTML inputs use the HTML filter)",
    )
    parser.add_argument(
        "--format",
        dest="formats",
        action="append",
        choices=("fodt", "pdf"),
        help="Output format, may be repeated (default: fodt)",
    )
    parser.add_argument(
        "--connection",
        default=None,
        help="UNO connection string of a running office instance",
    )
    parser.add_argument(
        "--no-embed",
        action="store_true",
        help="Keep linked images linked",
    )
    parser.add_argument(
        "--fix-embedded-sizes",
        action="store_true",
        help="Also resize graphics that were embedded before conversion",
    )
    _add_common_arguments(parser)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Download doc pages as standalone HTML or convert documents with embedded images via LibreOffice."
        ),
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    fetch_parser = subparsers.add_parser(
        "fetch", help="Download doc pages and render their body as HTML"
    )
    _add_fetch_arguments(fetch_parser)

    convert_parser = subparsers.add_parser(
        "convert", help="Embed linked images and save documents as FODT or PDF"
    )
    _add_convert_arguments(convert_parser)

    argv = list(sys.argv[1:] if argv is None else argv)
    argv = list(_ensure_command_prefix(argv, subparsers.choices.keys()))
    return parser.parse_args(argv)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def _run_fetch(args: argparse.Namespace) -> int:
    config = FetchConfig(
        output_root=Path(args.output).resolve(),
        skip_downloads=args.skip_downloads,
        timeout=args.timeout,
    )
    config.output_root.mkdir(parents=True, exist_ok=True)
    downloader = DocPageDownloader(config)

    overall_start = time.perf_counter()
    outputs: List[Path] = []
    for url in args.urls:
        try:
            outputs.append(downloader.download_doc_page(url))
        except Exception:  # pylint: disable=broad-except
            logger.exception("Failed to download %s", url)
    total_elapsed = time.perf_counter() - overall_start

    failures = len(args.urls) - len(outputs)
    logger.info(
        "Finished in %.2fs (%d/%d succeeded, %d failed)",
        total_elapsed,
        len(outputs),
        len(args.urls),
        failures,
    )
    for output in outputs:
        print(output)
    return 1 if failures else 0


def _run_convert(args: argparse.Namespace) -> int:
    # pyuno is only importable inside an office installation's Python
    from .storage import convert_document
    from .uno_bridge import OfficeConnectionError, OfficeSession

    config = OfficeConfig(
        embed_images=not args.no_embed,
        fix_embedded_sizes=args.fix_embedded_sizes,
    )
    if args.connection:
        config.connection = args.connection
    formats = args.formats or ["fodt"]
    output_dir = Path(args.output).resolve()

    try:
        session = OfficeSession(config).connect()
    except OfficeConnectionError as exc:
        logger.error("%s", exc)
        return 1

    failures = 0
    with session:
        for path in args.paths:
            try:
                written = convert_document(
                    session,
                    path,
                    output_dir,
                    formats=formats,
                    embed_images=config.embed_images,
                    fix_embedded_sizes=config.fix_embedded_sizes,
                )
            except Exception:  # pylint: disable=broad-except
                logger.exception("Failed to convert %s", path)
                failures += 1
                continue
            for output in written:
                print(output)
    return 1 if failures else 0


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    _configure_logging(args.verbose)
    if args.command == "fetch":
        return _run_fetch(args)
    return _run_convert(args)


if __name__ == "__main__":
    sys.exit(main())
