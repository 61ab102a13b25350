"""Command-line entry point for icon inference."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Iterable, Sequence

from .config import InferConfig
from .errors import InferenceError, InferNameError
from .inferer import IconInferer
from .utils import infer_name, slugify

logger = logging.getLogger("icon_infer.cli")


def _ensure_command_prefix(argv: Sequence[str], commands: Iterable[str]) -> Sequence[str]:
    if not argv:
        return argv
    first = argv[0]
    if first in commands or first.startswith("-"):
        return argv
    return ("icon", *argv)


def _add_icon_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("url", help="URL of the site to infer an icon for")
    parser.add_argument(
        "--output",
        default=".",
        type=Path,
        help="Directory where the PNG icon should be written",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=10.0,
        help="Deadline in seconds for each icon download",
    )
    parser.add_argument(
        "--page-timeout",
        type=float,
        default=15.0,
        help="Deadline in seconds for fetching the page itself",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=8,
        help="Maximum number of concurrent icon downloads",
    )
    parser.add_argument(
        "--fallback-favicon",
        action="store_true",
        help="Try /favicon.ico when the page advertises no icon links",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Infer a name and the best icon for a website.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    icon_parser = subparsers.add_parser(
        "icon", help="Download the largest icon advertised by a site and save it as PNG"
    )
    _add_icon_arguments(icon_parser)

    name_parser = subparsers.add_parser(
        "name", help="Print the application name inferred from a URL's hostname"
    )
    name_parser.add_argument("url", help="URL to derive a name from")

    argv = list(sys.argv[1:] if argv is None else argv)
    argv = list(_ensure_command_prefix(argv, subparsers.choices.keys()))
    return parser.parse_args(argv)


def _run_icon(args: argparse.Namespace) -> int:
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )

    config = InferConfig(
        candidate_timeout=args.timeout,
        page_timeout=args.page_timeout,
        max_workers=args.workers,
        fallback_favicon=args.fallback_favicon,
    )

    overall_start = time.perf_counter()
    try:
        icon = IconInferer(config=config).infer(args.url)
    except InferenceError as exc:
        logger.error("could not analyze %s for an icon: %s", args.url, exc)
        return 1

    try:
        stem = infer_name(args.url)
    except InferNameError:
        stem = icon.name
    output_path = icon.save(Path(args.output) / f"{slugify(stem)}.png")
    logger.info(
        "Saved %s icon from %s to %s in %.2fs",
        icon.dimensions,
        icon.source,
        output_path,
        time.perf_counter() - overall_start,
    )
    return 0


def _run_name(args: argparse.Namespace) -> int:
    try:
        name = infer_name(args.url)
    except InferNameError as exc:
        sys.stderr.write(f"{exc}\n")
        return 1
    sys.stdout.write(name + "\n")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    if args.command == "icon":
        return _run_icon(args)
    return _run_name(args)


if __name__ == "__main__":
    sys.exit(main())
