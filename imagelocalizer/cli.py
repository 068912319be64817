"""Command-line entry point for the image localizer."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Optional, Sequence

from .config import (
    DEFAULT_IMAGE_DIR,
    DEFAULT_SENTINEL,
    DEFAULT_TIMEOUT,
    FailurePolicy,
    LocalizeConfig,
)
from .errors import DocumentError
from .localizer import localize_documents

logger = logging.getLogger("imagelocalizer.cli")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="imagelocalizer",
        description=(
            "Download the remote images referenced by text documents and rewrite "
            "the references to point at local copies."
        ),
    )
    parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="Documents to rewrite in place",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help="Seconds to wait on each HTTP request; 0 waits forever (default: %(default)s)",
    )
    parser.add_argument(
        "--no-follow-redirects",
        dest="follow_redirects",
        action="store_false",
        help="Treat HTTP redirects as failed downloads instead of following them",
    )
    parser.add_argument(
        "--on-failure",
        choices=[policy.value for policy in FailurePolicy],
        default=FailurePolicy.LEAVE.value,
        help=(
            "What to do with a reference whose download failed: leave the URL, "
            "blank it, or replace it with --sentinel (default: %(default)s)"
        ),
    )
    parser.add_argument(
        "--sentinel",
        default=DEFAULT_SENTINEL,
        help="Replacement text used with --on-failure sentinel (default: %(default)s)",
    )
    parser.add_argument(
        "--image-dir",
        default=DEFAULT_IMAGE_DIR,
        help="Directory, relative to each document, that receives the images (default: %(default)s)",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    verbosity.add_argument(
        "--quiet",
        action="store_true",
        help="Only log errors",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> LocalizeConfig:
    return LocalizeConfig(
        timeout=args.timeout if args.timeout and args.timeout > 0 else None,
        follow_redirects=args.follow_redirects,
        failure_policy=FailurePolicy(args.on_failure),
        sentinel=args.sentinel,
        image_dir=args.image_dir,
    )


def _configure_logging(args: argparse.Namespace) -> None:
    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    _configure_logging(args)
    config = build_config(args)

    overall_start = time.perf_counter()
    try:
        reports = localize_documents(args.paths, config)
    except DocumentError as exc:
        logger.error("%s", exc)
        return 1
    total_elapsed = time.perf_counter() - overall_start

    downloaded = sum(len(report.downloaded) for report in reports)
    failed = sum(len(report.failed) for report in reports)
    logger.info(
        "Finished in %.2fs (%d documents, %d images downloaded, %d failed)",
        total_elapsed,
        len(reports),
        downloaded,
        failed,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
