"""Command-line interface for the image_similarity project."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable

from .errors import (
    DecodeError,
    DimensionMismatch,
    ImageReadError,
    ImageSimilarityError,
    UnsupportedFormat,
)
from .extract.decode import codec_from_name
from .features.luma import DEFAULT_LUMA, LUMA_STRATEGIES
from .group.group_and_metrics import build_signature_table, group_and_report
from .group.similarity import T_DUPLICATE, image_similarity

EXIT_CODES: dict[type[ImageSimilarityError], int] = {
    ImageReadError: 2,
    UnsupportedFormat: 3,
    DecodeError: 4,
    DimensionMismatch: 5,
}


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments for the image similarity tools."""
    parser = argparse.ArgumentParser(
        description="Score perceptual similarity between PNG and JPEG images."
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--luma",
        choices=sorted(LUMA_STRATEGIES),
        default=DEFAULT_LUMA,
        help="Grayscale strategy used before the frequency transform.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    compare = subparsers.add_parser("compare", help="Score two images against each other.")
    compare.add_argument("left", help="Path to the first image.")
    compare.add_argument("right", help="Path to the second image.")
    compare.add_argument(
        "--parallel",
        action="store_true",
        help="Hash both images on separate worker threads.",
    )

    group = subparsers.add_parser("group", help="Group near-duplicate images.")
    group.add_argument(
        "--input",
        required=True,
        help="Directory of images, or a text file listing image paths one per line.",
    )
    group.add_argument(
        "--out",
        required=True,
        help="Directory path where JSON and CSV outputs will be written.",
    )
    group.add_argument(
        "--threshold",
        type=int,
        default=T_DUPLICATE,
        help=f"Minimum score linking two images (default {T_DUPLICATE}).",
    )
    group.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of threads used to hash images.",
    )
    return parser.parse_args(list(argv) if argv is not None else None)


def read_input(path: Path) -> list[Path]:
    """Return the image paths under a directory or listed in a text file."""
    if not path.exists():
        raise FileNotFoundError(f"Input path does not exist: {path}")
    if path.is_dir():
        return sorted(
            entry for entry in path.iterdir() if entry.is_file() and codec_from_name(entry.name)
        )
    lines = [line.strip() for line in path.read_text(encoding="utf-8-sig").splitlines()]
    return [Path(line) for line in dict.fromkeys(line for line in lines if line)]


def exit_code_for(exc: ImageSimilarityError) -> int:
    for error_type, code in EXIT_CODES.items():
        if isinstance(exc, error_type):
            return code
    return 1


def _run_compare(args: argparse.Namespace) -> int:
    try:
        result = image_similarity(
            args.left, args.right, luma=args.luma, parallel=args.parallel
        )
    except ImageSimilarityError as exc:
        print(f"[error] {exc}", file=sys.stderr)
        return exit_code_for(exc)
    print(result)
    return 0


def _run_group(args: argparse.Namespace) -> int:
    if not 0 <= args.threshold <= 100:
        print("[error] --threshold must be between 0 and 100", file=sys.stderr)
        return 1
    try:
        entries = read_input(Path(args.input))
    except FileNotFoundError as exc:
        print(f"[error] {exc}", file=sys.stderr)
        return 2
    print(f"[group] {len(entries)} images")
    signatures = build_signature_table(entries, luma=args.luma, max_workers=args.workers)
    group_and_report(
        signatures,
        total_sources=len(entries),
        out_dir=Path(args.out),
        t_link=args.threshold,
    )
    return 0


def main(argv: Iterable[str] | None = None) -> int:
    """Entry point for the CLI."""
    args = parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    if args.command == "compare":
        return _run_compare(args)
    return _run_group(args)


if __name__ == "__main__":
    raise SystemExit(main())
