"""
median_palette command line.

Usage:
  python -m median_palette IMAGE [IMAGE ...] --count N --quality Q --area X,Y[,W,H] --format [array|rgb|hex|int] --dominant --debug

Input:
  Any Pillow-readable image path or http(s) URL. Transparent and near-white
  pixels are ignored.

Output:
  One banner per image followed by one colour per line, most representative first.

Exit codes:
  0 ok, 1 palette error on at least one image, 2 missing input.
"""

from __future__ import annotations

import argparse
import time
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from .constants import DEFAULT_COLOR_COUNT, DEFAULT_QUALITY
from .errors import PaletteError
from .image_io import is_url
from .thief import get_color, get_palette
from .utils import (
    enable_line_buffered_stdout,
    error,
    format_seconds_compact,
    log,
    print_banner,
    print_config_line,
)


def _parse_area(text: str) -> Tuple[int, ...]:
    try:
        parts = tuple(int(p) for p in text.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid area {text!r}") from None
    if len(parts) not in (2, 4):
        raise argparse.ArgumentTypeError("area must be X,Y or X,Y,W,H")
    return parts


def parse_cli_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse CLI arguments.

    Returns:
      argparse.Namespace with:
        sources: image paths or URLs
        count: palette size
        quality: sampling stride
        area: optional (x, y[, w, h]) tuple
        format: output format name
        dominant: print only the dominant colour
        debug: bool for verbose quantizer details
    """
    parser = argparse.ArgumentParser(
        prog="median_palette",
        description="Extract a representative colour palette with median-cut quantization.",
    )
    parser.add_argument("sources", nargs="+", help="Image paths or URLs")
    parser.add_argument(
        "--count",
        type=int,
        default=DEFAULT_COLOR_COUNT,
        help="Palette size (2..256).",
    )
    parser.add_argument(
        "--quality",
        type=int,
        default=DEFAULT_QUALITY,
        help="Sample every Nth pixel; 1 reads every pixel.",
    )
    parser.add_argument(
        "--area",
        type=_parse_area,
        default=None,
        help="Restrict sampling to X,Y or X,Y,W,H.",
    )
    parser.add_argument(
        "--format",
        choices=["array", "rgb", "hex", "int"],
        default="hex",
        help="Colour output format.",
    )
    parser.add_argument(
        "--dominant", action="store_true", help="Print only the dominant colour"
    )
    parser.add_argument("--debug", action="store_true", help="Verbose quantizer details")
    return parser.parse_args(argv)


def _process_single_source(source: str, args: argparse.Namespace) -> None:
    t_start = time.perf_counter()
    print_banner(source)
    if args.dominant:
        colours: List[object] = [
            get_color(source, args.quality, args.area, args.format, debug=args.debug)
        ]
    else:
        colours = list(
            get_palette(
                source, args.count, args.quality, args.area, args.format, debug=args.debug
            )
        )
    for colour in colours:
        log(f"  {colour}")
    if args.debug:
        print_config_line(
            "done",
            [
                ("Colours", len(colours)),
                ("Time", format_seconds_compact(time.perf_counter() - t_start)),
            ],
            debug=True,
        )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point. Returns the process exit code."""
    enable_line_buffered_stdout()
    args = parse_cli_args(argv)

    if args.debug:
        print_config_line(
            "run",
            [
                ("Count", args.count),
                ("Quality", args.quality),
                ("Area", ",".join(map(str, args.area)) if args.area else "-"),
                ("Format", args.format),
            ],
            debug=True,
        )

    missing = [s for s in args.sources if not is_url(s) and not Path(s).exists()]
    if missing:
        for s in missing:
            error(f"not found: {s}")
        return 2

    status = 0
    for source in args.sources:
        try:
            _process_single_source(source, args)
        except PaletteError as exc:
            error(f"{source}: {exc}")
            status = 1
    return status

