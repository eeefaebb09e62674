"""Command line entry point."""

import argparse
import logging
import sys
from typing import Optional, Sequence

from . import __version__
from .core.types import DEFAULT_CONFIG, TrimConfig
from .exceptions import ConflictError, TrimError
from .trim import trim_image
from .utils.size import format_size

logger = logging.getLogger(__name__)


def identify_files(paths: Sequence[str]) -> tuple[str, str]:
    """Pick the image tar and the layers JSON out of the given paths.

    Order does not matter, so files can be dropped onto the tool in any
    order. Paths with other extensions are ignored.

    Returns:
        (image_path, json_path) tuple

    Raises:
        ConflictError: If there is not exactly one of each
    """
    image_path = None
    json_path = None

    for path in paths:
        if path.endswith(".tar"):
            if image_path is not None:
                raise ConflictError(
                    "Multiple .tar files given, provide a single image file"
                )
            image_path = path
        elif path.endswith(".json"):
            if json_path is not None:
                raise ConflictError(
                    "Multiple .json files given, provide a single layers file"
                )
            json_path = path

    if image_path is None and json_path is None:
        raise ConflictError("No .tar or .json file given")
    if image_path is None:
        raise ConflictError("No .tar image file given")
    if json_path is None:
        raise ConflictError("No .json layers file given")
    return image_path, json_path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docker-image-trimmer",
        description=(
            "Remove from a docker save tar the layers already present in a "
            "reference image described by docker inspect JSON."
        ),
    )
    parser.add_argument(
        "files",
        nargs="+",
        metavar="FILE",
        help="Image .tar file and layers .json file, in any order",
    )
    parser.add_argument(
        "--output",
        "-o",
        help="Output file or directory (default: <image>_trimmed.tar next to the image)",
    )
    parser.add_argument(
        "--algorithm",
        "-a",
        action="append",
        dest="algorithms",
        metavar="NAME",
        help="Also trim blobs under blobs/NAME/ (repeatable, sha256 is always trimmed)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Show debug output"
    )
    parser.add_argument(
        "--quiet", "-q", action="store_true", help="Only show warnings and errors"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")

    config = DEFAULT_CONFIG
    if args.algorithms:
        config = TrimConfig(
            blob_algorithms=DEFAULT_CONFIG.blob_algorithms | set(args.algorithms)
        )

    try:
        image_path, json_path = identify_files(args.files)
        result = trim_image(image_path, json_path, args.output, config)
    except ConflictError as e:
        logger.error("Input error: %s", e)
        return 1
    except TrimError as e:
        logger.error("Trim failed: %s", e)
        return 1

    print(f"Original size: {format_size(result.original_size)}")
    print(f"Trimmed size:  {format_size(result.trimmed_size)}")
    print(f"Reduced by:    {result.reduction_percent:.1f}%")
    print(f"Saved to:      {result.output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
