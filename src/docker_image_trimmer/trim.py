"""Image trimming pipeline."""

import asyncio
import logging
import os
from pathlib import Path
from typing import Optional, Union

from .core.layers import difference
from .core.types import DEFAULT_CONFIG, LayerSet, TrimConfig
from .exceptions import TrimIOError
from .manifest import read_manifest_layers, read_manifest_layers_async
from .tar.models import RewriteStats, TrimResult
from .tar.reader import scan_blob_digests
from .tar.writer import write_trimmed_tar

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def resolve_output_path(
    image_path: PathLike,
    output_path: Optional[PathLike] = None,
    config: Optional[TrimConfig] = None,
) -> Path:
    """Determine where the trimmed tar is written.

    Args:
        image_path: Input image tar path
        output_path: Explicit output file or directory (optional)
        config: Trim configuration (default names)

    Returns:
        Output file path

    Examples:
        resolve_output_path("images/app.tar")
        # images/app_trimmed.tar

        resolve_output_path("images/app.img")
        # trimmed.tar

        resolve_output_path("images/app.tar", "out/")   # out/ exists
        # out/app_trimmed.tar
    """
    config = config or DEFAULT_CONFIG
    image_path = Path(image_path)

    if image_path.name.endswith(".tar"):
        default_name = image_path.name[: -len(".tar")] + config.output_suffix
        default_path = image_path.with_name(default_name)
    else:
        default_name = config.fallback_output
        default_path = Path(default_name)

    if output_path is None:
        return default_path

    output_path = Path(output_path)
    if output_path.is_dir():
        return output_path / default_name
    return output_path


def _file_size(path: Path) -> int:
    try:
        return os.path.getsize(path)
    except OSError as e:
        raise TrimIOError(f"Cannot stat {path}: {e}") from e


def _finish(
    image_path: Path,
    json_path: Path,
    output: Path,
    reference: LayerSet,
    present: LayerSet,
    keep: LayerSet,
    stats: RewriteStats,
) -> TrimResult:
    result = TrimResult(
        image_path=image_path,
        json_path=json_path,
        output_path=output,
        reference_layers=reference,
        present_layers=present,
        kept_layers=keep,
        stats=stats,
        original_size=_file_size(image_path),
        trimmed_size=_file_size(output),
    )
    logger.info(
        "Trimmed image saved to %s (%.1f%% smaller)", output, result.reduction_percent
    )
    return result


def trim_image(
    image_path: PathLike,
    json_path: PathLike,
    output_path: Optional[PathLike] = None,
    config: Optional[TrimConfig] = None,
) -> TrimResult:
    """Remove from an image tar the blobs already present in a reference image.

    Args:
        image_path: Image tar created by ``docker save``
        json_path: ``docker inspect`` JSON of the reference image
        output_path: Output file or directory (optional). Defaults to
            ``<name>_trimmed.tar`` next to the input image.
        config: Trim configuration

    Returns:
        TrimResult with the layer sets and before/after sizes

    Raises:
        TrimIOError: If a file cannot be read or written
        ParseError: If the JSON is not a valid image descriptor
        ArchiveFormatError: If the image tar is corrupt

    Examples:
        result = trim_image("app.tar", "base.json")
        print(f"{result.reduction_percent:.1f}% smaller")
    """
    config = config or DEFAULT_CONFIG
    image_path = Path(image_path)
    json_path = Path(json_path)

    logger.info("Reading reference layers from %s", json_path)
    reference = read_manifest_layers(json_path, config)

    logger.info("Scanning image %s", image_path)
    present = scan_blob_digests(image_path, config)

    keep = difference(present, reference)
    logger.info(
        "Keeping %d of %d blobs (%d already in reference)",
        len(keep),
        len(present),
        len(present) - len(keep),
    )

    output = resolve_output_path(image_path, output_path, config)
    logger.info("Writing trimmed image to %s", output)
    stats = write_trimmed_tar(image_path, output, keep, config)

    return _finish(image_path, json_path, output, reference, present, keep, stats)


async def trim_image_async(
    image_path: PathLike,
    json_path: PathLike,
    output_path: Optional[PathLike] = None,
    config: Optional[TrimConfig] = None,
) -> TrimResult:
    """Async variant of :func:`trim_image`.

    The tar passes run in the default executor one after the other; the
    rewrite only starts once the keep set is known.
    """
    config = config or DEFAULT_CONFIG
    image_path = Path(image_path)
    json_path = Path(json_path)
    loop = asyncio.get_running_loop()

    reference = await read_manifest_layers_async(json_path, config)
    present = await loop.run_in_executor(None, scan_blob_digests, image_path, config)

    keep = difference(present, reference)
    output = resolve_output_path(image_path, output_path, config)

    stats = await loop.run_in_executor(
        None, write_trimmed_tar, image_path, output, keep, config
    )
    return _finish(image_path, json_path, output, reference, present, keep, stats)
