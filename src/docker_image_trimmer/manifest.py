"""Reference layer extraction from image descriptor JSON."""

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

import aiofiles

from .core.types import DEFAULT_CONFIG, LayerSet, TrimConfig
from .exceptions import ParseError, TrimIOError
from .utils.digest import normalize_digest

logger = logging.getLogger(__name__)


def parse_manifest_layers(
    content: Union[str, bytes], config: Optional[TrimConfig] = None
) -> LayerSet:
    """Parse image descriptor JSON into the set of referenced layer digests.

    The descriptor is the output of ``docker inspect``: a JSON array whose
    first element holds ``RootFS.Layers``, a list of "sha256:<hex>" strings.

    Args:
        content: JSON text
        config: Trim configuration (field names)

    Returns:
        Set of normalized layer digests

    Raises:
        ParseError: If the JSON is invalid or the layers field is missing
    """
    config = config or DEFAULT_CONFIG

    try:
        data = json.loads(content)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ParseError(f"Invalid layers JSON: {e}") from e

    if not isinstance(data, list):
        raise ParseError("Layers JSON must be an array of image descriptors")
    if not data:
        return frozenset()
    if len(data) > 1:
        logger.debug("Ignoring %d additional image descriptors", len(data) - 1)

    descriptor = data[0]
    if not isinstance(descriptor, dict):
        raise ParseError("Image descriptor [0] must be an object")

    rootfs = descriptor.get(config.rootfs_key)
    if not isinstance(rootfs, dict):
        raise ParseError(f"Field {config.rootfs_key} is missing or not an object")

    layers = rootfs.get(config.layers_key)
    if not isinstance(layers, list):
        raise ParseError(
            f"Field {config.rootfs_key}.{config.layers_key} is missing or not an array"
        )

    return frozenset(_normalize_layer(index, item) for index, item in enumerate(layers))


def _normalize_layer(index: int, item: Any) -> str:
    if not isinstance(item, str):
        raise ParseError(f"Layer entry {index} is not a string: {item!r}")
    return normalize_digest(item)


def read_manifest_layers(
    json_path: Union[str, Path], config: Optional[TrimConfig] = None
) -> LayerSet:
    """Read the reference layer set from an image descriptor file.

    Args:
        json_path: Path to the JSON file
        config: Trim configuration

    Returns:
        Set of normalized layer digests

    Raises:
        TrimIOError: If the file cannot be read
        ParseError: If the content is not a valid descriptor
    """
    try:
        with open(json_path, encoding="utf-8-sig") as f:
            content = f.read()
    except OSError as e:
        raise TrimIOError(f"Cannot read layers JSON {json_path}: {e}") from e
    except UnicodeDecodeError as e:
        raise ParseError(f"Layers JSON {json_path} is not valid UTF-8: {e}") from e

    layers = parse_manifest_layers(content, config)
    logger.debug("Read %d reference layers from %s", len(layers), json_path)
    return layers


async def read_manifest_layers_async(
    json_path: Union[str, Path], config: Optional[TrimConfig] = None
) -> LayerSet:
    """Async variant of :func:`read_manifest_layers` using aiofiles."""
    try:
        async with aiofiles.open(json_path, encoding="utf-8-sig") as f:
            content = await f.read()
    except OSError as e:
        raise TrimIOError(f"Cannot read layers JSON {json_path}: {e}") from e
    except UnicodeDecodeError as e:
        raise ParseError(f"Layers JSON {json_path} is not valid UTF-8: {e}") from e

    layers = parse_manifest_layers(content, config)
    logger.debug("Read %d reference layers from %s", len(layers), json_path)
    return layers
