"""Docker image trimmer - drop layers already present in a reference image."""

__version__ = "0.1.0"

from .core.layers import difference
from .core.types import LayerSet, TrimConfig
from .exceptions import (
    ArchiveFormatError,
    ConflictError,
    ParseError,
    TrimError,
    TrimIOError,
)
from .manifest import parse_manifest_layers, read_manifest_layers
from .tar.models import RewriteStats, TrimResult
from .tar.reader import scan_blob_digests
from .tar.writer import write_trimmed_tar
from .trim import resolve_output_path, trim_image, trim_image_async
from .utils.digest import normalize_digest

__all__ = [
    "ArchiveFormatError",
    "ConflictError",
    "LayerSet",
    "ParseError",
    "RewriteStats",
    "TrimConfig",
    "TrimError",
    "TrimIOError",
    "TrimResult",
    "difference",
    "normalize_digest",
    "parse_manifest_layers",
    "read_manifest_layers",
    "resolve_output_path",
    "scan_blob_digests",
    "trim_image",
    "trim_image_async",
    "write_trimmed_tar",
]
