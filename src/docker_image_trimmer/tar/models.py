"""Data models for tar file handling."""

import tarfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..core.types import LayerSet


@dataclass(frozen=True)
class MemberSpan:
    """A tar member and the byte range it occupies in the archive."""

    member: tarfile.TarInfo
    start: int  # Offset of the first header block (incl. extended headers)
    end: int  # Offset right after the last padded data block
    digest: Optional[str] = None  # Set for blob entries

    @property
    def name(self) -> str:
        return self.member.name

    @property
    def is_blob(self) -> bool:
        return self.digest is not None

    @property
    def size(self) -> int:
        return self.end - self.start


@dataclass
class RewriteStats:
    """Counters collected while writing a trimmed tar."""

    kept_entries: int = 0
    kept_blobs: int = 0
    skipped_blobs: int = 0
    skipped_bytes: int = 0


@dataclass
class TrimResult:
    """Outcome of a single trim operation."""

    image_path: Path
    json_path: Path
    output_path: Path
    reference_layers: LayerSet
    present_layers: LayerSet
    kept_layers: LayerSet
    stats: RewriteStats
    original_size: int
    trimmed_size: int

    @property
    def saved_bytes(self) -> int:
        return self.original_size - self.trimmed_size

    @property
    def reduction_percent(self) -> float:
        """Size reduction relative to the original archive, in percent."""
        if self.original_size <= 0:
            return 0.0
        return self.saved_bytes / self.original_size * 100
