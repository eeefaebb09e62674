"""Trimmed tar writer."""

import logging
import os
import shutil
import tarfile
import tempfile
from contextlib import closing
from pathlib import Path
from typing import BinaryIO, Optional, Union

from ..core.types import DEFAULT_CONFIG, LayerSet, TrimConfig
from ..exceptions import ArchiveFormatError, TrimIOError
from .models import RewriteStats
from .reader import iter_archive_members

logger = logging.getLogger(__name__)


def write_trimmed_tar(
    input_path: Union[str, Path],
    output_path: Union[str, Path],
    keep_layers: LayerSet,
    config: Optional[TrimConfig] = None,
) -> RewriteStats:
    """Write a copy of a tar file without the blobs that are not kept.

    Every kept member is copied as raw archive bytes, so its headers
    (including GNU long name and PAX records) and data are byte-identical
    to the input. Structural entries are always kept. The output is written
    to a temporary file and renamed into place once complete.

    Args:
        input_path: Original tar file
        output_path: Trimmed tar file to create or overwrite
        keep_layers: Digests of the blob entries to keep
        config: Trim configuration

    Returns:
        RewriteStats for the written archive

    Raises:
        TrimIOError: If reading or writing fails
        ArchiveFormatError: If the input is corrupt or truncated
    """
    config = config or DEFAULT_CONFIG
    output_path = Path(output_path)
    stats = RewriteStats()

    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{output_path.name}.", suffix=".partial", dir=output_path.parent
        )
    except OSError as e:
        raise TrimIOError(f"Cannot create output in {output_path.parent}: {e}") from e
    tmp_path = Path(tmp_name)

    committed = False
    try:
        with os.fdopen(fd, "wb") as out, open(input_path, "rb") as raw, closing(
            iter_archive_members(input_path, config)
        ) as spans:
            position = 0
            for span in spans:
                # Bytes owned by no member, e.g. a PAX global header
                if span.start > position:
                    _copy_range(raw, out, position, span.start, config.chunk_size)

                if span.is_blob and span.digest not in keep_layers:
                    logger.debug("Skipping blob %s", span.name)
                    stats.skipped_blobs += 1
                    stats.skipped_bytes += span.size
                else:
                    _copy_range(raw, out, span.start, span.end, config.chunk_size)
                    stats.kept_entries += 1
                    if span.is_blob:
                        stats.kept_blobs += 1
                position = span.end

            _write_end_of_archive(out)

        shutil.copymode(input_path, tmp_path)
        os.replace(tmp_path, output_path)
        committed = True
    except OSError as e:
        raise TrimIOError(f"Failed to write trimmed tar {output_path}: {e}") from e
    finally:
        if not committed:
            tmp_path.unlink(missing_ok=True)

    logger.debug(
        "Wrote %s: kept %d entries, skipped %d blobs",
        output_path,
        stats.kept_entries,
        stats.skipped_blobs,
    )
    return stats


def _copy_range(
    src: BinaryIO, dst: BinaryIO, start: int, end: int, chunk_size: int
) -> None:
    """Copy src[start:end] to dst."""
    src.seek(start)
    remaining = end - start
    while remaining > 0:
        chunk = src.read(min(chunk_size, remaining))
        if not chunk:
            raise ArchiveFormatError(
                f"Unexpected end of archive at offset {end - remaining}"
            )
        dst.write(chunk)
        remaining -= len(chunk)


def _write_end_of_archive(out: BinaryIO) -> None:
    """Write the two zero blocks and record padding tarfile expects."""
    out.write(tarfile.NUL * (tarfile.BLOCKSIZE * 2))
    remainder = out.tell() % tarfile.RECORDSIZE
    if remainder:
        out.write(tarfile.NUL * (tarfile.RECORDSIZE - remainder))
