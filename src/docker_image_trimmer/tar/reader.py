"""Streaming reader for Docker save tar files."""

import logging
import tarfile
from pathlib import Path
from typing import Iterator, Optional, Union

from ..core.types import DEFAULT_CONFIG, LayerSet, TrimConfig
from ..exceptions import ArchiveFormatError, TrimIOError
from ..utils.digest import blob_digest, validate_digest
from .models import MemberSpan

logger = logging.getLogger(__name__)


def iter_archive_members(
    tar_path: Union[str, Path], config: Optional[TrimConfig] = None
) -> Iterator[MemberSpan]:
    """Iterate over the members of an uncompressed tar in archive order.

    Each pass opens the archive fresh, so the scan and rewrite passes never
    share a file position.

    Args:
        tar_path: Path to the tar file
        config: Trim configuration used to classify blob entries

    Yields:
        MemberSpan for every member, with its digest set for blob entries

    Raises:
        TrimIOError: If the file cannot be opened or read
        ArchiveFormatError: If the archive is not a readable tar
    """
    config = config or DEFAULT_CONFIG

    try:
        tar = tarfile.open(tar_path, "r:")
    except tarfile.TarError as e:
        raise ArchiveFormatError(f"Cannot read tar file {tar_path}: {e}") from e
    except OSError as e:
        raise TrimIOError(f"Cannot open tar file {tar_path}: {e}") from e

    with tar:
        while True:
            try:
                member = tar.next()
            except tarfile.TarError as e:
                raise ArchiveFormatError(f"Corrupt tar file {tar_path}: {e}") from e
            except OSError as e:
                raise TrimIOError(f"Failed to read tar file {tar_path}: {e}") from e

            if member is None:
                _check_end_of_archive(tar, tar_path)
                return

            # Only one member is needed at a time
            tar.members = []

            # tar.offset points at the header following this member
            yield MemberSpan(
                member=member,
                start=member.offset,
                end=tar.offset,
                digest=blob_digest(member.name, config),
            )


def scan_blob_digests(
    tar_path: Union[str, Path], config: Optional[TrimConfig] = None
) -> LayerSet:
    """Collect the digests of all blob entries present in a tar file.

    Args:
        tar_path: Path to the tar file
        config: Trim configuration

    Returns:
        Set of normalized blob digests (duplicates collapse)

    Raises:
        TrimIOError: If the file cannot be opened or read
        ArchiveFormatError: If the archive is corrupt
    """
    digests = set()
    for span in iter_archive_members(tar_path, config):
        if not span.is_blob:
            continue
        if not validate_digest(span.digest):
            logger.warning("Blob entry %s does not look like a hex digest", span.name)
        digests.add(span.digest)

    logger.debug("Found %d blobs in %s", len(digests), tar_path)
    return frozenset(digests)


def _check_end_of_archive(tar: tarfile.TarFile, tar_path: Union[str, Path]) -> None:
    """Make sure iteration stopped at a real end-of-archive marker.

    After the first member tarfile reports a bad or truncated header as the
    end of the archive, so the block at the stop offset is checked here.
    A file ending exactly at a member boundary is accepted.

    Raises:
        ArchiveFormatError: If the block is partial or not all NUL bytes
    """
    try:
        tar.fileobj.seek(tar.offset)
        block = tar.fileobj.read(tarfile.BLOCKSIZE)
    except OSError as e:
        raise TrimIOError(f"Failed to read tar file {tar_path}: {e}") from e

    if not block:
        return
    if len(block) < tarfile.BLOCKSIZE or block.count(tarfile.NUL) != tarfile.BLOCKSIZE:
        raise ArchiveFormatError(
            f"Corrupt tar header at offset {tar.offset} in {tar_path}"
        )
