"""Helpers for building and inspecting test image tar files."""

import io
import json
import tarfile
from pathlib import Path
from typing import Optional, Union

# Fixed, non-default header values so header preservation is observable
MTIME = 1700000000
UID = 1000
GID = 1000


def make_entry(
    name: str, content: Optional[bytes] = b"", type_: bytes = tarfile.REGTYPE
) -> tuple[tarfile.TarInfo, Optional[bytes]]:
    """Create a TarInfo with realistic header fields."""
    info = tarfile.TarInfo(name)
    info.type = type_
    info.mtime = MTIME
    info.uid = UID
    info.gid = GID
    info.uname = "builder"
    info.gname = "builder"
    if type_ == tarfile.DIRTYPE:
        info.mode = 0o755
        return info, None
    info.mode = 0o640
    info.size = len(content)
    return info, content


def create_image_tar(
    tar_path: Union[str, Path],
    entries: list[tuple[str, Optional[bytes]]],
    tar_format: int = tarfile.PAX_FORMAT,
    pax_headers: Optional[dict[str, str]] = None,
) -> Path:
    """Create a tar file from (name, content) pairs.

    A content of None creates a directory entry.
    """
    tar_path = Path(tar_path)
    with tarfile.open(
        tar_path, "w", format=tar_format, pax_headers=pax_headers or {}
    ) as tar:
        for name, content in entries:
            if content is None:
                info, _ = make_entry(name, type_=tarfile.DIRTYPE)
                tar.addfile(info)
            else:
                info, data = make_entry(name, content)
                tar.addfile(info, fileobj=io.BytesIO(data))
    return tar_path


def image_entries(
    blobs: dict[str, bytes], manifest: Optional[list] = None
) -> list[tuple[str, Optional[bytes]]]:
    """Build a docker save style entry list: directories, blobs, manifest."""
    if manifest is None:
        manifest = [
            {
                "Config": "blobs/sha256/config",
                "RepoTags": ["test/image:latest"],
                "Layers": [f"blobs/sha256/{digest}" for digest in blobs],
            }
        ]
    entries: list[tuple[str, Optional[bytes]]] = [
        ("blobs", None),
        ("blobs/sha256", None),
    ]
    entries += [(f"blobs/sha256/{digest}", data) for digest, data in blobs.items()]
    entries.append(("manifest.json", json.dumps(manifest).encode("utf-8")))
    return entries


def write_layers_json(
    json_path: Union[str, Path], digests: list[str], prefix: str = "sha256:"
) -> Path:
    """Write a docker inspect style JSON listing the given layer digests."""
    json_path = Path(json_path)
    descriptor = [
        {
            "Id": "sha256:reference",
            "RootFS": {
                "Type": "layers",
                "Layers": [f"{prefix}{digest}" for digest in digests],
            },
        }
    ]
    json_path.write_text(json.dumps(descriptor, indent=2))
    return json_path


def read_entries(tar_path: Union[str, Path]) -> list[tuple[str, Optional[bytes]]]:
    """Return (name, content) pairs in archive order."""
    result = []
    with tarfile.open(tar_path, "r") as tar:
        for member in tar:
            if member.isfile():
                result.append((member.name, tar.extractfile(member).read()))
            else:
                result.append((member.name, None))
    return result


def entry_names(tar_path: Union[str, Path]) -> list[str]:
    """Return member names in archive order."""
    return [name for name, _ in read_entries(tar_path)]


def raw_headers(tar_path: Union[str, Path]) -> dict[str, bytes]:
    """Return the raw header bytes (incl. extended headers) of every member."""
    headers = {}
    with tarfile.open(tar_path, "r") as tar, open(tar_path, "rb") as raw:
        for member in tar:
            raw.seek(member.offset)
            headers[member.name] = raw.read(member.offset_data - member.offset)
    return headers


def member_offsets(tar_path: Union[str, Path], name: str) -> tuple[int, int]:
    """Return (header offset, archive offset after the member) of a member."""
    with tarfile.open(tar_path, "r") as tar:
        member = tar.getmember(name)
        padded = -(-member.size // tarfile.BLOCKSIZE) * tarfile.BLOCKSIZE
        return member.offset, member.offset_data + padded


def break_header_checksum(tar_path: Union[str, Path], name: str) -> None:
    """Overwrite the checksum field of a member's header with a wrong value."""
    offset, _ = member_offsets(tar_path, name)
    with open(tar_path, "r+b") as f:
        f.seek(offset + 148)
        f.write(b"0000000\0")


def cut_archive(tar_path: Union[str, Path], size: int) -> None:
    """Truncate an archive to its first size bytes."""
    tar_path = Path(tar_path)
    tar_path.write_bytes(tar_path.read_bytes()[:size])
