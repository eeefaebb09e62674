"""Digest normalization and blob path utilities."""

import re
from typing import Optional

from ..core.types import DEFAULT_CONFIG, TrimConfig

# Hex part of a digest as produced by sha256/sha512 and friends
HEX_DIGEST_PATTERN = re.compile(r"^[a-f0-9]+$")

# Characters left around digests by copy/paste from shells or JSON dumps
_QUOTE_CHARS = "\"'"


def normalize_digest(reference: str) -> str:
    """Normalize a digest reference to its bare hex form.

    Surrounding whitespace and quotes are removed, then any
    ``<algorithm>:`` prefix is dropped. Case is preserved.

    Args:
        reference: Digest reference (e.g. "sha256:abc123", " abc123 ")

    Returns:
        Normalized digest (e.g. "abc123")

    Raises:
        ValueError: If reference is not a string
    """
    if not isinstance(reference, str):
        raise ValueError("Digest reference must be a string")

    value = reference.strip().strip(_QUOTE_CHARS).strip()
    if ":" in value:
        _, value = value.split(":", 1)
    return value.strip()


def validate_digest(digest: str) -> bool:
    """Check that a normalized digest looks like a lowercase hex string.

    Args:
        digest: Normalized digest string

    Returns:
        True if valid hex digest
    """
    if not isinstance(digest, str):
        return False

    return bool(HEX_DIGEST_PATTERN.match(digest))


def blob_digest(name: str, config: Optional[TrimConfig] = None) -> Optional[str]:
    """Return the digest of a blob entry, or None for structural entries.

    Args:
        name: Member name inside the image tar (e.g. "blobs/sha256/abc123")
        config: Trim configuration with the recognized blob algorithms

    Returns:
        Normalized digest, or None if the name is not a blob path
    """
    config = config or DEFAULT_CONFIG

    # tar tools commonly store members as "./blobs/..."
    if name.startswith("./"):
        name = name[2:]

    for prefix in config.blob_prefixes:
        if name.startswith(prefix):
            digest = normalize_digest(name[len(prefix):])
            return digest or None
    return None
