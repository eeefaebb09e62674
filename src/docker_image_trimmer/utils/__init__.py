"""Utility functions for the Docker image trimmer."""

from .digest import blob_digest, normalize_digest, validate_digest
from .size import format_size

__all__ = ["blob_digest", "format_size", "normalize_digest", "validate_digest"]
