"""Tar scanning and rewriting."""

from .models import MemberSpan, RewriteStats, TrimResult
from .reader import iter_archive_members, scan_blob_digests
from .writer import write_trimmed_tar

__all__ = [
    "MemberSpan",
    "RewriteStats",
    "TrimResult",
    "iter_archive_members",
    "scan_blob_digests",
    "write_trimmed_tar",
]
