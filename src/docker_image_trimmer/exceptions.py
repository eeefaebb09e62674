"""Custom exceptions for the Docker image trimmer."""


class TrimError(Exception):
    """Base exception for all trim-related errors."""

    pass


class TrimIOError(TrimError):
    """Raised when a file cannot be opened, read or written."""

    pass


class ParseError(TrimError):
    """Raised when the layers JSON is malformed or misses a required field."""

    pass


class ArchiveFormatError(TrimError):
    """Raised when the tar archive is corrupt, truncated or unreadable."""

    pass


class ConflictError(TrimError):
    """Raised when the input files cannot be identified unambiguously."""

    pass
