"""Shared types and configuration for trim operations."""

from dataclasses import dataclass, field
from typing import FrozenSet

# A set of normalized layer digests (hex part only, no "sha256:" prefix)
LayerSet = FrozenSet[str]


@dataclass(frozen=True)
class TrimConfig:
    """Trim configuration.

    Attributes:
        blob_algorithms: Algorithm directories under ``blobs/`` whose entries
            are treated as content-addressed blobs
        rootfs_key: Field of the first descriptor holding the root filesystem
        layers_key: Field of the root filesystem object listing layer digests
        output_suffix: Suffix replacing ``.tar`` in the default output name
        fallback_output: Output name used when the input has no ``.tar`` suffix
        chunk_size: Copy buffer size in bytes
    """

    blob_algorithms: FrozenSet[str] = field(
        default_factory=lambda: frozenset({"sha256"})
    )
    rootfs_key: str = "RootFS"
    layers_key: str = "Layers"
    output_suffix: str = "_trimmed.tar"
    fallback_output: str = "trimmed.tar"
    chunk_size: int = 1024 * 1024

    def __post_init__(self) -> None:
        if not self.blob_algorithms:
            raise ValueError("At least one blob algorithm is required")
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        # Accept any iterable of names, e.g. a list from the CLI
        object.__setattr__(self, "blob_algorithms", frozenset(self.blob_algorithms))

    @property
    def blob_prefixes(self) -> tuple[str, ...]:
        """Archive path prefixes identifying blob entries."""
        return tuple(f"blobs/{algorithm}/" for algorithm in sorted(self.blob_algorithms))


DEFAULT_CONFIG = TrimConfig()
