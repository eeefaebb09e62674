"""Core types and set operations."""

from .layers import difference, layer_set
from .types import DEFAULT_CONFIG, LayerSet, TrimConfig

__all__ = ["DEFAULT_CONFIG", "LayerSet", "TrimConfig", "difference", "layer_set"]
