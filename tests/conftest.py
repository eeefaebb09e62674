"""Test configuration and fixtures."""

import hashlib

import pytest

from tests.helpers import create_image_tar, image_entries, write_layers_json


def digest_of(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


@pytest.fixture
def layer_blobs():
    """Three layer blobs keyed by their sha256 digest."""
    contents = [b"layer-a" * 4096, b"layer-b" * 2048, b"layer-c" * 1024]
    return {digest_of(data): data for data in contents}


@pytest.fixture
def layer_digests(layer_blobs):
    """Layer digests in archive order."""
    return list(layer_blobs)


@pytest.fixture
def image_tar(tmp_path, layer_blobs):
    """A docker save style image tar with three layer blobs."""
    return create_image_tar(tmp_path / "image.tar", image_entries(layer_blobs))


@pytest.fixture
def layers_json(tmp_path):
    """Factory writing a reference layers JSON file."""

    def _write(digests, name="reference.json"):
        return write_layers_json(tmp_path / name, digests)

    return _write

