import io
import random

import pytest

from huffpack.config_loader import validate_config
from huffpack.huffman import HuffmanCompressor


@pytest.fixture
def codec():
    return HuffmanCompressor()


@pytest.fixture
def small_buffer_codec():
    # forces the chunked read, flush and output batching paths
    return HuffmanCompressor(buffer_size=7)


@pytest.fixture
def config():
    return validate_config({})


@pytest.fixture
def random_bytes():
    rng = random.Random(1234)
    return bytes(rng.getrandbits(8) for _ in range(10 * 1024))


def compress_bytes(codec, data):
    sink = io.BytesIO()
    codec.compress(io.BytesIO(data), sink)
    return sink.getvalue()


def decompress_bytes(codec, container):
    sink = io.BytesIO()
    codec.decompress(io.BytesIO(container), sink)
    return sink.getvalue()
