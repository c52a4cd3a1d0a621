"""
Container layout shared by the compressor and the decompressor.

    offset 0     1024 bytes  256 big-endian uint32 symbol counters
    offset 1024  1 byte      significant bits in the final payload byte (0-7)
    offset 1025  ...         packed code bits, most significant bit first

The counters are all a decoder needs to rebuild the Huffman tree, so no
code table is stored.
"""

import logging
from dataclasses import dataclass

from .errors import FormatError
from .frequency import TABLE_SIZE, FrequencyTable

logger = logging.getLogger(__name__)

HEADER_SIZE = TABLE_SIZE + 1


@dataclass
class ContainerInfo:
    original_size: int
    distinct_symbols: int
    final_bits: int
    header_size: int = HEADER_SIZE

    def to_dict(self):
        return {
            "original_size": self.original_size,
            "distinct_symbols": self.distinct_symbols,
            "final_bits": self.final_bits,
            "header_size": self.header_size,
        }


def write_header(sink, table: FrequencyTable, final_bits: int) -> int:
    if not 0 <= final_bits <= 7:
        raise ValueError(f"Significant-bit count must be 0-7, got {final_bits}")
    header = table.pack() + bytes([final_bits])
    sink.write(header)
    return len(header)


def read_exact(source, size: int) -> bytes:
    """Reads until size bytes are collected or the source is exhausted."""
    parts = []
    remaining = size
    while remaining > 0:
        chunk = source.read(remaining)
        if not chunk:
            break
        parts.append(chunk)
        remaining -= len(chunk)
    return b"".join(parts)


def read_header(source):
    """
    Reads and validates the container header.

    Returns:
    tuple: (FrequencyTable, significant-bit count of the final byte).
    """
    header = read_exact(source, HEADER_SIZE)
    if len(header) < HEADER_SIZE:
        raise FormatError(
            f"Truncated header: expected {HEADER_SIZE} bytes, got {len(header)}"
        )
    table = FrequencyTable.unpack(header[:TABLE_SIZE])
    final_bits = header[TABLE_SIZE]
    if final_bits > 7:
        raise FormatError(f"Invalid significant-bit count {final_bits}")
    if table.is_empty:
        raise FormatError("Container frequency table has no symbols")
    logger.debug("Read header: %r, final byte uses %d bits", table, final_bits or 8)
    return table, final_bits


def describe(source) -> ContainerInfo:
    """Summarises a container from its header alone."""
    table, final_bits = read_header(source)
    return ContainerInfo(
        original_size=table.total,
        distinct_symbols=len(table.symbols()),
        final_bits=final_bits,
    )
