import logging
import struct
from collections import Counter

from .errors import InputTooLargeError

logger = logging.getLogger(__name__)

SYMBOL_COUNT = 256
MAX_COUNT = 0xFFFFFFFF
TABLE_SIZE = SYMBOL_COUNT * 4
_TABLE_STRUCT = struct.Struct(">256I")


class FrequencyTable:
    """
    Occurrence counters for every byte value of one input.

    The table is indexed by byte value (0-255) and is treated as immutable
    once built; both the encoder and the decoder derive the Huffman tree
    from it.
    """

    def __init__(self, counts=None):
        if counts is None:
            counts = [0] * SYMBOL_COUNT
        counts = list(counts)
        if len(counts) != SYMBOL_COUNT:
            raise ValueError(f"Expected {SYMBOL_COUNT} counters, got {len(counts)}")
        for symbol, count in enumerate(counts):
            if count < 0:
                raise ValueError(f"Negative count for symbol {symbol}: {count}")
            if count > MAX_COUNT:
                raise InputTooLargeError(
                    f"Symbol {symbol} occurs {count} times, more than a 32-bit counter holds"
                )
        self._counts = tuple(counts)

    @classmethod
    def from_stream(cls, source, chunk_size: int = 0x20000) -> "FrequencyTable":
        """
        Counts every byte from the current position of source to EOF.

        Parameters:
        source: A binary file-like object with a read() method.
        chunk_size (int): Number of bytes requested per read call.

        Returns:
        FrequencyTable: The counters for everything that was read.
        """
        counter = Counter()
        while True:
            chunk = source.read(chunk_size)
            if not chunk:
                break
            counter.update(chunk)
        table = cls.from_counter(counter)
        logger.debug("Counted %d bytes, %d distinct symbols", table.total, len(table.symbols()))
        return table

    @classmethod
    def from_bytes_data(cls, data: bytes) -> "FrequencyTable":
        return cls.from_counter(Counter(data))

    @classmethod
    def from_counter(cls, counter) -> "FrequencyTable":
        counts = [0] * SYMBOL_COUNT
        for symbol, count in counter.items():
            counts[symbol] = count
        return cls(counts)

    @classmethod
    def unpack(cls, raw: bytes) -> "FrequencyTable":
        """Decodes the 1024-byte big-endian header representation."""
        if len(raw) != TABLE_SIZE:
            raise ValueError(f"Frequency table needs {TABLE_SIZE} bytes, got {len(raw)}")
        return cls(_TABLE_STRUCT.unpack(raw))

    def pack(self) -> bytes:
        return _TABLE_STRUCT.pack(*self._counts)

    @property
    def total(self) -> int:
        return sum(self._counts)

    @property
    def is_empty(self) -> bool:
        return not any(self._counts)

    def symbols(self):
        """Byte values with a nonzero count, in ascending order."""
        return [symbol for symbol, count in enumerate(self._counts) if count]

    def items(self):
        return [(symbol, count) for symbol, count in enumerate(self._counts) if count]

    def __getitem__(self, symbol: int) -> int:
        return self._counts[symbol]

    def __iter__(self):
        return iter(self._counts)

    def __len__(self):
        return SYMBOL_COUNT

    def __eq__(self, other):
        if not isinstance(other, FrequencyTable):
            return NotImplemented
        return self._counts == other._counts

    def __hash__(self):
        return hash(self._counts)

    def __repr__(self):
        return f"FrequencyTable(total={self.total}, symbols={len(self.symbols())})"
