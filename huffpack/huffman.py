import logging
from dataclasses import dataclass

from .bitstream import BitPacker, packed_size, significant_bits, unpack_bits
from .container import HEADER_SIZE, read_header, write_header
from .errors import DegenerateInputError, EmptyInputError, FormatError, SourceChangedError
from .frequency import FrequencyTable
from .tree import build_code_table, build_tree, payload_bit_length

logger = logging.getLogger(__name__)

BUFFER_SIZE = 0x20000
DEGENERATE_POLICIES = ("one-bit", "reject")


@dataclass
class CompressionStats:
    original_size: int
    compressed_size: int
    payload_bits: int
    distinct_symbols: int

    @property
    def ratio(self) -> float:
        if not self.original_size:
            return 0.0
        return self.compressed_size / self.original_size


class HuffmanCompressor:
    """
    Static Huffman codec over binary file-like objects.

    Compression reads the source twice (one counting pass, then a rewind and
    an encoding pass), so the source must support seek(0).
    """

    def __init__(self, buffer_size: int = BUFFER_SIZE, degenerate_policy: str = "one-bit"):
        if buffer_size <= 0:
            raise ValueError(f"Buffer size must be positive, got {buffer_size}")
        if degenerate_policy not in DEGENERATE_POLICIES:
            raise ValueError(f"Unsupported degenerate policy: {degenerate_policy}")
        self.buffer_size = buffer_size
        self.degenerate_policy = degenerate_policy

    def compress(self, source, sink) -> CompressionStats:
        """
        Compresses everything from source into a container written to sink.

        Parameters:
        source: Readable, seekable binary stream positioned at the data.
        sink: Writable binary stream.

        Returns:
        CompressionStats: Sizes of the input and of the container.
        """
        table = FrequencyTable.from_stream(source, self.buffer_size)
        self._check_encodable(table)
        source.seek(0)
        return self.encode(source, table, sink)

    def _check_encodable(self, table):
        if table.is_empty:
            raise EmptyInputError("Input is empty, nothing to compress")
        if len(table.symbols()) == 1 and self.degenerate_policy == "reject":
            raise DegenerateInputError(
                f"Input consists of the single byte value {table.symbols()[0]}"
            )

    def encode(self, source, table: FrequencyTable, sink) -> CompressionStats:
        """
        Writes the container for a source whose frequency table is already known.

        The source must be positioned at the start of the same data the table
        was computed from.
        """
        self._check_encodable(table)
        codes = build_code_table(build_tree(table))
        total_bits = payload_bit_length(table, codes)

        header_size = write_header(sink, table, significant_bits(total_bits))

        packer = BitPacker(sink)
        while True:
            chunk = source.read(self.buffer_size)
            if not chunk:
                break
            packer.encode(codes, chunk)
        payload_size = packer.finish()

        if packer.bits_packed != total_bits:
            raise SourceChangedError(
                f"Source changed between passes: packed {packer.bits_packed} bits, expected {total_bits}"
            )

        stats = CompressionStats(
            original_size=table.total,
            compressed_size=header_size + payload_size,
            payload_bits=total_bits,
            distinct_symbols=len(codes),
        )
        logger.info(
            "Compressed %d bytes into %d bytes (%d symbols)",
            stats.original_size, stats.compressed_size, stats.distinct_symbols,
        )
        return stats

    def decompress(self, source, sink) -> CompressionStats:
        """
        Restores the original bytes from a container.

        Parameters:
        source: Readable binary stream positioned at the start of a container.
        sink: Writable binary stream receiving the original data.

        Returns:
        CompressionStats: Sizes of the container and of the restored data.
        """
        table, final_bits = read_header(source)
        root = build_tree(table)
        codes = build_code_table(root)
        total_bits = payload_bit_length(table, codes)

        payload = source.read()
        if len(payload) != packed_size(total_bits):
            raise FormatError(
                f"Payload is {len(payload)} bytes, header describes {packed_size(total_bits)}"
            )
        if final_bits != significant_bits(total_bits):
            raise FormatError(
                f"Significant-bit count {final_bits} does not match the header counters"
            )

        bits = unpack_bits(payload, final_bits)
        if root.is_leaf:
            if bits.any():
                raise FormatError("Single-symbol payload contains set bits")
            written = self._emit_repeated(root.symbol, len(bits), sink)
        else:
            written = self._walk(root, bits, sink)

        if written != table.total:
            raise FormatError(f"Decoded {written} bytes, header declares {table.total}")

        logger.info("Decompressed %d bytes into %d bytes", HEADER_SIZE + len(payload), written)
        return CompressionStats(
            original_size=written,
            compressed_size=HEADER_SIZE + len(payload),
            payload_bits=total_bits,
            distinct_symbols=len(codes),
        )

    def _walk(self, root, bits, sink) -> int:
        output = bytearray()
        written = 0
        node = root
        for bit in bits:
            node = node.left if bit else node.right
            if node.is_leaf:
                output.append(node.symbol)
                node = root
                if len(output) >= self.buffer_size:
                    sink.write(output)
                    written += len(output)
                    output = bytearray()
        if node is not root:
            raise FormatError("Payload ends in the middle of a code")
        if output:
            sink.write(output)
            written += len(output)
        return written

    def _emit_repeated(self, symbol, count, sink) -> int:
        # single-symbol container: every significant bit stands for one occurrence
        written = 0
        while written < count:
            size = min(self.buffer_size, count - written)
            sink.write(bytes([symbol]) * size)
            written += size
        return written
