from bitarray import bitarray


class BitPacker:
    """
    Accumulates codes and writes them to a sink as whole bytes.

    The first bit appended becomes the most significant bit of the first
    byte written. Bits that do not yet fill a byte stay buffered until more
    codes arrive or finish() pads them with zeros.
    """

    def __init__(self, sink):
        self.sink = sink
        self.buffer = bitarray(endian="big")
        self.bytes_written = 0
        self.bits_packed = 0

    def encode(self, codes: dict, data: bytes) -> None:
        """
        Appends the code of every byte in data and flushes the full bytes.

        Parameters:
        codes (dict): byte value -> bitarray code.
        data (bytes): The bytes to translate.
        """
        before = len(self.buffer)
        self.buffer.encode(codes, data)
        self.bits_packed += len(self.buffer) - before
        self._flush_full_bytes()

    def _flush_full_bytes(self):
        whole = len(self.buffer) - len(self.buffer) % 8
        if whole:
            self._write(self.buffer[:whole].tobytes())
            del self.buffer[:whole]

    def finish(self) -> int:
        """Pads and writes the trailing partial byte, returns the total bytes written."""
        if len(self.buffer):
            self.buffer.fill()
            self._write(self.buffer.tobytes())
            self.buffer.clear()
        return self.bytes_written

    def _write(self, chunk):
        self.sink.write(chunk)
        self.bytes_written += len(chunk)


def unpack_bits(payload: bytes, final_bits: int) -> bitarray:
    """
    Expands packed bytes into the sequence of meaningful bits.

    Parameters:
    payload (bytes): The packed bytes, most significant bit first.
    final_bits (int): Significant bits in the last byte, 0 meaning all eight.

    Returns:
    bitarray: Every bit except the padding at the end of the last byte.
    """
    bits = bitarray(endian="big")
    bits.frombytes(payload)
    if payload and final_bits:
        del bits[len(bits) - (8 - final_bits):]
    return bits


def significant_bits(total_bits: int) -> int:
    """The header value describing how many bits of the last byte are used."""
    return total_bits % 8


def packed_size(total_bits: int) -> int:
    return (total_bits + 7) // 8
