import io
import logging
import os
import stat
import tempfile

from .config_loader import load_config
from .huffman import HuffmanCompressor

logger = logging.getLogger(__name__)


class Compressor:
    # Front end over HuffmanCompressor: bytes in/bytes out, streams, and
    # files. File output goes to a temporary file next to the destination
    # and is renamed into place only once the codec has finished.
    def __init__(self, config=None):
        """
        Initializes the Compressor from a configuration dictionary.

        Parameters:
        config (dict): Loaded configuration; load_config() is used when omitted.
        """
        self.config = config if config is not None else load_config()
        codec = self.config["codec"]
        self.codec = HuffmanCompressor(
            buffer_size=codec["buffer_size"],
            degenerate_policy=codec["degenerate_policy"],
        )

    def compress(self, data: bytes) -> bytes:
        """
        Compresses the given bytes into a container.

        Parameters:
        data (bytes): The data to compress.

        Returns:
        bytes: The container (1025-byte header followed by the payload).
        """
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError("Input data must be bytes.")
        sink = io.BytesIO()
        self.codec.compress(io.BytesIO(bytes(data)), sink)
        return sink.getvalue()

    def decompress(self, compressed: bytes) -> bytes:
        """
        Decompresses a container back to the original bytes.

        Parameters:
        compressed (bytes): A container produced by compress().

        Returns:
        bytes: The original data.
        """
        if not isinstance(compressed, (bytes, bytearray, memoryview)):
            raise TypeError("Input compressed data must be bytes.")
        sink = io.BytesIO()
        self.codec.decompress(io.BytesIO(bytes(compressed)), sink)
        return sink.getvalue()

    def compress_stream(self, source, sink):
        if not _seekable(source):
            source = io.BytesIO(source.read())
        return self.codec.compress(source, sink)

    def decompress_stream(self, source, sink):
        return self.codec.decompress(source, sink)

    def compress_file(self, src_path, dst_path):
        with open(src_path, "rb") as source:
            return self._write_atomically(dst_path, lambda sink: self.codec.compress(source, sink))

    def decompress_file(self, src_path, dst_path):
        with open(src_path, "rb") as source:
            return self._write_atomically(dst_path, lambda sink: self.codec.decompress(source, sink))

    def _write_atomically(self, dst_path, run):
        directory = os.path.dirname(os.path.abspath(dst_path))
        fd, tmp_path = tempfile.mkstemp(prefix=".huffpack-", dir=directory)
        try:
            with os.fdopen(fd, "wb") as sink:
                os.chmod(tmp_path, _output_mode(dst_path))
                stats = run(sink)
            os.replace(tmp_path, dst_path)
        except BaseException:
            os.unlink(tmp_path)
            raise
        logger.debug("Wrote %s", dst_path)
        return stats


def _seekable(stream):
    seekable = getattr(stream, "seekable", None)
    return bool(seekable and seekable())


def _output_mode(dst_path):
    """Mode for a new output file: the existing file's mode, else 0666 under the umask."""
    try:
        return stat.S_IMODE(os.stat(dst_path).st_mode)
    except FileNotFoundError:
        pass
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask
