from .compression import Compressor
from .container import HEADER_SIZE, ContainerInfo, describe
from .errors import (
    CompressionError,
    DegenerateInputError,
    EmptyInputError,
    FormatError,
    InputTooLargeError,
    SourceChangedError,
)
from .frequency import FrequencyTable
from .huffman import CompressionStats, HuffmanCompressor
from .tree import HuffmanNode, build_code_table, build_tree

__version__ = "0.1.0"
