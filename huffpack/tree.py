import heapq
import itertools
import logging

from bitarray import bitarray

from .errors import EmptyInputError

logger = logging.getLogger(__name__)


class HuffmanNode:
    def __init__(self, weight, symbol=None, left=None, right=None):
        self.weight = weight
        self.symbol = symbol    # byte value, leaves only
        self.left = left
        self.right = right

    @property
    def is_leaf(self):
        return self.left is None and self.right is None

    def __repr__(self):
        if self.is_leaf:
            return f"HuffmanNode(weight={self.weight}, symbol={self.symbol})"
        return f"HuffmanNode(weight={self.weight})"


def build_tree(table) -> HuffmanNode:
    """
    Builds the Huffman tree for a frequency table.

    Leaves are created in ascending byte order and every merged node joins
    the pool behind them, so two nodes of equal weight are always taken in
    pool order. The compressor and the decompressor both call this on the
    same table and therefore end up with the same topology.

    Parameters:
    table (FrequencyTable): Counters for the input.

    Returns:
    HuffmanNode: The root. With a single symbol the root is that leaf.
    """
    sequence = itertools.count()
    pool = [(count, next(sequence), HuffmanNode(count, symbol)) for symbol, count in table.items()]
    if not pool:
        raise EmptyInputError("Cannot build a Huffman tree without any symbols")
    heapq.heapify(pool)

    while len(pool) > 1:
        weight_left, _, left = heapq.heappop(pool)
        weight_right, _, right = heapq.heappop(pool)
        merged = HuffmanNode(weight_left + weight_right, left=left, right=right)
        heapq.heappush(pool, (merged.weight, next(sequence), merged))

    return pool[0][2]


def _collect_codes(node, prefix, codes):
    if node.is_leaf:
        codes[node.symbol] = prefix
        return
    # right is '0', left is '1'; the decoder walks the same way
    _collect_codes(node.right, prefix + bitarray("0", endian="big"), codes)
    _collect_codes(node.left, prefix + bitarray("1", endian="big"), codes)


def build_code_table(root: HuffmanNode) -> dict:
    """
    Derives the code for every leaf of the tree.

    A root that is itself a leaf (single-symbol input) gets the one-bit code
    '0' so that every occurrence still takes up a bit of payload.

    Returns:
    dict: byte value -> bitarray code.
    """
    if root.is_leaf:
        return {root.symbol: bitarray("0", endian="big")}
    codes = {}
    _collect_codes(root, bitarray(endian="big"), codes)
    logger.debug(
        "Derived %d codes, lengths %d..%d",
        len(codes), min(map(len, codes.values())), max(map(len, codes.values())),
    )
    return codes


def payload_bit_length(table, codes) -> int:
    """Total number of meaningful payload bits for a table and its codes."""
    return sum(count * len(codes[symbol]) for symbol, count in table.items())
