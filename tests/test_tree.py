from fractions import Fraction

import pytest
from bitarray import bitarray

from huffpack.errors import EmptyInputError
from huffpack.frequency import FrequencyTable
from huffpack.tree import build_code_table, build_tree, payload_bit_length


def _codes_for(data):
    return build_code_table(build_tree(FrequencyTable.from_bytes_data(data)))


def _leaves(node):
    if node.is_leaf:
        return [node]
    return _leaves(node.left) + _leaves(node.right)


def _check_weights(node):
    if node.is_leaf:
        return
    assert node.left is not None and node.right is not None
    assert node.weight == node.left.weight + node.right.weight
    _check_weights(node.left)
    _check_weights(node.right)


def test_empty_table_fails():
    with pytest.raises(EmptyInputError):
        build_tree(FrequencyTable())


def test_single_symbol_root_is_leaf():
    root = build_tree(FrequencyTable.from_bytes_data(b"XXXXX"))
    assert root.is_leaf
    assert root.symbol == ord("X")
    assert root.weight == 5


def test_single_symbol_gets_one_bit_code():
    codes = _codes_for(b"XXXXX")
    assert codes == {ord("X"): bitarray("0")}


def test_three_symbol_scenario():
    root = build_tree(FrequencyTable.from_bytes_data(b"AAAABBBC"))
    assert sorted(leaf.symbol for leaf in _leaves(root)) == [ord("A"), ord("B"), ord("C")]
    assert root.weight == 8
    _check_weights(root)

    codes = build_code_table(root)
    a, b, c = (len(codes[ord(s)]) for s in "ABC")
    assert a < c
    assert a <= b <= c


def test_known_codes_for_three_symbols():
    codes = _codes_for(b"AAAABBBC")
    assert codes[ord("A")].to01() == "1"
    assert codes[ord("B")].to01() == "00"
    assert codes[ord("C")].to01() == "01"


def test_tree_is_deterministic():
    table = FrequencyTable.from_bytes_data(b"abracadabra, alakazam")
    assert build_code_table(build_tree(table)) == build_code_table(build_tree(table))


def test_equal_weights_split_evenly():
    codes = _codes_for(bytes(range(8)))
    assert {len(code) for code in codes.values()} == {3}


def test_codes_are_prefix_free(random_bytes):
    codes = _codes_for(random_bytes).values()
    strings = [code.to01() for code in codes]
    for i, first in enumerate(strings):
        for j, second in enumerate(strings):
            if i != j:
                assert not second.startswith(first)


def test_kraft_equality(random_bytes):
    codes = _codes_for(random_bytes + b"\x00" * 5000)
    assert sum(Fraction(1, 2 ** len(code)) for code in codes.values()) == 1


def test_leaves_match_nonzero_symbols():
    data = b"the quick brown fox"
    root = build_tree(FrequencyTable.from_bytes_data(data))
    assert sorted(leaf.symbol for leaf in _leaves(root)) == sorted(set(data))
    _check_weights(root)


def test_payload_bit_length():
    table = FrequencyTable.from_bytes_data(b"AAAABBBC")
    codes = build_code_table(build_tree(table))
    assert payload_bit_length(table, codes) == 4 * 1 + 3 * 2 + 1 * 2
