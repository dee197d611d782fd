# filename: huffman_core.py

import logging
from collections import Counter, deque
from dataclasses import dataclass
from typing import Optional

import huffman_settings

logger = logging.getLogger(__name__)


class HuffmanError(Exception):
    pass


class SymbolRangeError(HuffmanError, ValueError):
    pass


class InvalidBitError(HuffmanError, ValueError):
    pass


@dataclass(frozen=True)
class SymbolFrequency:
    symbol: Optional[int]
    probability: float

    def sort_key(self):
        # Equal probabilities fall back to the symbol value; aggregated
        # entries (symbol None) never go through a sort.
        return (self.probability, -1 if self.symbol is None else self.symbol)


class HuffmanNode:
    def __init__(self, data, left=None, right=None):
        self.data = data
        self.left = left
        self.right = right

    @property
    def symbol(self):
        return self.data.symbol

    @property
    def probability(self):
        return self.data.probability

    def is_leaf(self):
        return self.left is None and self.right is None

    def __repr__(self):
        return f"HuffmanNode<symbol={self.data.symbol},p={self.data.probability}>"


def as_symbols(data):
    if isinstance(data, str):
        return [ord(c) for c in data]
    return data


def sort_frequencies(frequencies):
    return sorted(frequencies, key=SymbolFrequency.sort_key)


def find_min(source, target):
    """Dequeue the lowest-probability node from the fronts of two queues.

    Ties go to ``source``. Returns None when both queues are empty.
    """
    if not source:
        if not target:
            return None
        return target.popleft()
    if not target:
        return source.popleft()
    if source[0].probability <= target[0].probability:
        return source.popleft()
    return target.popleft()


class HuffmanLogic:
    def __init__(self, alphabet_size=None):
        if alphabet_size is None:
            alphabet_size = huffman_settings.ALPHABET_SIZE
        # decoded symbols are written out as single bytes
        if not 2 <= alphabet_size <= 256:
            raise SymbolRangeError(f"alphabet size {alphabet_size} outside 2..256")
        self.alphabet_size = alphabet_size

    def check_symbol(self, symbol):
        if not isinstance(symbol, int) or not 0 <= symbol < self.alphabet_size:
            raise SymbolRangeError(
                f"symbol {symbol} outside alphabet of {self.alphabet_size} values")

    def count_symbols(self, data, counts=None):
        """Add the occurrences in ``data`` to ``counts`` (a Counter)."""
        if counts is None:
            counts = Counter()
        symbols = as_symbols(data)
        counts.update(symbols)
        for symbol in counts:
            self.check_symbol(symbol)
        return counts

    def sorted_list_from_counts(self, counts):
        total = sum(counts.values())
        if not total:
            return []
        frequencies = [SymbolFrequency(symbol, count / total)
                       for symbol, count in counts.items() if count]
        frequencies = sort_frequencies(frequencies)

        # A lone symbol still needs a sibling so that its code is non-empty
        if len(frequencies) == 1:
            symbol = frequencies[0].symbol
            partner = 0 if symbol == self.alphabet_size - 1 else symbol + 1
            frequencies.append(SymbolFrequency(partner, 0.0))
            frequencies = sort_frequencies(frequencies)
        return frequencies

    def make_sorted_list(self, data):
        return self.sorted_list_from_counts(self.count_symbols(data))

    def build_tree(self, sorted_list):
        """Merge the sorted frequency list into a Huffman tree.

        Leaves wait in a source queue in ascending order and merged nodes are
        appended to a target queue, which stays ascending as well, so the two
        queue fronts always hold the global minimum.
        """
        if not sorted_list:
            return None
        if len(sorted_list) < 2:
            raise HuffmanError("at least two symbol frequencies are required to build a tree")

        source = deque(HuffmanNode(entry) for entry in sorted_list)
        target = deque()

        while source or len(target) > 1:
            left = find_min(source, target)
            right = find_min(source, target)
            merged = SymbolFrequency(None, left.probability + right.probability)
            target.append(HuffmanNode(merged, left, right))

        return find_min(source, target)

    def generate_codes(self, root):
        codes = [None] * self.alphabet_size
        if root is None:
            return codes

        # pre-order, left before right
        stack = [(root, "")]
        while stack:
            node, path = stack.pop()
            if node.is_leaf():
                codes[node.symbol] = path
                continue
            stack.append((node.right, path + "1"))
            stack.append((node.left, path + "0"))
        return codes

    def walk(self, bits, root):
        """Yield decoded symbols from a bit-string using the tree at ``root``."""
        if not bits:
            return
        if root is None:
            raise HuffmanError("cannot decode without a tree")

        node = root
        for bit in bits:
            if node.is_leaf():
                yield node.symbol
                node = root
            if bit == "0":
                node = node.left
            elif bit == "1":
                node = node.right
            else:
                raise InvalidBitError(f"invalid bit character {bit!r} in bit-string")

        if node.is_leaf():
            yield node.symbol
        else:
            logger.warning("bit-string ends inside a code, trailing bits dropped")
