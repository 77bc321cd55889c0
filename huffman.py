import heapq
import itertools
from dataclasses import dataclass, field
from typing import Dict, Hashable, Iterable, Iterator, List, Union


class HuffmanError(ValueError):
    """Base class for errors raised while building or applying a Huffman code."""


class InvalidInput(HuffmanError):
    pass


class UnknownSymbol(HuffmanError):
    def __init__(self, symbol, position: int):
        super().__init__(f"symbol {symbol!r} at position {position} has no code")
        self.symbol = symbol
        self.position = position


class TruncatedStream(HuffmanError):
    def __init__(self, consumed: int):
        super().__init__(f"bitstream ended mid-code after {consumed} bits")
        self.consumed = consumed


@dataclass(frozen=True)
class Leaf: # Leaf of the Huffman tree: one symbol and its count
    symbol: Hashable
    weight: int


@dataclass(frozen=True)
class Internal: # Internal node: owns exactly two children, weight is their sum
    left: "Node"
    right: "Node"
    weight: int = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "weight", self.left.weight + self.right.weight)


Node = Union[Leaf, Internal]


def count_frequencies(symbols: Iterable) -> Dict[Hashable, int]: # symbol -> number of occurrences
    freqs: Dict[Hashable, int] = {}
    for s in symbols:
        freqs[s] = freqs.get(s, 0) + 1
    return freqs


def build_huffman_tree(frequency_table: Dict[Hashable, int]) -> Node:
    """
    Greedy construction: repeatedly merge the two lightest nodes.

    Leaves are seeded in ascending symbol order and equal weights leave the
    queue in insertion order, so the same table always gives the same tree.
    The first node popped becomes the left child. Symbols must therefore be
    mutually orderable (all characters or all byte values).
    """
    if not frequency_table:
        raise InvalidInput("cannot build a Huffman tree from an empty frequency table")

    try:
        symbols = sorted(frequency_table)
    except TypeError as e:
        raise InvalidInput(f"symbols cannot be ordered: {e}") from e

    counter = itertools.count()
    priority_queue = []
    for symbol in symbols:
        weight = frequency_table[symbol]
        if weight <= 0:
            raise InvalidInput(f"symbol {symbol!r} has non-positive count {weight}")
        priority_queue.append((weight, next(counter), Leaf(symbol, weight)))
    heapq.heapify(priority_queue)

    while len(priority_queue) > 1:
        _, _, left = heapq.heappop(priority_queue)
        _, _, right = heapq.heappop(priority_queue)
        merged = Internal(left, right)
        heapq.heappush(priority_queue, (merged.weight, next(counter), merged))

    return priority_queue[0][2] # lone Leaf when the table has a single symbol


def iter_leaves(root: Node) -> Iterator[Leaf]: # leaves from left to right
    stack = [root]
    while stack:
        node = stack.pop()
        if isinstance(node, Leaf):
            yield node
        else:
            stack.append(node.right)
            stack.append(node.left)


def check_tree(root: Node) -> None:
    """Raise AssertionError if the tree is not a strict binary tree with summed weights."""
    stack = [root]
    while stack:
        node = stack.pop()
        if isinstance(node, Leaf):
            if node.weight <= 0:
                raise AssertionError(f"leaf {node.symbol!r} has weight {node.weight}")
            continue
        if not isinstance(node, Internal):
            raise AssertionError(f"unexpected node type {type(node).__name__}")
        if node.left is None or node.right is None:
            raise AssertionError("internal node is missing a child")
        if node.weight != node.left.weight + node.right.weight:
            raise AssertionError(f"internal weight {node.weight} is not the sum of its children")
        stack.append(node.right)
        stack.append(node.left)


def generate_huffman_codes(root: Node) -> Dict[Hashable, str]: # symbol -> code made of '0'/'1'
    if isinstance(root, Leaf):
        # a single-symbol alphabet has no path to walk
        return {root.symbol: "0"}

    codes: Dict[Hashable, str] = {}
    stack = [(root, "")]
    while stack:
        node, prefix = stack.pop()
        if isinstance(node, Leaf):
            codes[node.symbol] = prefix
            continue
        # right goes on first so the left subtree is visited first
        stack.append((node.right, prefix + "1"))
        stack.append((node.left, prefix + "0"))
    return codes


def huffman_encode(symbols: Iterable, code_map: Dict[Hashable, str]) -> str:
    parts = []
    for i, s in enumerate(symbols):
        code = code_map.get(s)
        if code is None:
            raise UnknownSymbol(s, i)
        parts.append(code)
    return "".join(parts)


def huffman_decode(bitstring: str, root: Node) -> List:
    """
    Walk the tree one bit at a time, emitting a symbol at every leaf.

    Raises TruncatedStream if the bits stop part way down a path and
    InvalidInput for anything that is not a '0' or '1'.
    """
    decoded = []

    if isinstance(root, Leaf):
        for i, bit in enumerate(bitstring):
            if bit != "0":
                raise InvalidInput(f"bit {bit!r} at position {i} is not valid for a single-symbol code")
            decoded.append(root.symbol)
        return decoded

    node = root
    for i, bit in enumerate(bitstring):
        if bit == "0":
            node = node.left
        elif bit == "1":
            node = node.right
        else:
            raise InvalidInput(f"bit {bit!r} at position {i} is not '0' or '1'")

        if isinstance(node, Leaf):
            decoded.append(node.symbol)
            node = root

    if node is not root:
        raise TruncatedStream(len(bitstring))
    return decoded
