"""
Huffman coding demo: build a code for one text, encode it, decode it back

How to run:
  python pipeline.py
  python pipeline.py "abracadabra"
  python pipeline.py --file notes.txt --quiet

Reads the input as text by default, or as raw bytes with --file.
Exit status is 0 when the decoded text matches (or the input is empty).
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Hashable, List, Optional, Union

import huffman as huff


STATUS_OK = "ok"
STATUS_EMPTY = "empty"  # nothing to encode, not a failure
STATUS_MISMATCH = "mismatch"
STATUS_FAILED = "failed"

DEFAULT_TEXT = "huffman coding is simple"
RULE = "-" * 33

Text = Union[str, bytes, bytearray]


@dataclass
class PipelineResult:
    text: Text
    frequencies: Dict[Hashable, int]
    tree: Optional[huff.Node] = None
    codes: Optional[Dict[Hashable, str]] = None
    encoded: Optional[str] = None
    decoded: Optional[Text] = None
    status: str = STATUS_OK
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status in (STATUS_OK, STATUS_EMPTY)


def _rejoin(symbols: List, like: Text) -> Text:
    if isinstance(like, (bytes, bytearray)):
        return type(like)(symbols)
    return "".join(symbols)


def _check_structure(result: PipelineResult) -> None:
    huff.check_tree(result.tree)
    if result.tree.weight != sum(result.frequencies.values()):
        raise AssertionError(f"root weight {result.tree.weight} does not match the input length")
    leaves = {leaf.symbol for leaf in huff.iter_leaves(result.tree)}
    if not (leaves == set(result.frequencies) == set(result.codes)):
        raise AssertionError("tree leaves, frequencies and code table disagree on the alphabet")


def run_pipeline(text: Text) -> PipelineResult:
    freqs = huff.count_frequencies(text)
    result = PipelineResult(text=text, frequencies=freqs)
    if not freqs:
        result.status = STATUS_EMPTY
        return result

    result.tree = huff.build_huffman_tree(freqs)
    result.codes = huff.generate_huffman_codes(result.tree)
    # structural faults are fatal, never a reported status
    _check_structure(result)

    try:
        result.encoded = huff.huffman_encode(text, result.codes)
        result.decoded = _rejoin(huff.huffman_decode(result.encoded, result.tree), text)
    except huff.HuffmanError as e:
        result.status = STATUS_FAILED
        result.error = f"{type(e).__name__}: {e}"
        return result

    if result.decoded != text:
        result.status = STATUS_MISMATCH
        result.error = "decoded text does not match the original"
    return result


def _show(text: Text) -> str:
    if isinstance(text, (bytes, bytearray)):
        return repr(bytes(text))
    return f'"{text}"'


def _show_symbol(symbol) -> str:
    if isinstance(symbol, int):
        return repr(bytes([symbol]))
    return repr(symbol)


def format_report(result: PipelineResult) -> str:
    if result.status == STATUS_EMPTY:
        return "Input is empty. Nothing to do."

    lines = [
        "## Huffman Coding ##",
        f"Original Text: {_show(result.text)}",
        RULE,
        "## Generated Codes ##",
    ]
    for symbol, code in (result.codes or {}).items():
        lines.append(f"{_show_symbol(symbol)} : {code}")
    lines.append(RULE)

    if result.encoded is not None:
        lines += ["## Encoded Text ##", result.encoded, RULE]
    if result.decoded is not None:
        lines += ["## Decoded Text ##", _show(result.decoded), RULE]

    lines.append(verdict(result))
    return "\n".join(lines)


def verdict(result: PipelineResult) -> str:
    if result.status == STATUS_OK:
        return "Success! Original and decoded text match."
    if result.status == STATUS_EMPTY:
        return "Success! Empty input, nothing to encode."
    return f"Failure! {result.error}"


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Encode and decode a text with a Huffman code")
    ap.add_argument("text", nargs="?", default=DEFAULT_TEXT, help="Text to encode")
    ap.add_argument("--file", type=str, default=None, help="Read the input from this file as raw bytes")
    ap.add_argument("--quiet", action="store_true", help="Only print the final verdict")
    args = ap.parse_args(argv)

    text: Text = Path(args.file).read_bytes() if args.file else args.text

    result = run_pipeline(text)
    print(verdict(result) if args.quiet else format_report(result))
    return 0 if result.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
