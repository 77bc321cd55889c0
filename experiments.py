"""
Huffman pipeline experiments: timing and round-trip correctness

Runs the build/encode/decode pipeline over synthetic byte datasets, with
repeated runs per configuration.

Outputs (in --outdir):
  - metrics.csv     (raw row per run)
  - summary.csv     (grouped mean/stdev)
  - *.png           (charts, unless --no_plots)

How to run:
  python experiments.py --outdir results --runs 5
  python experiments.py --outdir results --runs 3 --size_kb 64 --max_kb 1024
  python experiments.py --outdir results --generators uniform256,zipf64,single_symbol
"""

from __future__ import annotations

import argparse
import csv
import random
import statistics
import time
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

import matplotlib.pyplot as plt

import huffman as huff


# Utilities

def now_ns() -> int:
    return time.perf_counter_ns()

def ns_to_ms(ns: int) -> float:
    return ns / 1_000_000.0


# Synthetic dataset generators

def gen_uniform(size: int, alphabet: int = 256, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    return bytes(rng.randrange(alphabet) for _ in range(size))

def gen_weighted(size: int, symbols: List[int], weights: List[float], seed: int = 0) -> bytes:
    rng = random.Random(seed)
    return bytes(rng.choices(symbols, weights=weights, k=size))

def gen_zipf_like(size: int, alphabet: int = 64, s: float = 1.2, seed: int = 0) -> bytes:
    weights = [1.0 / ((rank + 1) ** s) for rank in range(alphabet)]
    return gen_weighted(size, list(range(alphabet)), weights, seed)

def gen_repetitive(size: int, dominant: int = ord('A'), dom_frac: float = 0.90, seed: int = 0) -> bytes:
    others = [b for b in range(256) if b != dominant]
    rest = (1.0 - dom_frac) / len(others)
    return gen_weighted(size, [dominant] + others, [dom_frac] + [rest] * len(others), seed)

def gen_english_like(size: int, seed: int = 0) -> bytes:
    # rough letter frequencies, space most common
    common, middle, rare = "etaoinshrdlu", "cmfwgypbvk", "jxqz"
    chars = " \n" + common + middle + rare
    weights = [13.0, 1.5] + [6.0] * len(common) + [2.5] * len(middle) + [1.2] * len(rare)
    return gen_weighted(size, [ord(c) for c in chars], weights, seed)

GENERATOR_REGISTRY: Dict[str, Callable[[int, int], bytes]] = {
    "uniform256": lambda size, seed: gen_uniform(size, alphabet=256, seed=seed),
    "uniform16": lambda size, seed: gen_uniform(size, alphabet=16, seed=seed),
    "zipf64": lambda size, seed: gen_zipf_like(size, alphabet=64, seed=seed),
    "repetitive90": lambda size, seed: gen_repetitive(size, dom_frac=0.90, seed=seed),
    "single_symbol": lambda size, seed: bytes([ord('A')]) * size,
    "english_like": lambda size, seed: gen_english_like(size, seed=seed),
}

def generate_dataset(name: str, size_bytes: int, seed: int) -> bytes:
    fn = GENERATOR_REGISTRY.get(name)
    if fn is None:
        raise KeyError(f"unknown generator {name!r}, expected one of {sorted(GENERATOR_REGISTRY)}")
    return fn(size_bytes, seed)


# Experiment runner

@dataclass
class MetricRow:
    exp_name: str
    dataset_name: str
    file_size_bytes: int
    run_id: int
    unique_symbols: int
    max_code_length: int

    build_ms: float
    encode_ms: float
    decode_ms: float
    total_ms: float

    correctness_ok: int  # 1 or 0


def run_one(data: bytes) -> MetricRow:
    """Time one full pass of the pipeline over non-empty data."""
    t0 = now_ns()
    ft = huff.count_frequencies(data)
    root = huff.build_huffman_tree(ft)
    code_map = huff.generate_huffman_codes(root)
    t1 = now_ns()

    encoded = huff.huffman_encode(data, code_map)
    t2 = now_ns()

    decoded = bytes(huff.huffman_decode(encoded, root))
    t3 = now_ns()

    return MetricRow(
        exp_name="",
        dataset_name="",
        file_size_bytes=len(data),
        run_id=0,
        unique_symbols=len(ft),
        max_code_length=max(len(c) for c in code_map.values()),
        build_ms=ns_to_ms(t1 - t0),
        encode_ms=ns_to_ms(t2 - t1),
        decode_ms=ns_to_ms(t3 - t2),
        total_ms=ns_to_ms(t3 - t0),
        correctness_ok=1 if decoded == data else 0,
    )


def write_csv(path: Path, rows: List[MetricRow]) -> None:
    names = [f.name for f in fields(MetricRow)]
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=names)
        w.writeheader()
        for r in rows:
            w.writerow({k: getattr(r, k) for k in names})


def mean_stdev(vals: List[float]) -> Tuple[float, float]:
    if len(vals) == 1:
        return vals[0], 0.0
    return statistics.mean(vals), statistics.stdev(vals)


def group_summary(rows: List[MetricRow], out_path: Path) -> None:
    """
    Group by exp_name, dataset_name, file_size_bytes and compute mean/stdev
    """
    key_to: Dict[Tuple[str, str, int], List[MetricRow]] = {}
    for r in rows:
        key_to.setdefault((r.exp_name, r.dataset_name, r.file_size_bytes), []).append(r)

    timed = ("build_ms", "encode_ms", "decode_ms", "total_ms")
    summary_fields = ["exp_name", "dataset_name", "file_size_bytes", "n_runs", "unique_symbols", "max_code_length"]
    for t in timed:
        summary_fields += [f"{t}_mean", f"{t}_stdev"]
    summary_fields.append("correctness_ok_rate")

    with out_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=summary_fields)
        w.writeheader()
        for (exp_name, dataset_name, size_b), items in sorted(key_to.items()):
            out = {
                "exp_name": exp_name,
                "dataset_name": dataset_name,
                "file_size_bytes": size_b,
                "n_runs": len(items),
                "unique_symbols": max(x.unique_symbols for x in items),
                "max_code_length": max(x.max_code_length for x in items),
                "correctness_ok_rate": sum(x.correctness_ok for x in items) / len(items),
            }
            for t in timed:
                out[f"{t}_mean"], out[f"{t}_stdev"] = mean_stdev([getattr(x, t) for x in items])
            w.writerow(out)


# Plotting

def plot_distributions(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp1_distribution"]
    if not exp_rows:
        return

    datasets = sorted(set(r.dataset_name for r in exp_rows))
    x = list(range(len(datasets)))

    plt.figure()
    for stage in ("build_ms", "encode_ms", "decode_ms"):
        y = [statistics.mean(getattr(r, stage) for r in exp_rows if r.dataset_name == d) for d in datasets]
        plt.plot(x, y, marker="o", label=stage.replace("_ms", ""))
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylabel("Time (ms)")
    plt.title("Stage Time by Distribution")
    plt.legend()
    plt.tight_layout()
    plt.savefig(outdir / "exp1_stage_time.png", dpi=200)
    plt.close()


def plot_size_scaling(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp2_size_scaling"]
    if not exp_rows:
        return

    plt.figure()
    for dist in sorted(set(r.dataset_name for r in exp_rows)):
        dist_rows = [r for r in exp_rows if r.dataset_name == dist]
        sizes = sorted(set(r.file_size_bytes for r in dist_rows))
        y = [statistics.mean(r.total_ms for r in dist_rows if r.file_size_bytes == s) for s in sizes]
        plt.plot(sizes, y, marker="o", label=dist)
    plt.xscale("log", base=2)
    plt.xlabel("Input Size (bytes)")
    plt.ylabel("Total Time (ms) (build + encode + decode)")
    plt.title("Total Time vs Input Size")
    plt.legend()
    plt.tight_layout()
    plt.savefig(outdir / "exp2_total_time.png", dpi=200)
    plt.close()


# Main

def parse_csv_list(s: str) -> List[str]:
    return [x.strip() for x in s.split(",") if x.strip()]

def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--outdir", type=str, default="results", help="Output directory for CSV and plots")
    ap.add_argument("--runs", type=int, default=5, help="Repetitions per configuration")
    ap.add_argument("--seed", type=int, default=123, help="Base random seed")
    ap.add_argument("--generators", type=str, default="uniform256,zipf64,repetitive90,english_like",
                    help="Comma-separated dataset generator names")
    ap.add_argument("--size_kb", type=int, default=256, help="Fixed input size in KB for the distribution experiment")
    ap.add_argument("--min_kb", type=int, default=4, help="Smallest size in KB for the scaling experiment")
    ap.add_argument("--max_kb", type=int, default=2048, help="Largest size in KB for the scaling experiment")
    ap.add_argument("--no_plots", action="store_true", help="Only write the CSV files")
    args = ap.parse_args(argv)

    gen_names = parse_csv_list(args.generators)
    for name in gen_names:
        if name not in GENERATOR_REGISTRY:
            ap.error(f"unknown generator {name!r}, choose from {', '.join(sorted(GENERATOR_REGISTRY))}")

    outdir = Path(args.outdir)
    outdir.mkdir(parents=True, exist_ok=True)

    rows: List[MetricRow] = []

    def record(exp_name: str, gen_name: str, size_b: int, seed: int) -> None:
        for run_id in range(1, args.runs + 1):
            row = run_one(generate_dataset(gen_name, size_b, seed + run_id))
            row.exp_name = exp_name
            row.dataset_name = gen_name
            row.run_id = run_id
            rows.append(row)

    # Experiment 1: distributions at a fixed size
    fixed_size = max(1, args.size_kb) * 1024
    for gen_name in gen_names:
        record("exp1_distribution", gen_name, fixed_size, args.seed)

    # Experiment 2: size scaling, powers of 2
    size_b = max(1, args.min_kb) * 1024
    while size_b <= max(1, args.max_kb) * 1024:
        for gen_name in gen_names:
            record("exp2_size_scaling", gen_name, size_b, args.seed + 10_000 + size_b)
        size_b *= 2

    metrics_csv = outdir / "metrics.csv"
    summary_csv = outdir / "summary.csv"
    write_csv(metrics_csv, rows)
    group_summary(rows, summary_csv)

    if not args.no_plots:
        plot_distributions(rows, outdir)
        plot_size_scaling(rows, outdir)

    ok_rate = sum(r.correctness_ok for r in rows) / max(1, len(rows))
    print(f"Wrote {len(rows)} rows to {metrics_csv}")
    print(f"Wrote grouped summary to {summary_csv}")
    print(f"Correctness rate across all runs: {ok_rate:.3f}")
    if not args.no_plots:
        print("Charts saved in:", outdir.resolve())
    return 0 if ok_rate == 1.0 else 1


if __name__ == "__main__":
    raise SystemExit(main())
