#!/usr/bin/env python3
"""Performance micro-benchmarks for the MD5 compressor and streaming engine."""
from __future__ import annotations

import argparse
import random
import time
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from md5stream.core import MD5_IV, bytes_to_words_le, compress_block
from md5stream.md5 import MD5
from md5stream.numba_md5 import compress_block_numba, numba_available


def bench_compress(trials: int, seed: int) -> None:
    rng = random.Random(seed)
    block = bytes(rng.getrandbits(8) for _ in range(64))
    words = bytes_to_words_le(block)
    ihv = MD5_IV
    start = time.time()
    for _ in range(trials):
        ihv = compress_block(ihv, words)
    elapsed = time.time() - start
    rate = trials / elapsed if elapsed else 0.0
    print(f"compress_python: trials={trials} time={elapsed:.3f}s rate={rate:.2f} blocks/s")

    if not numba_available():
        print("compress_numba: skipped (numba not available)")
        return
    compress_block_numba(MD5_IV, block)  # JIT warm-up
    ihv = MD5_IV
    start = time.time()
    for _ in range(trials):
        ihv = compress_block_numba(ihv, block)
    elapsed = time.time() - start
    rate = trials / elapsed if elapsed else 0.0
    print(f"compress_numba: trials={trials} time={elapsed:.3f}s rate={rate:.2f} blocks/s")


def bench_stream(size: int, chunk: int, seed: int) -> None:
    rng = random.Random(seed)
    data = bytes(rng.getrandbits(8) for _ in range(size))
    start = time.time()
    h = MD5()
    for off in range(0, len(data), chunk):
        h.update(data[off : off + chunk])
    h.final()
    elapsed = time.time() - start
    rate = size / elapsed / 1024 if elapsed else 0.0
    print(f"stream: size={size} chunk={chunk} blocks={h.blocks} time={elapsed:.3f}s rate={rate:.2f} KiB/s")


def main() -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--trials", type=int, default=2000)
    ap.add_argument("--size", type=int, default=1 << 16)
    ap.add_argument("--seed", type=int, default=2024)
    args = ap.parse_args()

    bench_compress(args.trials, args.seed)
    for chunk in (1, 63, 64, 4096):
        bench_stream(args.size, chunk, args.seed)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
