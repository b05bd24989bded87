from __future__ import annotations

import argparse
import hashlib
import time
from pathlib import Path
from typing import List

from .md5 import DEFAULT_CHUNK_SIZE, MD5, md5_stream
from .verify import READ_SIZES, check_against_hashlib, run_self_tests

ENGINES = ["auto", "python", "numba"]


def parse_md5_file(path: Path) -> bytes:
    """Read the first 32 hex characters of an ASCII digest file."""
    text = path.read_text(encoding="ascii", errors="replace").strip()
    token = text.split()[0] if text else ""
    if len(token) < 32:
        raise ValueError(f"unexpected MD5 size read from file ({path})")
    return bytes.fromhex(token[:32])


def _make_hasher(ns: argparse.Namespace) -> MD5 | None:
    try:
        return MD5(engine=ns.engine)
    except RuntimeError as exc:
        print(f"{ns.cmd}: {exc}")
        return None


def cmd_digest(ns: argparse.Namespace) -> int:
    src = Path(ns.input)
    expected = None
    if ns.md5 is not None:
        try:
            expected = parse_md5_file(Path(ns.md5))
        except (OSError, ValueError) as exc:
            print(f"digest: error: {exc}")
            return 1
        if ns.verbose:
            print(f"[INPUT_DIGEST]\n{expected.hex()}\n")

    if ns.verbose:
        print(f"[INPUT_FILE]\n{src}\n")

    h = _make_hasher(ns)
    if h is None:
        return 1
    try:
        with src.open("rb") as fp:
            digest = md5_stream(h, fp, ns.chunk_size)
    except OSError as exc:
        print(f"digest: error: failed to open file ({exc})")
        return 1

    ok = True
    if expected is not None:
        ok = digest == expected
        if ns.verbose:
            print("[RESULT]")
        print("VALID" if ok else "INVALID")
    else:
        if ns.verbose:
            print("[DIGEST]")
        print(digest.hex())

    if ns.out is not None:
        out = Path(ns.out)
        try:
            out.write_text(digest.hex(), encoding="ascii")
        except OSError as exc:
            print(f"digest: error: failed to write file ({exc})")
            return 1
        if ns.verbose:
            print(f"\n[OUTPUT_FILE]\n{out}")
    return 0 if ok else 1


def cmd_verify_core(ns: argparse.Namespace) -> int:
    ok_vec, _ = run_self_tests(engine=ns.engine, verbose=True)
    ok_ref, mismatches = check_against_hashlib(samples=ns.samples)
    if not ok_ref:
        print(f"verify-core: {len(mismatches)} random messages differ from hashlib")
    ok_all = ok_vec and ok_ref
    print("verify-core:", "PASS" if ok_all else "FAIL")
    return 0 if ok_all else 1


def cmd_bench(ns: argparse.Namespace) -> int:
    if ns.runs < 1:
        print("bench: --runs must be >= 1")
        return 1
    src = Path(ns.input)
    try:
        data = src.read_bytes()
    except OSError as exc:
        print(f"bench: error: failed to open file ({exc})")
        return 1

    ref = hashlib.md5(data).digest()
    ok_all = True
    for size in ns.sizes:
        print(f"[BENCHMARK]\nRead Size: {size}")
        elapsed = 0.0
        passed = True
        for _ in range(ns.runs):
            h = _make_hasher(ns)
            if h is None:
                return 1
            start = time.perf_counter()
            for off in range(0, len(data), size):
                h.update(data[off : off + size])
            digest = h.final()
            elapsed += time.perf_counter() - start
            if digest != ref:
                passed = False
                break
        if passed:
            print("Result: PASSED")
        else:
            print(f"MD5: {digest.hex()}\nResult: FAILED")
            ok_all = False
        print(f"Avg. Time Elapsed: {elapsed * 1000.0 / ns.runs:.3f} ms\n")

    print("[RESULT]")
    print("PASS" if ok_all else "FAIL")
    return 0 if ok_all else 1


def main(argv: List[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="md5stream")
    sub = p.add_subparsers(dest="cmd", required=True)

    s1 = sub.add_parser("digest", help="compute the MD5 of a file")
    s1.add_argument("--input", "-i", required=True, help="input file to compute the MD5 for")
    s1.add_argument("--out", "-o", default=None, help="write the hex digest to this file")
    s1.add_argument("--md5", default=None, help="ASCII hex digest file to check the result against")
    s1.add_argument("--chunk-size", type=int, default=DEFAULT_CHUNK_SIZE, help="read size in bytes")
    s1.add_argument("--engine", choices=ENGINES, default="python")
    s1.add_argument("--verbose", "-v", action="store_true")
    s1.set_defaults(func=cmd_digest)

    s2 = sub.add_parser("verify-core", help="run the known-answer tests and compare against hashlib")
    s2.add_argument("--samples", type=int, default=32)
    s2.add_argument("--engine", choices=ENGINES, default="python")
    s2.set_defaults(func=cmd_verify_core)

    s3 = sub.add_parser("bench", help="time digesting a file at several read sizes")
    s3.add_argument("--input", "-i", required=True)
    s3.add_argument("--runs", type=int, default=10, help="iterations per read size")
    s3.add_argument("--sizes", type=int, nargs="+", default=list(READ_SIZES))
    s3.add_argument("--engine", choices=ENGINES, default="python")
    s3.set_defaults(func=cmd_bench)

    args = p.parse_args(argv)
    if getattr(args, "chunk_size", 1) <= 0 or any(s <= 0 for s in getattr(args, "sizes", [])):
        p.error("read sizes must be positive")
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
