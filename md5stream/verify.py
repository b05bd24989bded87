from __future__ import annotations

import hashlib
import random
from typing import Dict, Iterable, List, Tuple

from .md5 import MD5, md5_bytes

# Known MD5 results (RFC 1321 appendix A.5 plus common references)
TEST_VECTORS: List[Tuple[bytes, str]] = [
    (b"", "d41d8cd98f00b204e9800998ecf8427e"),
    (b"a", "0cc175b9c0f1b6a831c399e269772661"),
    (b"abc", "900150983cd24fb0d6963f7d28e17f72"),
    (b"message digest", "f96b697d7cb7938d525a2f31aaf161d0"),
    (b"abcdefghijklmnopqrstuvwxyz", "c3fcd3d76192e4007dfb496cca67e13b"),
    (b"The quick brown fox jumps over the lazy dog", "9e107d9d372bb6826bd81d3542a419d6"),
    (b"The quick brown fox jumps over the lazy dog.", "e4d909c290d0fb1ca068ffaddf22cbd0"),
    (
        b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789",
        "d174ab98d277d9f5a5611c2c9f419d9f",
    ),
    (b"1234567890" * 8, "57edf4a22be3c955ac49da2e2107b67a"),
]

# Read sizes exercised by the benchmark and chunking checks
READ_SIZES: Tuple[int, ...] = (1, 3, 10, 13, 63, 64, 128, 256, 511, 512, 513, 1024, 2048, 4096)


def run_self_tests(engine: str = "python", verbose: bool = False) -> Tuple[bool, Dict[int, str]]:
    failures: Dict[int, str] = {}
    for idx, (msg, expected) in enumerate(TEST_VECTORS):
        got = md5_bytes(msg, engine=engine).hex()
        ok = got == expected
        if not ok:
            failures[idx] = got
        if verbose:
            print(f"TEST_{idx:03d}: MSG_SIZE = {len(msg)}\t: {'PASSED' if ok else 'FAILED'}")
            if not ok:
                print(f"  MD5: {got}")
    return (len(failures) == 0), failures


def digest_chunked(data: bytes, chunk_size: int, engine: str = "python") -> bytes:
    h = MD5(engine=engine)
    for off in range(0, len(data), chunk_size):
        h.update(data[off : off + chunk_size])
    return h.final()


def check_chunking(
    data: bytes,
    sizes: Iterable[int] = READ_SIZES,
    engine: str = "python",
) -> Tuple[bool, Dict[int, str]]:
    """Digest `data` once per chunk size and report sizes that disagree with the one-shot digest."""
    ref = md5_bytes(data, engine=engine)
    bad: Dict[int, str] = {}
    for size in sizes:
        got = digest_chunked(data, size, engine=engine)
        if got != ref:
            bad[size] = got.hex()
    return (len(bad) == 0), bad


def check_against_hashlib(samples: int = 32, seed: int = 2024, max_len: int = 300) -> Tuple[bool, List[bytes]]:
    rng = random.Random(seed)
    mismatches: List[bytes] = []
    for _ in range(samples):
        n = rng.randrange(max_len + 1)
        msg = bytes(rng.getrandbits(8) for _ in range(n))
        if md5_bytes(msg) != hashlib.md5(msg).digest():
            mismatches.append(msg)
    return (len(mismatches) == 0), mismatches
