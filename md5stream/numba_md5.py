"""
MD5 block compression compiled with Numba JIT.

Drop-in replacement for `core.compress_block` used by `MD5(engine="numba")`.
Blocks are still processed one at a time; each call consumes a single
64-byte block and the previous chaining value.

Sources
- `_rol_u32` and `md5_compress_u32` are the MD5 kernel from md5fastcoll's
  `numba_fastcoll.py`, with the round constants taken from `core`.
"""

from __future__ import annotations

import os
from typing import Tuple

import numpy as np

from .core import AC, RC, WT

try:
    if os.getenv("MD5STREAM_NO_NUMBA") == "1":
        raise ImportError("MD5STREAM_NO_NUMBA=1")
    from numba import njit
except ImportError:  # pragma: no cover
    njit = None


# Numba sometimes behaves unexpectedly when indexing numpy global arrays inside `@njit`
# functions on some platforms. Keep tuple-based copies for deterministic typing.
_MD5_AC_T = tuple(int(x) for x in AC)
_MD5_RC_T = tuple(int(x) for x in RC)
_MD5_G_T = tuple(int(x) for x in WT)


def numba_available() -> bool:
    return njit is not None


if njit is not None:

    @njit(cache=True, inline="always")
    def _rol_u32(x: np.uint32, n: int) -> np.uint32:
        y = np.uint32(x)
        return (y << n) | (y >> (32 - n))

    @njit(cache=True)
    def md5_compress_u32(ihv: np.ndarray, block: np.ndarray) -> tuple[np.uint32, np.uint32, np.uint32, np.uint32]:
        a0 = ihv[0]
        b0 = ihv[1]
        c0 = ihv[2]
        d0 = ihv[3]
        a = a0
        b = b0
        c = c0
        d = d0
        for i in range(64):
            if i < 16:
                f = d ^ (b & (c ^ d))
            elif i < 32:
                f = c ^ (d & (b ^ c))
            elif i < 48:
                f = b ^ c ^ d
            else:
                f = c ^ (b | np.uint32(~d))

            g = _MD5_G_T[i]
            tmp = np.uint32(a + f + np.uint32(_MD5_AC_T[i]) + block[g])
            tmp = _rol_u32(tmp, _MD5_RC_T[i])
            tmp = np.uint32(tmp + b)
            a, d, c, b = d, c, b, tmp
        return (np.uint32(a0 + a), np.uint32(b0 + b), np.uint32(c0 + c), np.uint32(d0 + d))


def compress_block_numba(ihv: Tuple[int, int, int, int], block: bytes) -> Tuple[int, int, int, int]:
    if njit is None:
        raise RuntimeError("numba is not available (pip install numba) or disabled via MD5STREAM_NO_NUMBA=1")
    iv = np.array([ihv[0] & 0xFFFFFFFF, ihv[1] & 0xFFFFFFFF, ihv[2] & 0xFFFFFFFF, ihv[3] & 0xFFFFFFFF], dtype=np.uint32)
    words = np.frombuffer(bytes(block), dtype="<u4").astype(np.uint32)
    out = md5_compress_u32(iv, words)
    return (int(out[0]), int(out[1]), int(out[2]), int(out[3]))
