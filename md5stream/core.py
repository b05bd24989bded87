from __future__ import annotations

import math
from typing import Callable, List, Tuple

MASK32 = 0xFFFFFFFF
MASK64 = 0xFFFFFFFFFFFFFFFF

BLOCK_SIZE = 64
DIGEST_SIZE = 16
LENGTH_FIELD_SIZE = 8

# MD5 initial value (A, B, C, D)
MD5_IV = (0x67452301, 0xEFCDAB89, 0x98BADCFE, 0x10325476)


def u32(x: int) -> int:
    return x & MASK32


def rl(x: int, s: int) -> int:
    x &= MASK32
    return ((x << s) | (x >> (32 - s))) & MASK32


# AC_t = floor(2^32 * abs(sin(t+1))), literal values from RFC 1321 section 3.4
AC: Tuple[int, ...] = (
    0xd76aa478, 0xe8c7b756, 0x242070db, 0xc1bdceee,
    0xf57c0faf, 0x4787c62a, 0xa8304613, 0xfd469501,
    0x698098d8, 0x8b44f7af, 0xffff5bb1, 0x895cd7be,
    0x6b901122, 0xfd987193, 0xa679438e, 0x49b40821,
    0xf61e2562, 0xc040b340, 0x265e5a51, 0xe9b6c7aa,
    0xd62f105d, 0x02441453, 0xd8a1e681, 0xe7d3fbc8,
    0x21e1cde6, 0xc33707d6, 0xf4d50d87, 0x455a14ed,
    0xa9e3e905, 0xfcefa3f8, 0x676f02d9, 0x8d2a4c8a,
    0xfffa3942, 0x8771f681, 0x6d9d6122, 0xfde5380c,
    0xa4beea44, 0x4bdecfa9, 0xf6bb4b60, 0xbebfbc70,
    0x289b7ec6, 0xeaa127fa, 0xd4ef3085, 0x04881d05,
    0xd9d4d039, 0xe6db99e5, 0x1fa27cf8, 0xc4ac5665,
    0xf4292244, 0x432aff97, 0xab9423a7, 0xfc93a039,
    0x655b59c3, 0x8f0ccc92, 0xffeff47d, 0x85845dd1,
    0x6fa87e4f, 0xfe2ce6e0, 0xa3014314, 0x4e0811a1,
    0xf7537e82, 0xbd3af235, 0x2ad7d2bb, 0xeb86d391,
)

# Rotation constants (RC_t), four per round repeated four times
RC: Tuple[int, ...] = tuple(
    [7, 12, 17, 22] * 4
    + [5, 9, 14, 20] * 4
    + [4, 11, 16, 23] * 4
    + [6, 10, 15, 21] * 4
)


def mk_ac_from_sine() -> List[int]:
    # Closed form of AC; only used to cross-check the literal table.
    return [int(abs(math.sin(i + 1)) * (1 << 32)) & MASK32 for i in range(64)]


def wt_index(t: int) -> int:
    if 0 <= t < 16:
        return t
    if 16 <= t < 32:
        return (5 * t + 1) % 16
    if 32 <= t < 48:
        return (3 * t + 5) % 16
    if 48 <= t < 64:
        return (7 * t) % 16
    raise ValueError("t out of range")


# Wt schedule mapping t -> message word index
WT: Tuple[int, ...] = tuple(wt_index(t) for t in range(64))


def F(x: int, y: int, z: int) -> int:
    return (x & y) | (~x & z)


def G(x: int, y: int, z: int) -> int:
    return (x & z) | (y & ~z)


def H(x: int, y: int, z: int) -> int:
    return x ^ y ^ z


def I(x: int, y: int, z: int) -> int:  # noqa: E741
    return y ^ (x | ~z)


# Auxiliary function per round (t // 16)
AUX: Tuple[Callable[[int, int, int], int], ...] = (F, G, H, I)


def compress_block(
    ihv: Tuple[int, int, int, int],
    m: List[int],
) -> Tuple[int, int, int, int]:
    """
    Single MD5 block compression (RFC 1321 section 3.4).
    Inputs:
      - ihv: (A, B, C, D)
      - m: 16 little-endian 32-bit words of one 64-byte block
    Returns:
      - new ihv: component-wise sum of the input ihv and the registers after 64 steps
    """
    if len(m) != 16:
        raise ValueError("m must have 16 words")

    A, B, C, D = (u32(ihv[0]), u32(ihv[1]), u32(ihv[2]), u32(ihv[3]))
    a, b, c, d = A, B, C, D

    for t in range(64):
        f = AUX[t >> 4](b, c, d) & MASK32
        Tt = (a + f + AC[t] + m[WT[t]]) & MASK32
        new_b = (b + rl(Tt, RC[t])) & MASK32
        a, b, c, d = d, new_b, b, c

    return (u32(A + a), u32(B + b), u32(C + c), u32(D + d))


def bytes_to_words_le(block: bytes) -> List[int]:
    if len(block) != BLOCK_SIZE:
        raise ValueError("block must be 64 bytes")
    return [int.from_bytes(block[i : i + 4], "little") for i in range(0, 64, 4)]


def words_to_bytes_le(words) -> bytes:
    return b"".join(u32(w).to_bytes(4, "little") for w in words)
