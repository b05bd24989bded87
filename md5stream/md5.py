from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Optional, Tuple, Union

from .core import (
    BLOCK_SIZE,
    LENGTH_FIELD_SIZE,
    MASK64,
    MD5_IV,
    bytes_to_words_le,
    compress_block,
    words_to_bytes_le,
)

DEFAULT_CHUNK_SIZE = 4096

_PAD_LEADING_ONE = 0x80

BytesLike = Union[bytes, bytearray, memoryview]


def _python_compress(ihv: Tuple[int, int, int, int], block: bytes) -> Tuple[int, int, int, int]:
    return compress_block(ihv, bytes_to_words_le(block))


def _select_compressor(engine: str) -> Callable[[Tuple[int, int, int, int], bytes], Tuple[int, int, int, int]]:
    if engine == "python":
        return _python_compress
    if engine not in ("auto", "numba"):
        raise ValueError(f"unknown engine: {engine!r}")
    from .numba_md5 import compress_block_numba, numba_available

    if numba_available():
        return compress_block_numba
    if engine == "numba":
        raise RuntimeError("numba is not available (pip install numba) or disabled via MD5STREAM_NO_NUMBA=1")
    return _python_compress


def _trace_enabled() -> bool:
    return os.getenv("MD5STREAM_TRACE") == "1"


class MD5:
    """
    Incremental MD5 (RFC 1321).

    Data may be supplied across any number of `update` calls of any size;
    only full 64-byte blocks are compressed, the remainder waits in a pending
    buffer. `final` appends the padding and length field and returns the
    16-byte digest. After `final` the instance must be re-initialised with
    `init` before it accepts more data.

    Instances share no state. A single instance is not safe for concurrent
    use from several threads.
    """

    def __init__(self, data: Optional[BytesLike] = None, *, engine: str = "python") -> None:
        self.engine = engine
        self._compress = _select_compressor(engine)
        self._trace = _trace_enabled()
        self.init()
        if data is not None:
            self.update(data)

    def init(self) -> None:
        self.ihv: Tuple[int, int, int, int] = MD5_IV
        self.total_bytes = 0
        self.blocks = 0
        self._buf = bytearray(BLOCK_SIZE)
        self._offset = 0
        self._digest: Optional[bytes] = None

    @property
    def pending(self) -> int:
        """Number of bytes waiting in the pending buffer."""
        return self._offset

    @property
    def finalized(self) -> bool:
        return self._digest is not None

    def _check_open(self) -> None:
        if self._digest is not None:
            raise RuntimeError("MD5 already finalized; call init() first")

    def _process_block(self) -> None:
        # Only a completely filled block is ever compressed
        if self._offset != BLOCK_SIZE:
            return
        block = bytes(self._buf)
        if self._trace:
            print("Block Data Set:")
            for i in range(0, BLOCK_SIZE, 16):
                print("\t" + " ".join(f"{x:02X}" for x in block[i : i + 16]))
        self.ihv = self._compress(self.ihv, block)
        self.blocks += 1
        self._offset = 0

    def update(self, data: BytesLike) -> None:
        if isinstance(data, str):
            raise TypeError("Unicode-objects must be encoded before hashing")
        self._check_open()
        view = memoryview(data).cast("B")
        n = len(view)
        self.total_bytes += n
        if self._offset == BLOCK_SIZE:
            self._process_block()

        pos = 0
        while pos < n:
            take = min(BLOCK_SIZE - self._offset, n - pos)
            self._buf[self._offset : self._offset + take] = view[pos : pos + take]
            self._offset += take
            pos += take
            self._process_block()

    def update_byte(self, value: int, count: int = 1) -> None:
        """Feed `count` copies of `value` without building a `count`-sized buffer."""
        if not 0 <= value <= 0xFF:
            raise ValueError("value must be in range 0..255")
        if count < 0:
            raise ValueError("count must be non-negative")
        self._check_open()
        self.total_bytes += count
        if self._offset == BLOCK_SIZE:
            self._process_block()

        remaining = count
        while remaining:
            take = min(BLOCK_SIZE - self._offset, remaining)
            self._buf[self._offset : self._offset + take] = bytes((value,)) * take
            self._offset += take
            remaining -= take
            self._process_block()

    def final(self) -> bytes:
        self._check_open()
        # length field covers user data only, reduced mod 2^64
        bit_len = (self.total_bytes * 8) & MASK64

        self.update_byte(_PAD_LEADING_ONE, 1)
        left = BLOCK_SIZE - self._offset
        if left < LENGTH_FIELD_SIZE:
            # no room for the length field: close this block, pad into the next
            self.update_byte(0, left)
            left = BLOCK_SIZE - self._offset
        if left > LENGTH_FIELD_SIZE:
            self.update_byte(0, left - LENGTH_FIELD_SIZE)
        self.update(bit_len.to_bytes(LENGTH_FIELD_SIZE, "little"))

        # digest is little-endian of ihv words in order (A, B, C, D)
        self._digest = words_to_bytes_le(self.ihv)
        return self._digest

    def digest(self) -> bytes:
        if self._digest is None:
            raise RuntimeError("digest not available before final()")
        return self._digest

    def hexdigest(self) -> str:
        return self.digest().hex()

    def copy(self) -> "MD5":
        other = MD5.__new__(MD5)
        other.engine = self.engine
        other._compress = self._compress
        other._trace = self._trace
        other.ihv = self.ihv
        other.total_bytes = self.total_bytes
        other.blocks = self.blocks
        other._buf = bytearray(self._buf)
        other._offset = self._offset
        other._digest = self._digest
        return other


def md5_bytes(data: BytesLike, *, engine: str = "python") -> bytes:
    h = MD5(engine=engine)
    h.update(data)
    return h.final()


def md5_hex(data: BytesLike, *, engine: str = "python") -> str:
    return md5_bytes(data, engine=engine).hex()


def md5_stream(h: MD5, fp, chunk_size: int = DEFAULT_CHUNK_SIZE) -> bytes:
    """Feed an open binary file object to `h` in `chunk_size` reads and finalize."""
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    while True:
        chunk = fp.read(chunk_size)
        if not chunk:
            break
        h.update(chunk)
    return h.final()


def md5_file(path: Union[str, Path], chunk_size: int = DEFAULT_CHUNK_SIZE, *, engine: str = "python") -> bytes:
    h = MD5(engine=engine)
    with open(path, "rb") as fp:
        return md5_stream(h, fp, chunk_size)
