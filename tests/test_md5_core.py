import hashlib
import unittest

from md5stream.core import (
    AC,
    AUX,
    MASK32,
    MD5_IV,
    RC,
    WT,
    bytes_to_words_le,
    compress_block,
    mk_ac_from_sine,
    rl,
    wt_index,
    words_to_bytes_le,
)
from md5stream.md5 import MD5, md5_bytes


class TestConstantTables(unittest.TestCase):
    def test_literal_ac_matches_sine_formula(self) -> None:
        self.assertEqual(list(AC), mk_ac_from_sine())

    def test_rotation_table(self) -> None:
        self.assertEqual(len(RC), 64)
        self.assertEqual(RC[0:4], (7, 12, 17, 22))
        self.assertEqual(RC[16:20], (5, 9, 14, 20))
        self.assertEqual(RC[32:36], (4, 11, 16, 23))
        self.assertEqual(RC[48:52], (6, 10, 15, 21))
        for t in range(64):
            self.assertEqual(RC[t], RC[(t // 16) * 16 + t % 4])

    def test_word_schedule(self) -> None:
        self.assertEqual(WT[16:20], (1, 6, 11, 0))
        self.assertEqual(WT[32:36], (5, 8, 11, 14))
        self.assertEqual(WT[48:52], (0, 7, 14, 5))
        for r in range(4):
            self.assertEqual(sorted(WT[16 * r : 16 * r + 16]), list(range(16)))
        with self.assertRaises(ValueError):
            wt_index(64)


class TestCompressBlock(unittest.TestCase):
    def test_aux_functions(self) -> None:
        x, y, z = 0xF0F0F0F0, 0xCCCCCCCC, 0xAAAAAAAA
        f, g, h, i = AUX
        self.assertEqual(f(x, y, z) & MASK32, ((x & y) | (~x & z)) & MASK32)
        self.assertEqual(g(x, y, z) & MASK32, ((x & z) | (y & ~z)) & MASK32)
        self.assertEqual(h(x, y, z) & MASK32, x ^ y ^ z)
        self.assertEqual(i(x, y, z) & MASK32, (y ^ (x | ~z)) & MASK32)

    def test_rotate_left(self) -> None:
        self.assertEqual(rl(0x80000001, 1), 0x00000003)
        self.assertEqual(rl(0x12345678, 4), 0x23456781)

    def test_single_block_empty_message(self) -> None:
        # 0x80, 55 zero bytes, zero bit length
        block = b"\x80" + b"\x00" * 63
        ihv = compress_block(MD5_IV, bytes_to_words_le(block))
        self.assertEqual(words_to_bytes_le(ihv).hex(), "d41d8cd98f00b204e9800998ecf8427e")

    def test_single_block_abc(self) -> None:
        block = b"abc\x80" + b"\x00" * 52 + (24).to_bytes(8, "little")
        ihv = compress_block(MD5_IV, bytes_to_words_le(block))
        self.assertEqual(words_to_bytes_le(ihv).hex(), "900150983cd24fb0d6963f7d28e17f72")

    def test_compress_is_pure(self) -> None:
        words = list(range(16))
        before = list(words)
        self.assertEqual(compress_block(MD5_IV, words), compress_block(MD5_IV, words))
        self.assertEqual(words, before)

    def test_rejects_wrong_word_count(self) -> None:
        with self.assertRaises(ValueError):
            compress_block(MD5_IV, [0] * 15)
        with self.assertRaises(ValueError):
            bytes_to_words_le(b"\x00" * 63)

    def test_final_pads_to_block_multiple(self) -> None:
        for n in range(0, 200):
            h = MD5()
            h.update(b"\x01" * n)
            h.final()
            self.assertEqual(h.total_bytes % 64, 0)
            self.assertEqual(h.blocks * 64, h.total_bytes)
            self.assertEqual(h.pending, 0)

    def test_blockwise_compress_matches_hashlib(self) -> None:
        vectors = [
            b"",
            b"a",
            b"abc",
            b"message digest",
            b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789",
        ]
        for m in vectors:
            k = (55 - len(m)) % 64
            msg = m + b"\x80" + b"\x00" * k + (len(m) * 8).to_bytes(8, "little")
            self.assertEqual(len(msg) % 64, 0)
            ihv = MD5_IV
            for off in range(0, len(msg), 64):
                ihv = compress_block(ihv, bytes_to_words_le(msg[off : off + 64]))
            self.assertEqual(words_to_bytes_le(ihv), hashlib.md5(m).digest())
            self.assertEqual(words_to_bytes_le(ihv), md5_bytes(m))


if __name__ == "__main__":
    unittest.main()
