from dragon.utilities.bytes import Bytes
from dragon.utilities.manipulation import words_to_bytes, swap_halves
import unittest


class BytesTestCase(unittest.TestCase):
    def test_xor(self):
        self.assertEqual(Bytes(b'\x00\xff\x0f') ^ b'\xff\xff\xf0', b'\xff\x00\xff')
        self.assertEqual(b'\x01\x01' ^ Bytes(b'\x01\x00\x07'), b'\x00\x01')
        self.assertIsInstance(Bytes(b'\x01') ^ b'\x01', Bytes)


    def test_xor_keeps_leading_zeros(self):
        self.assertEqual(Bytes(b'\xaa\x01') ^ b'\xaa\x00', b'\x00\x01')


    def test_chunk(self):
        data = Bytes(b'abcdefghij')
        self.assertEqual(data.chunk(4), [b'abcd', b'efgh'])
        self.assertEqual(data.chunk(4, allow_partials=True), [b'abcd', b'efgh', b'ij'])
        self.assertIsInstance(data.chunk(4)[0], Bytes)


    def test_words_little_endian(self):
        self.assertEqual([word.int() for word in Bytes(b'\x01\x00\x00\x00\x00\x00\x00\x80').chunk(4)], [1, 0x80000000])
        self.assertEqual(words_to_bytes([1, 0x80000000]), b'\x01\x00\x00\x00\x00\x00\x00\x80')
        self.assertEqual(Bytes(b'\x04\x03\x02\x01').int(), 0x01020304)


    def test_swap_halves(self):
        self.assertEqual(swap_halves([1, 2, 3, 4]), [3, 4, 1, 2])
