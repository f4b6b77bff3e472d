from dragon.auxiliary.known_answer import parse_vectors, check_vector
from dragon.stream_ciphers.dragon import Dragon
from dragon.stream_ciphers.dragon_sboxes import DragonSBoxes
import os
import unittest

SBOX_PATH    = os.environ.get('DRAGON_SBOX_PATH')
VECTORS_PATH = os.environ.get('DRAGON_VECTORS_PATH')


# Published tables and vectors are not redistributed with the package
@unittest.skipUnless(SBOX_PATH and VECTORS_PATH, "DRAGON_SBOX_PATH and DRAGON_VECTORS_PATH not set")
class DragonPublishedVectorsTestCase(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.sboxes = DragonSBoxes.load(SBOX_PATH)

        with open(VECTORS_PATH) as f:
            cls.vectors = parse_vectors(f.read())


    def test_all_vectors(self):
        for vector in self.vectors:
            with self.subTest(vector=vector.name):
                self.assertTrue(check_vector(vector, self.sboxes).passed)


    def test_zero_key_zero_iv(self):
        zero = [v for v in self.vectors if v.key == bytes(16) and v.iv == bytes(16) and v.segments and v.segments[0].start == 0]
        if not zero:
            self.skipTest("Vector file has no all-zero 128-bit key/IV vector")

        expected = zero[0].segments[0].expected[:8]
        self.assertEqual(Dragon(bytes(16), iv=bytes(16), sboxes=self.sboxes).keystream_blocks(16)[:8], expected)
