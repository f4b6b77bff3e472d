from dragon.auxiliary.known_answer import parse_vectors, check_vector, run_vectors, main
from dragon.stream_ciphers.dragon import Dragon
from dragon.utilities.runtime import RUNTIME
from tests.helpers import S1, S2, TEST_SBOXES
from unittest import mock
import io
import json
import os
import tempfile
import unittest


def format_hex(label: str, data: bytes) -> list:
    lines  = []
    hexstr = data.hex().upper()

    for i in range(0, len(hexstr), 32):
        prefix = f"{label} = " if not i else ""
        lines.append(prefix.rjust(33) + hexstr[i:i+32])

    return lines


def build_vector_text(vectors: list) -> str:
    lines = ["Primitive Name: Dragon", "======================", "Profile: SW1", "Key size: 128 bits", "IV size: 128 bits", "", "Test vectors -- set 1", "====================="]

    for idx, (key, iv) in enumerate(vectors):
        stream = Dragon(key, iv=iv, sboxes=TEST_SBOXES).keystream_bytes(512)
        lines += ["", f"Set 1, vector#{idx:3}:"]
        lines += format_hex("key", key)
        lines += format_hex("IV", iv)

        for start, end in [(0, 63), (192, 255), (256, 319), (448, 511)]:
            lines += format_hex(f"stream[{start}..{end}]", stream[start:end+1])

        lines += format_hex("xor-digest", bytes(64))

    lines += ["", "", "End of test vectors"]
    return '\n'.join(lines) + '\n'



class KnownAnswerTestCase(unittest.TestCase):
    def setUp(self):
        self.pairs = [
            (bytes.fromhex('80000000000000000000000000000000'), bytes(16)),
            (bytes(range(16)), bytes(range(16, 32))),
            (bytes(range(32)), bytes(32))
        ]
        self.text = build_vector_text(self.pairs)


    def test_parse(self):
        vectors = parse_vectors(self.text)

        self.assertEqual(len(vectors), 3)
        self.assertEqual(vectors[0].name, "Set 1, vector# 0")
        self.assertEqual([(v.key, v.iv) for v in vectors], self.pairs)
        self.assertEqual([(s.start, s.end) for s in vectors[2].segments], [(0, 63), (192, 255), (256, 319), (448, 511)])
        self.assertEqual(vectors[0].stream_length, 512)


    def test_check_passes(self):
        results = [check_vector(vector, TEST_SBOXES) for vector in parse_vectors(self.text)]
        self.assertTrue(all(result.passed for result in results))


    def test_check_detects_mismatch(self):
        vector = parse_vectors(self.text)[1]
        vector.segments[2].expected[5] ^= 0x01

        result = check_vector(vector, TEST_SBOXES)
        self.assertFalse(result.passed)
        self.assertEqual(result.mismatches, [vector.segments[2]])


    def test_missing_iv(self):
        text = "Set 1, vector#  0:\n    key = 00000000000000000000000000000000\n    stream[0..3] = 00000000\n"
        self.assertRaises(ValueError, lambda: parse_vectors(text))


    def test_segment_length_mismatch(self):
        text = "Set 1, vector#  0:\n    key = " + "00"*16 + "\n    IV = " + "00"*16 + "\n    stream[0..3] = 0000\n"
        self.assertRaises(ValueError, lambda: parse_vectors(text))


    def test_run_vectors_without_progress(self):
        with mock.patch.object(RUNTIME, 'enable_progress', False):
            results = run_vectors(parse_vectors(self.text), TEST_SBOXES)

        self.assertEqual(len(results), 3)


    def test_main(self):
        with tempfile.TemporaryDirectory() as tmp:
            sbox_path    = os.path.join(tmp, 'sboxes.json')
            vectors_path = os.path.join(tmp, 'verified.test-vectors')
            bad_path     = os.path.join(tmp, 'bad.test-vectors')

            with open(sbox_path, 'w') as f:
                json.dump({'s1': S1, 's2': S2}, f)

            with open(vectors_path, 'w') as f:
                f.write(self.text)

            first = Dragon(self.pairs[0][0], iv=self.pairs[0][1], sboxes=TEST_SBOXES).keystream_bytes(16)
            with open(bad_path, 'w') as f:
                f.write(self.text.replace(first.hex().upper(), (bytes([first[0] ^ 1]) + first[1:]).hex().upper(), 1))

            with mock.patch.object(RUNTIME, 'enable_progress', False), mock.patch('sys.stdout', new_callable=io.StringIO):
                self.assertEqual(main([vectors_path, '--sboxes', sbox_path]), 0)
                self.assertEqual(main([bad_path, '--sboxes', sbox_path]), 1)
                self.assertEqual(main([os.path.join(tmp, 'missing'), '--sboxes', sbox_path]), 2)
                self.assertRaises(SystemExit, lambda: main([vectors_path, '--sboxes', sbox_path, '--cipher', 'rc4']))
