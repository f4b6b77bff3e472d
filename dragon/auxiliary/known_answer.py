from dragon.core.base_object import BaseObject
from dragon.stream_ciphers.dragon import Dragon
from dragon.stream_ciphers.dragon_sboxes import DragonSBoxes
from dragon.utilities.bytes import Bytes
from dragon.utilities.runtime import RUNTIME
import argparse
import re
import sys

import logging
log = logging.getLogger(__name__)

HEADER_RE       = re.compile(r'^\s*(Set\s+\d+,\s*vector#\s*\d+)\s*:\s*$')
FIELD_RE        = re.compile(r'^\s*([\w\-]+(?:\[\d+\.\.\d+\])?)\s*=\s*([0-9A-Fa-f]+)\s*$')
CONTINUATION_RE = re.compile(r'^\s*([0-9A-Fa-f]+)\s*$')
SEGMENT_RE      = re.compile(r'^stream\[(\d+)\.\.(\d+)\]$')


class StreamSegment(BaseObject):
    def __init__(self, start: int, end: int, expected: Bytes):
        self.start    = start
        self.end      = end
        self.expected = expected


    def __repr__(self):
        return f'<StreamSegment: stream[{self.start}..{self.end}]>'



class TestVector(BaseObject):
    __test__ = False

    def __init__(self, name: str, key: Bytes, iv: Bytes, segments: list):
        self.name     = name
        self.key      = key
        self.iv       = iv
        self.segments = segments


    @property
    def stream_length(self) -> int:
        return max([segment.end + 1 for segment in self.segments], default=0)



class VectorResult(BaseObject):
    def __init__(self, vector: TestVector, mismatches: list):
        self.vector     = vector
        self.mismatches = mismatches


    @property
    def passed(self) -> bool:
        return not self.mismatches



def _build_vector(name: str, fields: dict) -> TestVector:
    if 'key' not in fields or 'IV' not in fields:
        raise ValueError(f"{name} is missing its key or IV")

    segments = []
    for field, value in fields.items():
        match = SEGMENT_RE.match(field)
        if match:
            start, end = int(match.group(1)), int(match.group(2))
            expected   = Bytes(bytes.fromhex(value))

            if len(expected) != end - start + 1:
                raise ValueError(f"{name}: {field} holds {len(expected)} bytes")

            segments.append(StreamSegment(start, end, expected))

    return TestVector(name, Bytes(bytes.fromhex(fields['key'])), Bytes(bytes.fromhex(fields['IV'])), segments)



def parse_vectors(text: str) -> list:
    """
    Parses test vectors in the eSTREAM text format.

    Each vector starts with a 'Set N, vector# M:' header followed by `name = hex` fields whose hex may
    continue on following lines. 'key', 'IV' and 'stream[a..b]' fields are used, anything else is ignored.

    Parameters:
        text (str): Test vector file contents.

    Returns:
        list: TestVectors in file order.
    """
    vectors = []
    name    = None
    fields  = {}
    current = None

    for line in text.splitlines():
        header = HEADER_RE.match(line)
        if header:
            if name:
                vectors.append(_build_vector(name, fields))

            name    = ' '.join(header.group(1).split())
            fields  = {}
            current = None
            continue

        if not name:
            continue

        field = FIELD_RE.match(line)
        if field:
            current         = field.group(1)
            fields[current] = field.group(2)
            continue

        continuation = CONTINUATION_RE.match(line)
        if continuation and current:
            fields[current] += continuation.group(1)
        else:
            current = None

    if name:
        vectors.append(_build_vector(name, fields))

    return vectors



def check_vector(vector: TestVector, sboxes: DragonSBoxes, cipher_cls: type=Dragon) -> VectorResult:
    """
    Keys a fresh cipher with the vector's key and IV and compares every stream segment.

    Parameters:
        vector       (TestVector): Vector to check.
        sboxes     (DragonSBoxes): Substitution boxes.
        cipher_cls         (type): Cipher class.

    Returns:
        VectorResult: Result with any mismatching segments.
    """
    cipher     = cipher_cls(vector.key, iv=vector.iv, sboxes=sboxes)
    keystream  = cipher.generate(vector.stream_length)
    mismatches = [segment for segment in vector.segments if keystream[segment.start:segment.end + 1] != segment.expected]

    for segment in mismatches:
        log.warning(f"{vector.name}: mismatch in stream[{segment.start}..{segment.end}]")

    return VectorResult(vector, mismatches)



def run_vectors(vectors: list, sboxes: DragonSBoxes, cipher_cls: type=Dragon) -> list:
    results = []
    for vector in RUNTIME.report_progress(vectors, desc="Test vectors", unit='vector'):
        log.debug(f"Checking {vector.name}")
        results.append(check_vector(vector, sboxes, cipher_cls))

    return results



def print_results(results: list):
    from rich.table import Table
    from rich import print

    table = Table(title="Known-answer tests")
    table.add_column("Vector", style="bold cyan", no_wrap=True)
    table.add_column("Key bits", justify="right")
    table.add_column("Segments", justify="right")
    table.add_column("Result", no_wrap=True)

    for result in results:
        vector = result.vector
        if result.passed:
            status = "[green]PASS[/green]"
        else:
            status = "[red]FAIL[/red] " + ', '.join([f"[{seg.start}..{seg.end}]" for seg in result.mismatches])

        table.add_row(vector.name, str(len(vector.key) * 8), str(len(vector.segments)), status)

    print(table)



def main(argv: list=None) -> int:
    parser = argparse.ArgumentParser(description="Check the Dragon implementation against known-answer test vectors.")
    parser.add_argument('vectors', help="Test vector file in the eSTREAM text format")
    parser.add_argument('--sboxes', default=None, help="Substitution box file (.json or C source). Defaults to DRAGON_SBOX_PATH")
    parser.add_argument('--cipher', default='Dragon', help="Registered cipher to test")
    parser.add_argument('-v', '--verbose', action='store_true', help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    ciphers = RUNTIME.search_primitives(args.cipher)
    if not ciphers:
        parser.error(f"Unknown cipher '{args.cipher}'")

    try:
        sboxes = DragonSBoxes.load(args.sboxes) if args.sboxes else RUNTIME.sboxes

        with open(args.vectors) as f:
            vectors = parse_vectors(f.read())
    except (OSError, ValueError) as e:
        log.error(str(e))
        return 2

    results = run_vectors(vectors, sboxes, ciphers[0])
    print_results(results)

    return 0 if all(result.passed for result in results) else 1



if __name__ == '__main__':
    sys.exit(main())
