from dragon.core.base_object import BaseObject
from dragon.utilities.exceptions import SBoxLoadException
import json
import re

import logging
log = logging.getLogger(__name__)

SBOX_ENTRIES = 256
MASK32       = 2**32-1

C_ARRAY_RE  = re.compile(r'(\w+)\s*\[\s*(?:256|0x100)?\s*\]\s*=\s*\{([^}]*)\}', re.DOTALL)
C_NUMBER_RE = re.compile(r'0[xX][0-9a-fA-F]+|\d+')


def _parse_entry(entry) -> int:
    if isinstance(entry, str):
        return int(entry, 16)

    return int(entry)



class DragonSBoxes(BaseObject):
    """
    The two 8x32 substitution boxes and the G/H functions built from them.

    The functions split a word into bytes x0||x1||x2||x3 (x0 most significant):
        G1(x) = S1[x0] ^ S1[x1] ^ S1[x2] ^ S2[x3]
        G2(x) = S1[x0] ^ S1[x1] ^ S2[x2] ^ S1[x3]
        G3(x) = S1[x0] ^ S2[x1] ^ S1[x2] ^ S1[x3]
        H1(x) = S2[x0] ^ S2[x1] ^ S2[x2] ^ S1[x3]
        H2(x) = S2[x0] ^ S2[x1] ^ S1[x2] ^ S2[x3]
        H3(x) = S2[x0] ^ S1[x1] ^ S2[x2] ^ S2[x3]

    The tables are algorithm constants and are not shipped with this package. Load them
    from the reference `dragon-sboxes.c` or a JSON file.
    """

    def __init__(self, s1: list, s2: list):
        """
        Parameters:
            s1 (list): 256 32-bit integers.
            s2 (list): 256 32-bit integers.
        """
        self.s1 = self._check_table('s1', s1)
        self.s2 = self._check_table('s2', s2)


    def __reprdir__(self):
        return []


    @staticmethod
    def _check_table(name: str, table: list) -> tuple:
        if table is None or len(table) != SBOX_ENTRIES:
            raise SBoxLoadException(f"Table {name} must have exactly {SBOX_ENTRIES} entries")

        table = tuple(table)
        if any(not 0 <= entry <= MASK32 for entry in table):
            raise SBoxLoadException(f"Table {name} has entries outside of 32 bits")

        return table


    def G1(self, x: int) -> int:
        s1 = self.s1
        return s1[x >> 24] ^ s1[(x >> 16) & 0xFF] ^ s1[(x >> 8) & 0xFF] ^ self.s2[x & 0xFF]


    def G2(self, x: int) -> int:
        s1 = self.s1
        return s1[x >> 24] ^ s1[(x >> 16) & 0xFF] ^ self.s2[(x >> 8) & 0xFF] ^ s1[x & 0xFF]


    def G3(self, x: int) -> int:
        s1 = self.s1
        return s1[x >> 24] ^ self.s2[(x >> 16) & 0xFF] ^ s1[(x >> 8) & 0xFF] ^ s1[x & 0xFF]


    def H1(self, x: int) -> int:
        s2 = self.s2
        return s2[x >> 24] ^ s2[(x >> 16) & 0xFF] ^ s2[(x >> 8) & 0xFF] ^ self.s1[x & 0xFF]


    def H2(self, x: int) -> int:
        s2 = self.s2
        return s2[x >> 24] ^ s2[(x >> 16) & 0xFF] ^ self.s1[(x >> 8) & 0xFF] ^ s2[x & 0xFF]


    def H3(self, x: int) -> int:
        s2 = self.s2
        return s2[x >> 24] ^ self.s1[(x >> 16) & 0xFF] ^ s2[(x >> 8) & 0xFF] ^ s2[x & 0xFF]


    def update(self, a: int, b: int, c: int, d: int, e: int, f: int) -> tuple:
        """
        Dragon's F function. Used both by the IV mixing stages and the keystream rounds.

        Parameters:
            a..f (int): 32-bit words.

        Returns:
            tuple: Updated (a, b, c, d, e, f).
        """
        b ^= a; d ^= c; f ^= e
        c = (c + b) & MASK32
        e = (e + d) & MASK32
        a = (a + f) & MASK32

        f ^= self.G2(c); b ^= self.G3(e); d ^= self.G1(a)
        e ^= self.H3(f); a ^= self.H1(b); c ^= self.H2(d)

        b = (b + e) & MASK32
        d = (d + a) & MASK32
        f = (f + c) & MASK32
        c ^= b; e ^= d; a ^= f
        return a, b, c, d, e, f


    @staticmethod
    def from_c_source(source: str) -> 'DragonSBoxes':
        """
        Parses C array initializers (e.g. the reference `dragon-sboxes.c`). The first two 256-entry arrays are S1 and S2.

        Parameters:
            source (str): C source text.

        Returns:
            DragonSBoxes: Parsed tables.
        """
        source = re.sub(r'/\*.*?\*/|//[^\n]*', '', source, flags=re.DOTALL)
        tables = []

        for match in C_ARRAY_RE.finditer(source):
            entries = [int(num, 0) for num in C_NUMBER_RE.findall(match.group(2))]
            if len(entries) == SBOX_ENTRIES:
                log.debug(f"Found table '{match.group(1)}'")
                tables.append(entries)

        if len(tables) < 2:
            raise SBoxLoadException(f"Expected two {SBOX_ENTRIES}-entry arrays, found {len(tables)}")

        return DragonSBoxes(tables[0], tables[1])


    @staticmethod
    def from_json(text: str) -> 'DragonSBoxes':
        """
        Parses a JSON object with "s1" and "s2" lists. Entries are integers or hex strings.

        Parameters:
            text (str): JSON text.

        Returns:
            DragonSBoxes: Parsed tables.
        """
        try:
            obj = json.loads(text)
            s1  = [_parse_entry(entry) for entry in obj['s1']]
            s2  = [_parse_entry(entry) for entry in obj['s2']]
        except (ValueError, KeyError, TypeError) as e:
            raise SBoxLoadException(f"Malformed substitution box JSON: {e}") from e

        return DragonSBoxes(s1, s2)


    @staticmethod
    def load(path: str) -> 'DragonSBoxes':
        """
        Loads tables from `path`. Files ending in '.json' are parsed as JSON, anything else as C source.

        Parameters:
            path (str): File path.

        Returns:
            DragonSBoxes: Loaded tables.
        """
        try:
            with open(path) as f:
                text = f.read()
        except OSError as e:
            raise SBoxLoadException(f"Unable to read substitution boxes from {path}: {e}") from e

        if str(path).lower().endswith('.json'):
            return DragonSBoxes.from_json(text)
        else:
            return DragonSBoxes.from_c_source(text)
