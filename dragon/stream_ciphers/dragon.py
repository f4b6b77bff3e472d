from dragon.utilities.bytes import Bytes
from dragon.utilities.manipulation import MASK32, words_to_bytes, swap_halves
from dragon.utilities.exceptions import UnsupportedParameterException, PreconditionViolationException, IVNotSetException, WipedStateException
from dragon.utilities.runtime import RUNTIME
from dragon.core.metadata import SizeType, SizeSpec, EphemeralSpec, EphemeralType
from dragon.core.primitives import StreamCipher
from dragon.core.decorators import register_primitive
from dragon.stream_ciphers.dragon_sboxes import DragonSBoxes
from dragon.stream_ciphers.dragon_state import DragonState, NLFSR_SIZE, SWEEP_SIZE, BUFFER_SIZE
from enum import Enum

import logging
log = logging.getLogger(__name__)


class CombineMode(Enum):
    OVERWRITE      = 0
    XOR            = 1
    COMPLEMENT_XOR = 2


OVERWRITE      = CombineMode.OVERWRITE
XOR            = CombineMode.XOR
COMPLEMENT_XOR = CombineMode.COMPLEMENT_XOR

# (first physical slot, halves swapped, combine mode)
KEY_LAYOUT = {
    128: [
        ( 0, False, OVERWRITE),
        (12, False, OVERWRITE),
        (20, False, OVERWRITE),
        ( 4, True,  OVERWRITE),
        (16, True,  OVERWRITE),
        (28, True,  OVERWRITE)
    ],
    256: [
        ( 0, False, OVERWRITE),
        ( 8, False, OVERWRITE),
        (16, False, OVERWRITE)
    ]
}

IV_LAYOUT = {
    128: [
        ( 8, False, OVERWRITE),
        (20, False, XOR),
        (28, False, XOR),
        ( 4, True,  XOR),
        (12, True,  XOR),
        (24, True,  OVERWRITE)
    ],
    256: [
        ( 8, False, XOR),
        (16, False, COMPLEMENT_XOR),
        (24, False, OVERWRITE)
    ]
}

MIXING_STAGES    = 16
MIXING_CONSTANTS = (0x00004472, 0x61676F6E)

# Logical word offsets read by each micro-round; the feedback pair is written at (fb, fb+1)
# and `f` is read from e+1.
ROUND_OFFSETS = (
    # a,  b,  c,  d,  e, fb
    ( 0,  9, 16, 19, 30, 30),
    (30,  7, 14, 17, 28, 28),
    (28,  5, 12, 15, 26, 26),
    (26,  3, 10, 13, 24, 24),
    (24,  1,  8, 11, 22, 22),
    (22, 31,  6,  9, 20, 20),
    (20, 29,  4,  7, 18, 18),
    (18, 27,  2,  5, 16, 16),
    (16, 25,  0,  3, 14, 14),
    (14, 23, 30,  1, 12, 12),
    (12, 21, 28, 31, 10, 10),
    (10, 19, 26, 29,  8,  8),
    ( 8, 17, 24, 27,  6,  6),
    ( 6, 15, 22, 25,  4,  4),
    ( 4, 13, 20, 23,  2,  2),
    ( 2, 11, 18, 21,  0,  0)
)


@register_primitive()
class Dragon(StreamCipher):
    """
    Dragon stream cipher (eSTREAM).

    Word-based NLFSR of 1024 bits with a 64-bit counter, producing 64 bits of keystream per round.
    One key setup may be followed by any number of IV setups.

    Reusing a (key, IV) pair for two messages leaks their xor. Dragon provides no authentication.

    References:
        https://www.ecrypt.eu.org/stream/dragonp3.html
    """

    KEY_SIZE  = SizeSpec(size_type=SizeType.RANGE, sizes=[128, 256])
    EPHEMERAL = EphemeralSpec(ephemeral_type=EphemeralType.IV, size=SizeSpec(size_type=SizeType.RANGE, sizes=[128, 256]))

    BLOCK_SIZE = 8

    def __init__(self, key: bytes, iv: bytes=None, sboxes: DragonSBoxes=None):
        """
        Parameters:
            key             (bytes): Key (128 or 256 bits).
            iv              (bytes): (Optional) IV to set immediately. Same size as the key.
            sboxes   (DragonSBoxes): (Optional) Substitution boxes. Defaults to `RUNTIME.sboxes`.
        """
        self.sboxes = sboxes or RUNTIME.sboxes
        self.key_setup(key)

        if iv is not None:
            self.set_iv(iv)


    def __reprdir__(self):
        return ['state']


    def _apply_layout(self, layout: list, words: list):
        nlfsr   = self.state.nlfsr
        swapped = swap_halves(words)

        for start, halves_swapped, mode in layout:
            for i, word in enumerate(swapped if halves_swapped else words):
                if mode == OVERWRITE:
                    nlfsr[start + i] = word
                elif mode == XOR:
                    nlfsr[start + i] ^= word
                else:
                    nlfsr[start + i] ^= word ^ MASK32


    def key_setup(self, key: bytes):
        """
        Loads the key into a fresh NLFSR and snapshots the result for later IV setups. Replaces
        any previous state, including a wiped one. A rejected key wipes the previous state.

        Parameters:
            key (bytes): Key (128 or 256 bits).
        """
        if key is None:
            self._discard_state()
            raise PreconditionViolationException("Key must not be None")

        key      = Bytes.wrap(key)
        key_size = len(key) * 8

        if key_size not in self.KEY_SIZE:
            self._discard_state()
            raise UnsupportedParameterException(f"Key ({key_size} bits) must be 128 or 256 bits")

        self.state = DragonState(key_size)
        self._apply_layout(KEY_LAYOUT[key_size], [word.int() for word in key.chunk(4)])
        self.state.take_snapshot()

        log.debug(f"Key setup complete ({key_size}-bit)")


    def set_iv(self, iv: bytes):
        """
        Merges `iv` into the key-derived state and runs the mixing stages. Any previous IV is discarded.

        Parameters:
            iv (bytes): IV. Must be the same size as the key.
        """
        self._check_not_wiped()

        if iv is None:
            raise PreconditionViolationException("IV must not be None")

        iv      = Bytes.wrap(iv)
        iv_size = len(iv) * 8
        state   = self.state

        if iv_size not in self.EPHEMERAL.size or iv_size != state.key_size:
            raise UnsupportedParameterException(f"IV ({iv_size} bits) must match the key size ({state.key_size} bits)")

        if not state.rekey_pending:
            state.restore_snapshot()

        self._apply_layout(IV_LAYOUT[state.key_size], [word.int() for word in iv.chunk(4)])

        update = self.sboxes.update
        e, f   = MIXING_CONSTANTS

        for _ in range(MIXING_STAGES):
            a = state[0] ^ state[24] ^ state[28]
            b = state[1] ^ state[25] ^ state[29]
            c = state[2] ^ state[26] ^ state[30]
            d = state[3] ^ state[27] ^ state[31]

            a, b, c, d, e, f = update(a, b, c, d, e, f)
            state.rotate(NLFSR_SIZE - 4)

            state[0] = a ^ state[20]
            state[1] = b ^ state[21]
            state[2] = c ^ state[22]
            state[3] = d ^ state[23]

        state.counters      = [e, f]
        state.rekey_pending = False
        state.cursor        = 0

        log.debug("IV setup complete")


    def _discard_state(self):
        state = getattr(self, 'state', None)

        if state is not None:
            state.wipe()
            log.debug("Previous state wiped after a rejected key")


    def _check_not_wiped(self):
        if self.state.wiped:
            raise WipedStateException("Cipher state has been wiped")


    def _check_ready(self):
        self._check_not_wiped()

        if self.state.rekey_pending:
            raise IVNotSetException("An IV must be set before generating keystream")


    def _run_sweeps(self, sweeps: int) -> bytes:
        state  = self.state
        nlfsr  = state.nlfsr
        update = self.sboxes.update
        p      = state.physical

        rounds = [(p(a), p(b), p(c), p(d), p(e), p(e+1), p(fb), p(fb+1)) for a, b, c, d, e, fb in ROUND_OFFSETS]

        c1, c2   = state.counters
        entry_c2 = c2
        words    = []

        for _ in range(sweeps):
            for la, lb, lc, ld, le, lf, lfb1, lfb2 in rounds:
                a, b, c, d, e, f = update(nlfsr[la], nlfsr[lb], nlfsr[lc], nlfsr[ld], nlfsr[le] ^ c1, nlfsr[lf] ^ c2)
                c2 = (c2 + 1) & MASK32

                nlfsr[lfb1] = b
                nlfsr[lfb2] = c
                words.append(a)
                words.append(e)

        # The high word is only carried once per call
        if c2 < entry_c2:
            c1 = (c1 + 1) & MASK32

        state.counters = [c1, c2]
        return words_to_bytes(words)


    def keystream_blocks(self, count: int) -> Bytes:
        """
        Generates `count` 8-byte blocks of keystream.

        Parameters:
            count (int): Number of blocks. Must be a multiple of 16.

        Returns:
            Bytes: `8*count` bytes of keystream.
        """
        self._check_ready()

        if count is None or count < 0 or count % SWEEP_SIZE:
            raise PreconditionViolationException(f"Block count ({count}) must be a non-negative multiple of {SWEEP_SIZE}")

        return Bytes(self._run_sweeps(count // SWEEP_SIZE))


    def process_blocks(self, data: bytes) -> Bytes:
        """
        Encrypts or decrypts whole blocks. `data` must be a multiple of 128 bytes.

        Parameters:
            data (bytes): Plaintext or ciphertext.

        Returns:
            Bytes: Ciphertext or plaintext.
        """
        if data is None or len(data) % BUFFER_SIZE:
            raise PreconditionViolationException(f"Block data must be a multiple of {BUFFER_SIZE} bytes")

        return Bytes.wrap(data) ^ self.keystream_blocks(len(data) // self.BLOCK_SIZE)


    def keystream_bytes(self, length: int) -> Bytes:
        """
        Generates `length` bytes of keystream through the staging buffer. Output is identical to
        `keystream_blocks` for the same state history, however requests are split, unless the low
        counter word wraps inside a multi-sweep `keystream_blocks` call.

        Parameters:
            length (int): Number of bytes.

        Returns:
            Bytes: Keystream.
        """
        self._check_ready()

        if length is None or length < 0:
            raise PreconditionViolationException(f"Length ({length}) must be non-negative")

        state  = self.state
        output = Bytes()

        while len(output) < length:
            # One sweep per refill, so a low-word wrap carries here before the next sweep
            # rather than at the end of the request as in `keystream_blocks`.
            if not state.cursor:
                state.buffer[:] = self._run_sweeps(1)

            take          = min(BUFFER_SIZE - state.cursor, length - len(output))
            output       += state.buffer[state.cursor:state.cursor + take]
            state.cursor  = (state.cursor + take) % BUFFER_SIZE

        return output


    def generate(self, length: int) -> Bytes:
        return self.keystream_bytes(length)


    def process_bytes(self, data: bytes) -> Bytes:
        """
        Encrypts or decrypts `data` of any length.

        Parameters:
            data (bytes): Plaintext or ciphertext.

        Returns:
            Bytes: Ciphertext or plaintext.
        """
        return self.encrypt(data)


    def wipe(self):
        """
        Zeroizes the state. Further calls raise `WipedStateException` until `key_setup` is called again.
        """
        self.state.wipe()
