from dragon.core.base_object import BaseObject

NLFSR_SIZE  = 32
NLFSR_MASK  = NLFSR_SIZE - 1
BLOCK_SIZE  = 8
SWEEP_SIZE  = 16
BUFFER_SIZE = SWEEP_SIZE * BLOCK_SIZE


class DragonState(BaseObject):
    """
    Mutable state of one Dragon session: the circular NLFSR, its rotation offset, the 64-bit counter
    held as two words, the post-key-setup snapshot and the byte staging buffer.

    Logical word `i` lives in physical slot `(offset + i) & NLFSR_MASK`.
    """

    def __init__(self, key_size: int):
        self.key_size      = key_size
        self.nlfsr         = [0] * NLFSR_SIZE
        self.key_snapshot  = [0] * NLFSR_SIZE
        self.offset        = 0
        self.counters      = [0, 0]
        self.rekey_pending = True
        self.buffer        = bytearray(BUFFER_SIZE)
        self.cursor        = 0
        self.wiped         = False


    def __reprdir__(self):
        return ['key_size', 'offset', 'rekey_pending', 'cursor', 'wiped']


    def physical(self, idx: int) -> int:
        return (self.offset + idx) & NLFSR_MASK


    def __getitem__(self, idx: int) -> int:
        return self.nlfsr[(self.offset + idx) & NLFSR_MASK]


    def __setitem__(self, idx: int, value: int):
        self.nlfsr[(self.offset + idx) & NLFSR_MASK] = value


    def rotate(self, words: int):
        self.offset = (self.offset + words) & NLFSR_MASK


    def take_snapshot(self):
        self.key_snapshot = list(self.nlfsr)


    def restore_snapshot(self):
        self.nlfsr  = list(self.key_snapshot)
        self.offset = 0


    def wipe(self):
        """
        Zeroizes all key-dependent material. The state cannot be used afterwards.
        """
        for table in (self.nlfsr, self.key_snapshot):
            for i in range(NLFSR_SIZE):
                table[i] = 0

        for i in range(BUFFER_SIZE):
            self.buffer[i] = 0

        self.counters[0] = self.counters[1] = 0
        self.offset = 0
        self.cursor = 0
        self.wiped  = True
