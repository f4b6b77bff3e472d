from dragon.stream_ciphers.dragon_sboxes import DragonSBoxes
import hashlib


def derive_table(label: bytes) -> list:
    """
    Deterministic stand-in table. Not the published Dragon S-boxes.
    """
    return [int.from_bytes(hashlib.sha256(label + bytes([i])).digest()[:4], 'little') for i in range(256)]


S1 = derive_table(b'dragon-test-s1')
S2 = derive_table(b'dragon-test-s2')

TEST_SBOXES = DragonSBoxes(S1, S2)
