MASK32 = 2**32-1


def get_blocks(buffer: bytes, block_size: int, allow_partials: bool=False) -> list:
    """
    Splits `buffer` into blocks of `block_size`.

    Parameters:
        buffer         (bytes): Buffer to split.
        block_size       (int): Size of each block.
        allow_partials  (bool): Whether or not to include a trailing partial block.

    Returns:
        list: Blocks.
    """
    full_blocks = len(buffer) // block_size * block_size
    blocks      = [buffer[i:i + block_size] for i in range(0, full_blocks, block_size)]

    if allow_partials and len(buffer) % block_size:
        blocks.append(buffer[full_blocks:])

    return blocks


def words_to_bytes(words: list) -> bytes:
    return b''.join([int.to_bytes(word & MASK32, 4, 'little') for word in words])


def swap_halves(words: list) -> list:
    half = len(words) // 2
    return words[half:] + words[:half]
