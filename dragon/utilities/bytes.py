from dragon.utilities.manipulation import get_blocks


class Bytes(bytearray):
    """
    Bytearray that supports xor and chunking. Returned by every cipher operation.
    """

    def __repr__(self):
        return f"<Bytes: {bytes(self)}>"


    def __str__(self):
        return self.__repr__()


    @staticmethod
    def wrap(bytes_like: bytes) -> 'Bytes':
        """
        Ensures `bytes_like` is a Bytes object. Does not copy if it already is one.

        Parameters:
            bytes_like (bytes): Bytes-like object.

        Returns:
            Bytes: Wrapped object.
        """
        if isinstance(bytes_like, Bytes):
            return bytes_like

        return Bytes(bytes_like)


    def __xor__(self, other: bytes) -> 'Bytes':
        other  = Bytes.wrap(other)
        length = min(len(self), len(other))
        result = int.from_bytes(self[:length], 'big') ^ int.from_bytes(other[:length], 'big')
        return Bytes(result.to_bytes(length, 'big'))

    __rxor__ = __xor__


    def __getitem__(self, idx):
        result = bytearray.__getitem__(self, idx)
        if isinstance(idx, slice):
            result = Bytes(result)

        return result


    def chunk(self, size: int, allow_partials: bool=False) -> list:
        """
        Splits into `size`-byte chunks.

        Parameters:
            size            (int): Chunk size.
            allow_partials (bool): Whether to keep a trailing short chunk.

        Returns:
            list: Chunks.
        """
        return get_blocks(self, size, allow_partials)


    def int(self, byteorder: str='little') -> int:
        return int.from_bytes(self, byteorder)

