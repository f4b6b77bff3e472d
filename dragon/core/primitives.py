from dragon.core.base_object import BaseObject
from dragon.utilities.bytes import Bytes
from dragon.utilities.exceptions import PreconditionViolationException


class Primitive(BaseObject):
    KEY_SIZE  = None
    EPHEMERAL = None


class StreamCipher(Primitive):
    """
    Keystream generator combined with data by xor. Encryption and decryption are the same operation.
    """

    def generate(self, length: int) -> Bytes:
        raise NotImplementedError


    def encrypt(self, plaintext: bytes) -> Bytes:
        """
        Encrypts `plaintext` with the next `len(plaintext)` bytes of keystream.

        Parameters:
            plaintext (bytes): Bytes-like object to be encrypted.

        Returns:
            Bytes: Resulting ciphertext.
        """
        if plaintext is None:
            raise PreconditionViolationException("Data must not be None")

        return Bytes.wrap(plaintext) ^ self.generate(len(plaintext))


    def decrypt(self, ciphertext: bytes) -> Bytes:
        """
        Decrypts `ciphertext` with the next `len(ciphertext)` bytes of keystream.

        Parameters:
            ciphertext (bytes): Bytes-like object to be decrypted.

        Returns:
            Bytes: Resulting plaintext.
        """
        return self.encrypt(ciphertext)
