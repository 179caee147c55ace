"""Password envelope used by Easy Save 3 encrypted save files.

Layout: 16 byte IV followed by AES-128-CBC ciphertext with PKCS7 padding.
The key is PBKDF2-HMAC-SHA1(password, salt=IV, 100 iterations, 16 bytes).
None of these parameters may change or the game will not read the file.
"""

import logging
from typing import Optional

from Crypto.Cipher import AES
from Crypto.Hash import SHA1
from Crypto.Protocol.KDF import PBKDF2
from Crypto.Random import get_random_bytes
from Crypto.Util.Padding import pad, unpad

from .errors import DecryptionError

log = logging.getLogger(__name__)


class EnvelopeCipher:
    """Encrypts and decrypts save files with the Easy Save 3 envelope."""

    IV_SIZE = 16
    KEY_SIZE = 16
    KDF_ITERATIONS = 100

    def derive_key(self, password: str, iv: bytes) -> bytes:
        """Derive the AES key; the IV doubles as the KDF salt."""
        # PBKDF2 would encode str passwords as latin-1
        return PBKDF2(
            password.encode("utf-8"),
            iv,
            dkLen=self.KEY_SIZE,
            count=self.KDF_ITERATIONS,
            hmac_hash_module=SHA1,
        )

    def encrypt(self, plaintext: bytes, password: Optional[str]) -> bytes:
        """Encrypt plaintext into an IV-prefixed envelope.

        An empty password leaves the data untouched.
        """
        if not password:
            return plaintext

        iv = get_random_bytes(self.IV_SIZE)
        cipher = AES.new(self.derive_key(password, iv), AES.MODE_CBC, iv=iv)
        envelope = iv + cipher.encrypt(pad(plaintext, AES.block_size))
        log.debug(f"Encrypted {len(plaintext)} bytes into {len(envelope)} byte envelope")
        return envelope

    def decrypt(self, data: bytes, password: Optional[str]) -> bytes:
        """Decrypt an IV-prefixed envelope.

        An empty password leaves the data untouched. A padding failure is the
        only signal of a wrong password, so it is reported the same way as a
        corrupt file.

        Raises:
            DecryptionError: If the envelope is malformed or padding is invalid
        """
        if not password:
            return data

        if len(data) < self.IV_SIZE:
            raise DecryptionError(
                f"Encrypted data is {len(data)} bytes, shorter than the {self.IV_SIZE} byte IV"
            )

        iv = data[:self.IV_SIZE]
        ciphertext = data[self.IV_SIZE:]
        if not ciphertext or len(ciphertext) % AES.block_size != 0:
            raise DecryptionError(
                f"Ciphertext length {len(ciphertext)} is not a multiple of {AES.block_size}"
            )

        cipher = AES.new(self.derive_key(password, iv), AES.MODE_CBC, iv=iv)
        try:
            plaintext = unpad(cipher.decrypt(ciphertext), AES.block_size)
        except ValueError as e:
            raise DecryptionError("Wrong password or corrupt save file") from e

        log.debug(f"Decrypted {len(data)} byte envelope into {len(plaintext)} bytes")
        return plaintext


def encrypt_save(plaintext: bytes, password: Optional[str]) -> bytes:
    """Encrypt save file content with the given password."""
    return EnvelopeCipher().encrypt(plaintext, password)


def decrypt_save(data: bytes, password: Optional[str]) -> bytes:
    """Decrypt save file content with the given password."""
    return EnvelopeCipher().decrypt(data, password)
