"""
Symmetric encryption of note content.

One application-wide AES-256 key encrypts every locked note. Each encryption
draws a fresh random 16-byte IV; the IV and ciphertext are stored separately
as hex strings.
"""
import base64
import binascii
import os
from typing import Tuple

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from securenotes.core.exceptions import ConfigurationError, DecryptionError


class MasterKeySource:
    """Resolves the AES-256 master key from a base64 deployment secret."""

    KEY_SIZE = 32

    def __init__(self, encoded_key: str):
        try:
            key = base64.b64decode((encoded_key or "").strip(), validate=True)
        except (binascii.Error, ValueError):
            raise ConfigurationError("SECRET_KEY is not valid base64")

        if len(key) != self.KEY_SIZE:
            raise ConfigurationError(
                f"SECRET_KEY must be a {self.KEY_SIZE}-byte base64 string (AES-256). "
                f"Got {len(key)} bytes."
            )
        self._key = key

    @classmethod
    def from_settings(cls, settings) -> "MasterKeySource":
        return cls(settings.secret_key)

    @staticmethod
    def generate() -> str:
        """Return a fresh random key, base64 encoded."""
        return base64.b64encode(os.urandom(MasterKeySource.KEY_SIZE)).decode("ascii")

    @property
    def key(self) -> bytes:
        return self._key

    def __repr__(self) -> str:
        return "<MasterKeySource>"


class CipherEngine:
    """AES-256-CBC with PKCS7 padding."""

    IV_SIZE = 16
    BLOCK_BITS = 128

    def __init__(self, key_source: MasterKeySource):
        self._key_source = key_source

    def _cipher(self, iv: bytes) -> Cipher:
        return Cipher(algorithms.AES(self._key_source.key), modes.CBC(iv))

    def encrypt(self, plaintext: bytes) -> Tuple[bytes, bytes]:
        """
        Encrypt bytes under a fresh IV.

        Args:
            plaintext: Data to encrypt

        Returns:
            (iv, ciphertext)
        """
        iv = os.urandom(self.IV_SIZE)
        padder = padding.PKCS7(self.BLOCK_BITS).padder()
        padded = padder.update(plaintext) + padder.finalize()

        encryptor = self._cipher(iv).encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()
        return iv, ciphertext

    def decrypt(self, iv: bytes, ciphertext: bytes) -> bytes:
        """
        Decrypt bytes produced by :meth:`encrypt`.

        Raises:
            DecryptionError: truncated IV, corrupt ciphertext or wrong key
        """
        if len(iv) != self.IV_SIZE:
            raise DecryptionError(f"Invalid IV length: {len(iv)} bytes")

        try:
            decryptor = self._cipher(iv).decryptor()
            padded = decryptor.update(ciphertext) + decryptor.finalize()
            unpadder = padding.PKCS7(self.BLOCK_BITS).unpadder()
            return unpadder.update(padded) + unpadder.finalize()
        except ValueError:
            raise DecryptionError("Unable to decrypt note: ciphertext is corrupt or the key does not match")

    def encrypt_text(self, text: str) -> Tuple[str, str]:
        """Encrypt UTF-8 text, returning hex encoded (iv, ciphertext)."""
        iv, ciphertext = self.encrypt(text.encode("utf-8"))
        return iv.hex(), ciphertext.hex()

    def decrypt_text(self, iv_hex: str, ciphertext_hex: str) -> str:
        """Inverse of :meth:`encrypt_text`."""
        try:
            iv = bytes.fromhex(iv_hex)
            ciphertext = bytes.fromhex(ciphertext_hex)
        except (TypeError, ValueError):
            raise DecryptionError("Encrypted note data is not valid hex")

        try:
            return self.decrypt(iv, ciphertext).decode("utf-8")
        except UnicodeDecodeError:
            raise DecryptionError("Decrypted note is not valid UTF-8")
