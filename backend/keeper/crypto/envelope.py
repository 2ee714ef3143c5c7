"""
AES-GCM sealing of secret payloads before they reach storage.

Sealed format (base64 text): [nonce 12B][ciphertext + GCM tag 16B]

Never log plaintext or sealed values.
"""
import base64
import binascii
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from keeper.core.errors import CryptoError

NONCE_SIZE = 12  # 96-bit nonce
TAG_SIZE = 16
KEY_SIZES = (16, 24, 32)  # AES-128/192/256


class EnvelopeCipher:
    """Authenticated encryption with one process-wide key."""

    def __init__(self, key: bytes):
        if len(key) not in KEY_SIZES:
            raise CryptoError(
                f"encryption key must be 16, 24 or 32 bytes, got {len(key)}"
            )
        self._aesgcm = AESGCM(key)

    def encrypt(self, plaintext: bytes) -> str:
        """Seal plaintext under a fresh random nonce.

        Args:
            plaintext: Bytes to encrypt.

        Returns:
            Base64 text of nonce + ciphertext + tag.
        """
        nonce = os.urandom(NONCE_SIZE)
        ct = self._aesgcm.encrypt(nonce, plaintext, None)
        return base64.b64encode(nonce + ct).decode("ascii")

    def decrypt(self, sealed: str | bytes) -> bytes:
        """Open a value produced by :meth:`encrypt`.

        Raises:
            CryptoError: On bad encoding, truncation, wrong key or tampering.
        """
        if isinstance(sealed, str):
            sealed = sealed.encode("ascii", errors="replace")
        try:
            raw = base64.b64decode(sealed, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise CryptoError("sealed value is not valid base64") from exc
        # b64decode ignores stray padding bits, so a mutated text could still decode
        if base64.b64encode(raw) != sealed:
            raise CryptoError("sealed value is not canonical base64")

        _min = NONCE_SIZE + TAG_SIZE
        if len(raw) < _min:
            raise CryptoError(f"sealed value too short: {len(raw)} bytes (minimum {_min})")

        nonce, ct = raw[:NONCE_SIZE], raw[NONCE_SIZE:]
        try:
            return self._aesgcm.decrypt(nonce, ct, None)
        except InvalidTag as exc:
            raise CryptoError("secret decryption failed") from exc
