"""
Encryption of tenant monday.com credentials at rest.

Stored form: ``enc.v1:`` + base64(iv[12] | tag[16] | ciphertext), AES-256-GCM.
Values without the prefix are legacy plaintext and are returned unchanged.
"""

import base64
import binascii
import hashlib
import logging
import os
import re
from typing import Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

logger = logging.getLogger(__name__)

PREFIX = "enc.v1:"
IV_LENGTH = 12
TAG_LENGTH = 16
KEY_LENGTH = 32

_HEX_KEY = re.compile(r"^[0-9a-fA-F]{64}$")


def parse_key(raw: str) -> bytes:
    """Decode a 32-byte key given as hex, base64 or raw utf-8"""
    raw = raw.strip()
    if _HEX_KEY.match(raw):
        return bytes.fromhex(raw)
    try:
        decoded = base64.b64decode(raw, validate=True)
        if len(decoded) == KEY_LENGTH:
            return decoded
    except (binascii.Error, ValueError):
        pass
    encoded = raw.encode("utf-8")
    if len(encoded) == KEY_LENGTH:
        return encoded
    raise ValueError("Token encryption key must be 32 bytes (hex, base64 or utf-8)")


class TokenCipher:
    def __init__(self, key: bytes):
        if len(key) != KEY_LENGTH:
            raise ValueError("Token encryption key must be 32 bytes")
        self._aesgcm = AESGCM(key)

    @classmethod
    def from_config(cls, encryption_key: str, fallback_secret: str = "") -> "TokenCipher":
        """
        Build from TOKEN_ENCRYPTION_KEY, or derive a key from a fallback
        service secret (sha256) when no dedicated key is configured.
        """
        if encryption_key:
            return cls(parse_key(encryption_key))
        if fallback_secret:
            logger.warning("TOKEN_ENCRYPTION_KEY not set; deriving key from service secret")
            return cls(hashlib.sha256(fallback_secret.encode("utf-8")).digest())
        raise ValueError("No token encryption key configured")

    @staticmethod
    def is_encrypted(value: Optional[str]) -> bool:
        return bool(value) and value.startswith(PREFIX)

    def encrypt(self, value: Optional[str]) -> Optional[str]:
        if value is None or value == "":
            return value
        if self.is_encrypted(value):
            return value
        iv = os.urandom(IV_LENGTH)
        sealed = self._aesgcm.encrypt(iv, value.encode("utf-8"), None)
        ciphertext, tag = sealed[:-TAG_LENGTH], sealed[-TAG_LENGTH:]
        return PREFIX + base64.b64encode(iv + tag + ciphertext).decode("ascii")

    def decrypt(self, value: Optional[str]) -> Optional[str]:
        """Plaintext of a stored value; None when it cannot be decrypted"""
        if value is None or value == "":
            return value
        if not self.is_encrypted(value):
            return value
        try:
            payload = base64.b64decode(value[len(PREFIX):], validate=True)
        except (binascii.Error, ValueError):
            logger.warning("Stored token is not valid base64")
            return None
        if len(payload) < IV_LENGTH + TAG_LENGTH:
            logger.warning("Stored token is truncated")
            return None
        iv = payload[:IV_LENGTH]
        tag = payload[IV_LENGTH:IV_LENGTH + TAG_LENGTH]
        ciphertext = payload[IV_LENGTH + TAG_LENGTH:]
        try:
            plaintext = self._aesgcm.decrypt(iv, ciphertext + tag, None)
        except InvalidTag:
            logger.warning("Failed to decrypt stored token")
            return None
        return plaintext.decode("utf-8")
