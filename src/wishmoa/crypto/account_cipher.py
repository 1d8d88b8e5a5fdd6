"""AES-256-GCM protection for bank account numbers stored at rest.

Stored form is three lowercase hex segments joined by colons:

    <iv>:<auth_tag>:<ciphertext>

Anything else is treated as legacy plaintext written before encryption was
introduced (or by the fail-open write path) and is passed through untouched.
"""

from __future__ import annotations

import hashlib
import logging
import os
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from cryptography.hazmat.primitives.ciphers.aead import AESGCM

if TYPE_CHECKING:
    from ..env import Settings

logger = logging.getLogger(__name__)

IV_LENGTH = 16
TAG_LENGTH = 16
SEPARATOR = ":"

_HEX_SEGMENT = re.compile(r"^[0-9a-f]+$", re.IGNORECASE)


def derive_key(secret: str) -> bytes:
    """Derive a 32-byte AES key by hashing the configured secret with SHA-256."""
    return hashlib.sha256(secret.encode("utf-8")).digest()


def is_encrypted(text: str) -> bool:
    """Return True if `text` looks like an `iv:authTag:ciphertext` triplet."""
    if not text:
        return False
    parts = text.split(SEPARATOR)
    if len(parts) != 3:
        return False
    return all(_HEX_SEGMENT.match(part) for part in parts)


@dataclass(frozen=True)
class EncryptedPayload:
    """Nonce, GCM tag and ciphertext of one encrypted value."""

    iv: bytes
    auth_tag: bytes
    ciphertext: bytes

    def to_string(self) -> str:
        return SEPARATOR.join(
            (self.iv.hex(), self.auth_tag.hex(), self.ciphertext.hex())
        )

    @classmethod
    def parse(cls, text: str) -> "EncryptedPayload":
        """Hex-decode a stored triplet. Raises ValueError when malformed."""
        parts = text.split(SEPARATOR)
        if len(parts) != 3:
            raise ValueError("Encrypted payload must have three segments")
        iv_hex, tag_hex, ciphertext_hex = parts
        return cls(
            iv=bytes.fromhex(iv_hex),
            auth_tag=bytes.fromhex(tag_hex),
            ciphertext=bytes.fromhex(ciphertext_hex),
        )


class AccountCipher:
    """Encrypts and decrypts account numbers with a key derived from a secret.

    Neither `encrypt` nor `decrypt` raises: on failure the input is returned
    unchanged and the failure is logged without the value itself.
    """

    def __init__(self, secret: str):
        self._key = derive_key(secret)

    def encrypt(self, plaintext: str) -> str:
        if not plaintext:
            return plaintext
        try:
            iv = os.urandom(IV_LENGTH)
            sealed = AESGCM(self._key).encrypt(iv, plaintext.encode("utf-8"), None)
            payload = EncryptedPayload(
                iv=iv,
                auth_tag=sealed[-TAG_LENGTH:],
                ciphertext=sealed[:-TAG_LENGTH],
            )
            return payload.to_string()
        except Exception as e:
            logger.error("Account number encryption failed: %s", type(e).__name__)
            return plaintext

    def decrypt(self, stored: str) -> str:
        if not stored:
            return stored
        # Legacy plaintext
        if SEPARATOR not in stored:
            return stored
        if len(stored.split(SEPARATOR)) != 3:
            return stored
        try:
            payload = EncryptedPayload.parse(stored)
            plaintext = AESGCM(self._key).decrypt(
                payload.iv, payload.ciphertext + payload.auth_tag, None
            )
            return plaintext.decode("utf-8")
        except Exception as e:
            logger.warning("Account number decryption failed: %s", type(e).__name__)
            return stored


def get_account_cipher(settings: "Settings") -> AccountCipher:
    """Build the cipher from the configured encryption secret."""
    return AccountCipher(settings.encryption_secret)
