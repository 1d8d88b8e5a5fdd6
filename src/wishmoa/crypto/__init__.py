"""Cryptographic helpers for data kept at rest."""

from .account_cipher import AccountCipher, EncryptedPayload, derive_key, is_encrypted

__all__ = ["AccountCipher", "EncryptedPayload", "derive_key", "is_encrypted"]
