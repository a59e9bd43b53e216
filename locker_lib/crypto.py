"""Symmetric encryption capability used for encrypted locker entries.

Notes:
- Fernet is an authenticated symmetric cipher (AES-CBC + HMAC under the hood
  via the cryptography library). A wrong passphrase or a tampered payload
  raises `cryptography.fernet.InvalidToken` on decrypt; the locker lets that
  propagate.
- The locker's crypto key is a passphrase, so every payload carries its own
  random salt and the PBKDF2 parameters needed to derive the Fernet key
  again. Encrypting the same plaintext twice therefore yields different
  ciphertexts.
"""
from __future__ import annotations
import base64
import json
import os
from typing import Protocol

from cryptography.fernet import Fernet
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC


class Cipher(Protocol):
    def encrypt(self, key: str, plaintext: str) -> str: ...

    def decrypt(self, key: str, ciphertext: str) -> str: ...


class FernetCipher:
    """Passphrase-based Fernet cipher producing a framed JSON text blob."""

    def __init__(self, *, iterations: int = 390000, salt_size: int = 16) -> None:
        self.iterations = iterations
        self.salt_size = salt_size

    def _derive_key(self, password: str, salt: bytes, iterations: int) -> bytes:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=salt,
            iterations=iterations,
        )
        return base64.urlsafe_b64encode(kdf.derive(password.encode("utf-8")))

    def encrypt(self, key: str, plaintext: str) -> str:
        salt = os.urandom(self.salt_size)
        f = Fernet(self._derive_key(key, salt, self.iterations))
        ct = f.encrypt(plaintext.encode("utf-8"))
        frame = {
            "v": 1,
            "kdf": "pbkdf2",
            "iterations": self.iterations,
            "salt": base64.urlsafe_b64encode(salt).decode("ascii"),
            "ct": ct.decode("ascii"),
        }
        return json.dumps(frame)

    def decrypt(self, key: str, ciphertext: str) -> str:
        frame = json.loads(ciphertext)
        if not isinstance(frame, dict) or frame.get("kdf") != "pbkdf2":
            raise ValueError("unknown frame format")
        salt = base64.urlsafe_b64decode(frame["salt"].encode("ascii"))
        iterations = frame.get("iterations", self.iterations)
        f = Fernet(self._derive_key(key, salt, iterations))
        return f.decrypt(frame["ct"].encode("ascii")).decode("utf-8")
