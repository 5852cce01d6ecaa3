"""Bcrypt password hasher adapter."""

from __future__ import annotations

import re

import bcrypt

from password_hash_batch.application.ports.password_hasher_port import (
    InvalidPasswordHashError,
    PasswordHasherPort,
)

# bcrypt rejects fewer rounds and only reads the first 72 bytes of a secret.
_BCRYPT_MIN_ROUNDS = 4
_BCRYPT_MAX_PASSWORD_BYTES = 72
_BCRYPT_DIGEST_PATTERN = re.compile(r"\$2[aby]\$\d{2}\$[./A-Za-z0-9]{53}")


def _encode_password(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_PASSWORD_BYTES]


class BcryptPasswordHasher(PasswordHasherPort):
    """Password hashing adapter using bcrypt."""

    def hash_password(self, password: str, *, cost: int) -> str:
        rounds = max(cost, _BCRYPT_MIN_ROUNDS)
        salt = bcrypt.gensalt(rounds=rounds)
        return bcrypt.hashpw(_encode_password(password), salt).decode("ascii")

    def verify_password(self, *, password: str, password_hash: str) -> bool:
        if _BCRYPT_DIGEST_PATTERN.fullmatch(password_hash) is None:
            raise InvalidPasswordHashError("Invalid bcrypt hash format")
        try:
            return bcrypt.checkpw(_encode_password(password), password_hash.encode("ascii"))
        except ValueError as error:
            raise InvalidPasswordHashError(f"Invalid bcrypt hash: {error}") from error
