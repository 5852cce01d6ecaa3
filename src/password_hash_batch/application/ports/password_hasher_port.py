"""Port for password hashing and verification."""

from __future__ import annotations

from typing import Protocol


class PasswordHasherError(Exception):
    """Hashing capability failed for one secret or digest."""


class InvalidPasswordHashError(PasswordHasherError):
    """Stored digest is not in a format the capability can parse."""


class PasswordHasherPort(Protocol):
    """Password hashing/verification contract."""

    def hash_password(self, password: str, *, cost: int) -> str:
        """Hash plaintext password with the given cost factor."""

    def verify_password(self, *, password: str, password_hash: str) -> bool:
        """Verify plaintext password against a self-describing digest."""
