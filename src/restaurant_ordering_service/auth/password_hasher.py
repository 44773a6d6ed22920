"""Salted password hashing with bcrypt.

Passwords are reduced to a base64 SHA-256 digest before bcrypt sees them, so
any length is accepted (bcrypt itself stops at 72 bytes). Only bcrypt hashes
are accepted on verification; a stored value in any other format (such as a
plaintext password from an old data file) never matches.
"""

import base64
import hashlib
import logging

import bcrypt

logger = logging.getLogger(__name__)

BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def _digest(password: str) -> bytes:
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())


class PasswordHasher:
    """Hashes and verifies user passwords."""

    def __init__(self, rounds: int = 12) -> None:
        """Initialize the hasher.

        Args:
            rounds: bcrypt cost factor (4-31)

        Raises:
            ValueError: If rounds is outside the range bcrypt supports
        """
        if not 4 <= rounds <= 31:
            raise ValueError("bcrypt rounds must be between 4 and 31")

        self.rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a password with a fresh salt.

        Args:
            password: Plaintext password

        Returns:
            str: bcrypt hash including salt and cost
        """
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(_digest(password), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Check a password against a stored hash.

        Args:
            password: Plaintext password to check
            password_hash: Stored bcrypt hash

        Returns:
            bool: True if the password matches, False otherwise
        """
        if not password_hash.startswith(BCRYPT_PREFIXES):
            logger.warning("Stored password is not a bcrypt hash, refusing to verify")
            return False

        return bcrypt.checkpw(_digest(password), password_hash.encode("utf-8"))
