"""Password hashing for note locks."""
import logging

import bcrypt

logger = logging.getLogger(__name__)

DEFAULT_ROUNDS = 10


def _truncate_password(password: str) -> bytes:
    """Truncate password to 72 bytes (bcrypt limit)."""
    password_bytes = password.encode('utf-8')
    if len(password_bytes) > 72:
        password_bytes = password_bytes[:72]
    return password_bytes


class PasswordHasher:
    """Salted adaptive password hashing backed by bcrypt."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        """
        Initialize the hasher.

        Args:
            rounds: bcrypt cost factor (log2 of the work factor)
        """
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a password.

        Every call draws a fresh salt, so hashing the same password twice
        yields different strings.

        Args:
            password: Plain text password

        Returns:
            str: bcrypt hash in modular crypt format
        """
        salt = bcrypt.gensalt(rounds=self.rounds)
        hashed = bcrypt.hashpw(_truncate_password(password), salt)
        return hashed.decode('utf-8')

    def verify(self, password: str, hashed_password: str | None) -> bool:
        """Verify a password against a hash.

        A missing or malformed hash never matches.

        Args:
            password: Plain text password
            hashed_password: Stored hash

        Returns:
            bool: True if password matches
        """
        if not hashed_password or password is None:
            return False

        try:
            return bcrypt.checkpw(
                _truncate_password(password),
                hashed_password.encode('utf-8'),
            )
        except (ValueError, TypeError) as e:
            logger.warning(f"Password verification error: {e}")
            return False
