"""
Password hashing with bcrypt.

The cost factor is embedded in every digest, so digests produced with any
cost verify without knowing it in advance.
"""

from __future__ import annotations

import bcrypt

from turismo_core.auth.exceptions import CorruptDigest

MIN_ROUNDS = 10


class PasswordHasher:
    """Salted one-way hashing of secrets."""

    def __init__(self, rounds: int = MIN_ROUNDS):
        """Initialize the hasher.

        Args:
            rounds: bcrypt cost factor used for new digests (at least 10).
        """
        if rounds < MIN_ROUNDS:
            raise ValueError(f"bcrypt rounds must be at least {MIN_ROUNDS}")
        self.rounds = rounds

    def hash(self, secret: str) -> str:
        """Hash a secret using a fresh salt.

        Args:
            secret: Plain text secret.

        Returns:
            Bcrypt digest string.
        """
        return bcrypt.hashpw(secret.encode(), bcrypt.gensalt(self.rounds)).decode()

    def verify(self, secret: str, digest: str) -> bool:
        """Verify a secret against a stored digest in constant time.

        Raises:
            CorruptDigest: If the stored digest is not a bcrypt digest.
        """
        try:
            return bcrypt.checkpw(secret.encode(), digest.encode())
        except (ValueError, TypeError, AttributeError) as e:
            raise CorruptDigest(message_debug=str(e), cause=e) from e
