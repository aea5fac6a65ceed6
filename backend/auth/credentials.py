"""Credential manager: salted, cost-tuned password hashing with bcrypt."""

import bcrypt

from ..utils.logging import get_logger

logger = get_logger("auth.credentials")

MAX_PASSWORD_BYTES = 72
_BCRYPT_PREFIXES = {"2a", "2b", "2y"}


class CredentialManager:
    """Hashes and verifies secrets.

    Stored hashes use the standard ``$2b$<cost>$<salt><key>`` encoding,
    so the 16-byte random salt and the cost factor travel with the hash
    and verification needs nothing but the stored string.
    """

    def __init__(self, rounds: int = 12):
        if not 4 <= rounds <= 31:
            raise ValueError("bcrypt rounds must be between 4 and 31")
        self.rounds = rounds

    def hash(self, plaintext: str) -> str:
        """Hash a secret with a fresh salt. Raises ValueError above 72 bytes."""
        secret = plaintext.encode("utf-8")
        if len(secret) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        return bcrypt.hashpw(secret, bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, plaintext: str, hashed: str) -> bool:
        """Check a secret against a stored hash. Never raises."""
        if not isinstance(plaintext, str) or not isinstance(hashed, str) or not hashed:
            return False
        secret = plaintext.encode("utf-8")
        if len(secret) > MAX_PASSWORD_BYTES:
            return False
        try:
            # checkpw compares digests in constant time
            return bcrypt.checkpw(secret, hashed.encode("utf-8"))
        except (ValueError, TypeError):
            logger.warning("malformed_credential_hash")
            return False

    def needs_rehash(self, hashed: str) -> bool:
        """True when the hash was made with a different cost or is unparseable."""
        parts = hashed.split("$") if isinstance(hashed, str) else []
        if len(parts) != 4 or parts[1] not in _BCRYPT_PREFIXES or not parts[2].isdigit():
            return True
        return int(parts[2]) != self.rounds
