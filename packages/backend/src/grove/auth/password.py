"""Password hashing.

Learn: Uses bcrypt for secure password hashing. bcrypt automatically
handles salting and embeds the work factor in the hash ("$2b$10$..."), so
the cost can be raised later without touching stored hashes or callers.
The default of 10 rounds takes ~60ms per hash on modern hardware.
"""

import bcrypt


class PasswordHasher:
    """One-way hash and verify with a configured bcrypt cost factor."""

    def __init__(self, rounds: int = 10):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a password with bcrypt.

        Passwords are truncated to 72 bytes (bcrypt's limit).
        """
        pw_bytes = password.encode("utf-8")[:72]
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Check a password against a stored hash.

        Never raises: an empty, truncated or otherwise malformed hash is a
        failed verification, not an error.
        """
        if not password_hash:
            return False
        try:
            pw_bytes = password.encode("utf-8")[:72]
            return bcrypt.checkpw(pw_bytes, password_hash.encode("utf-8"))
        except (ValueError, TypeError, AttributeError):
            return False
