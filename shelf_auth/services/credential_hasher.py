"""
Credential Hasher - Password hashing and strength scoring.

Uses bcrypt, which salts every hash and is deliberately slow. The work
factor defaults to 12. A server-side pepper is appended to the password
before hashing, so a leaked hash table alone is not enough to mount an
offline attack.

bcrypt only reads the first 72 bytes of its input; the peppered password
is truncated to that length explicitly.
"""

import re
import secrets
from dataclasses import dataclass

import bcrypt

BCRYPT_MAX_BYTES = 72

_UPPER = re.compile(r"[A-Z]")
_LOWER = re.compile(r"[a-z]")
_DIGIT = re.compile(r"\d")
_SYMBOL = re.compile(r"[^A-Za-z0-9]")
_REPEAT_RUN = re.compile(r"(.)\1{2,}")


@dataclass(frozen=True)
class PasswordStrength:
    """Score plus user-facing feedback for a password."""
    strength: int
    feedback: str

    def to_dict(self):
        return {"strength": self.strength, "feedback": self.feedback}


class CredentialHasher:
    """One-way salted password hashing plus strength heuristics."""

    def __init__(self, pepper: str, rounds: int = 12):
        """
        Args:
            pepper: Server-side secret appended to every password
            rounds: bcrypt work factor
        """
        self._pepper = pepper
        self._rounds = rounds

    @classmethod
    def from_settings(cls, settings) -> "CredentialHasher":
        return cls(pepper=settings.password_pepper, rounds=settings.bcrypt_rounds)

    def _peppered(self, secret: str) -> bytes:
        return f"{secret}{self._pepper}".encode("utf-8")[:BCRYPT_MAX_BYTES]

    def hash(self, secret: str) -> str:
        """
        Hash a password with bcrypt.

        Two calls with the same input give different results (random
        salt), so the output can never serve as a lookup key.
        """
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(self._peppered(secret), salt).decode("utf-8")

    def verify(self, secret: str, stored_hash: str) -> bool:
        """Check a password against a stored hash. Never raises on mismatch."""
        if not stored_hash:
            return False
        try:
            return bcrypt.checkpw(self._peppered(secret), stored_hash.encode("utf-8"))
        except (ValueError, TypeError):
            return False

    @staticmethod
    def score(secret: str) -> int:
        """
        Heuristic strength score in [0, 100].

        Length counts 5 points per two characters up to 25. Each character
        class present (upper, lower, digit, symbol) adds 15. Each run of
        three or more identical characters costs 5.
        """
        score = min(25, (len(secret) // 2) * 5)

        for pattern in (_UPPER, _LOWER, _DIGIT, _SYMBOL):
            if pattern.search(secret):
                score += 15

        score -= 5 * sum(1 for _ in _REPEAT_RUN.finditer(secret))

        return max(0, min(100, score))

    @staticmethod
    def strength_feedback(score: int) -> str:
        if score < 30:
            return "Very weak password."
        if score < 60:
            return "Weak password. Use a stronger one."
        if score < 80:
            return "Fair password."
        return "Strong password."

    def assess(self, secret: str) -> PasswordStrength:
        """Score a password and attach feedback for the strength endpoint."""
        score = self.score(secret)
        return PasswordStrength(strength=score, feedback=self.strength_feedback(score))

    @staticmethod
    def random_token(byte_length: int = 32) -> str:
        """Cryptographically secure random hex string."""
        return secrets.token_hex(byte_length)
