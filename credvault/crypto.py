"""
Master passphrase hashing and verification.

LEGAL NOTICE:
This module handles the master passphrase of the vault. It must only be used
for legitimate personal credential management on devices you own or administer.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from argon2 import Type
from argon2.low_level import hash_secret_raw
from cryptography.hazmat.primitives import constant_time, hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from . import config
from .errors import InvalidArgumentError
from .secure_random import SecureRandom

logger = logging.getLogger(__name__)

KDF_ARGON2ID = "argon2id"
KDF_PBKDF2 = "pbkdf2"


@dataclass(frozen=True)
class StrengthResult:
    """Outcome of a passphrase strength check."""
    valid: bool
    reason: str


class CredentialGuard:
    """Derives and verifies the master passphrase hash/salt pair."""

    def __init__(self,
                 algorithm: str = config.KDF_ALGORITHM,
                 time_cost: int = config.ARGON2_TIME_COST,
                 memory_cost: int = config.ARGON2_MEMORY_COST,
                 parallelism: int = config.ARGON2_PARALLELISM,
                 iterations: int = config.PBKDF2_ITERATIONS,
                 rng: Optional[SecureRandom] = None):
        """
        Initialize the guard.

        Args:
            algorithm: "argon2id" or "pbkdf2"
            time_cost: Argon2id iterations
            memory_cost: Argon2id memory in KiB
            parallelism: Argon2id lanes
            iterations: PBKDF2-HMAC-SHA256 iterations
            rng: Random source for salts
        """
        if algorithm not in (KDF_ARGON2ID, KDF_PBKDF2):
            raise InvalidArgumentError(f"Unsupported key derivation function: {algorithm}")
        self.algorithm = algorithm
        self.time_cost = time_cost
        self.memory_cost = memory_cost
        self.parallelism = parallelism
        self.iterations = iterations
        self.rng = rng or SecureRandom()

    def generate_salt(self) -> bytes:
        """Generate a cryptographically secure random salt."""
        return self.rng.random_bytes(config.SALT_SIZE)

    def derive(self, passphrase: str, salt: bytes) -> bytes:
        """
        Derive the master hash from a passphrase using Argon2id or PBKDF2.

        Args:
            passphrase: The master passphrase
            salt: Random salt for key derivation

        Returns:
            HASH_SIZE-byte digest
        """
        secret = passphrase.encode('utf-8')
        if self.algorithm == KDF_ARGON2ID:
            return hash_secret_raw(
                secret=secret,
                salt=salt,
                time_cost=self.time_cost,
                memory_cost=self.memory_cost,
                parallelism=self.parallelism,
                hash_len=config.HASH_SIZE,
                type=Type.ID
            )
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=config.HASH_SIZE,
            salt=salt,
            iterations=self.iterations,
        )
        return kdf.derive(secret)

    def hash_passphrase(self, passphrase: str) -> Tuple[str, str]:
        """
        Hash a passphrase with a fresh salt.

        Returns:
            Tuple of (hash, salt), both hex encoded
        """
        salt = self.generate_salt()
        digest = self.derive(passphrase, salt)
        return digest.hex(), salt.hex()

    def verify(self, passphrase: str, stored_hash: str, salt: str) -> bool:
        """
        Check a passphrase against a stored hash/salt pair.

        The digests are compared in constant time.
        """
        try:
            salt_bytes = bytes.fromhex(salt)
            expected = bytes.fromhex(stored_hash)
        except ValueError:
            logger.warning("Stored master record is not valid hex; rejecting passphrase")
            return False
        candidate = self.derive(passphrase, salt_bytes)
        return constant_time.bytes_eq(candidate, expected)

    @staticmethod
    def validate_strength(passphrase: str) -> StrengthResult:
        """
        Check a master passphrase against the strength rules.

        Rules are checked in order (length, uppercase, digit, symbol) and the
        first violated one is reported.
        """
        if len(passphrase) < config.PASSPHRASE_MIN_LENGTH:
            return StrengthResult(False, f"Passphrase must be at least {config.PASSPHRASE_MIN_LENGTH} characters long")
        if not any(c.isascii() and c.isupper() for c in passphrase):
            return StrengthResult(False, "Passphrase must contain at least 1 uppercase letter")
        if not any(c in config.CHARSET_DIGITS for c in passphrase):
            return StrengthResult(False, "Passphrase must contain at least 1 digit")
        if not any(c in config.SPECIAL_CHARACTERS for c in passphrase):
            return StrengthResult(False, f"Passphrase must contain at least 1 special character ({config.SPECIAL_CHARACTERS})")
        return StrengthResult(True, "Passphrase is strong")
