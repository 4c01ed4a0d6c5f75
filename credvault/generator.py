"""
Strong random password generation.
"""

from typing import Optional

from . import config
from .errors import InvalidArgumentError
from .secure_random import SecureRandom, sample_indices

CHARACTER_CLASSES = (
    config.CHARSET_UPPERCASE,
    config.CHARSET_LOWERCASE,
    config.CHARSET_DIGITS,
    config.CHARSET_SPECIAL,
)


class PasswordGenerator:
    """Generates passwords containing every character class."""

    def __init__(self, rng: Optional[SecureRandom] = None):
        self.rng = rng or SecureRandom()
        self.alphabet = "".join(CHARACTER_CLASSES)

    def generate(self, length: int = config.PASSWORD_GENERATOR_DEFAULT_LENGTH) -> str:
        """
        Generate a random password.

        One character of each class is placed first, the rest are drawn from
        the full alphabet, then the whole sequence is shuffled.

        Args:
            length: Password length, at least one per character class

        Raises:
            InvalidArgumentError: If length is too short
        """
        if length < config.PASSWORD_GENERATOR_MIN_LENGTH:
            raise InvalidArgumentError(
                f"Password length must be at least {config.PASSWORD_GENERATOR_MIN_LENGTH}, got {length}"
            )

        chars = [self.rng.choice(charset) for charset in CHARACTER_CLASSES]
        for index in sample_indices(self.rng, len(self.alphabet), length - len(chars)):
            chars.append(self.alphabet[index])

        self.rng.shuffle(chars)
        return "".join(chars)
