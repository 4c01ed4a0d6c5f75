"""
Cryptographically strong randomness for the vault core.

Every random draw in the package goes through this module, which is backed
by the operating system CSPRNG via ``secrets``.
"""

import secrets
import string
import time
from typing import List, MutableSequence, Sequence, TypeVar

from . import config
from .errors import InvalidArgumentError

T = TypeVar("T")

_BASE36 = string.digits + string.ascii_lowercase


class SecureRandom:
    """Random byte and integer source backed by the OS CSPRNG."""

    def random_bytes(self, length: int) -> bytes:
        """Return ``length`` random bytes."""
        if length < 0:
            raise InvalidArgumentError(f"Byte count must be non-negative, got {length}")
        return secrets.token_bytes(length)

    def random_hex(self, length: int) -> str:
        """Return ``length`` random bytes encoded as lowercase hex."""
        return self.random_bytes(length).hex()

    def random_int(self, low: int, high: int) -> int:
        """
        Return a uniformly distributed integer in ``[low, high)``.

        Uses rejection sampling (``secrets.randbelow``), so there is no modulo bias.

        Raises:
            InvalidArgumentError: If the range is empty
        """
        if high <= low:
            raise InvalidArgumentError(f"Empty range [{low}, {high})")
        return low + secrets.randbelow(high - low)

    def choice(self, seq: Sequence[T]) -> T:
        """Return a uniformly chosen element of a non-empty sequence."""
        if not seq:
            raise InvalidArgumentError("Cannot choose from an empty sequence")
        return seq[self.random_int(0, len(seq))]

    def shuffle(self, items: MutableSequence[T]) -> None:
        """Shuffle ``items`` in place with a Fisher-Yates permutation."""
        for i in range(len(items) - 1, 0, -1):
            j = self.random_int(0, i + 1)
            items[i], items[j] = items[j], items[i]

    def generate_id(self) -> str:
        """
        Generate a unique credential entry id.

        Format is ``<epoch milliseconds>-<random base-36 characters>``.
        """
        millis = int(time.time() * 1000)
        suffix = "".join(self.choice(_BASE36) for _ in range(config.ID_RANDOM_LENGTH))
        return f"{millis}-{suffix}"

    def generate_file_tag(self) -> str:
        """Generate a random six-digit tag used to keep export filenames distinct."""
        return str(self.random_int(100000, 1000000))


def sample_indices(rng: SecureRandom, upper: int, count: int) -> List[int]:
    """Draw ``count`` independent uniform indices in ``[0, upper)``."""
    return [rng.random_int(0, upper) for _ in range(count)]
