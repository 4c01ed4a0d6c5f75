"""
Progressive lockout for failed unlock attempts.

The policy is a pure state machine: every transition takes a LockoutState and
returns a new one. Persisting the state is the caller's job.
"""

import logging
import math
from dataclasses import dataclass, asdict, replace
from typing import Any, Dict, Optional, Sequence

from . import config
from .errors import InvalidArgumentError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LockoutState:
    """Failed-attempt counters. ``locked_until`` is a POSIX timestamp in seconds."""
    failed_attempts: int = 0
    locked_until: Optional[float] = None
    lock_cycle: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LockoutState':
        """Create from dictionary."""
        locked_until = data.get('locked_until')
        return cls(
            failed_attempts=int(data.get('failed_attempts', 0)),
            locked_until=float(locked_until) if locked_until is not None else None,
            lock_cycle=int(data.get('lock_cycle', 0)),
        )


@dataclass(frozen=True)
class LockStatus:
    locked: bool
    remaining_seconds: int = 0


class LockoutPolicy:
    """Tracks failed attempts and computes escalating lock windows."""

    def __init__(self, max_attempts: int = config.MAX_ATTEMPTS,
                 durations: Sequence[int] = config.LOCK_DURATIONS):
        if max_attempts < 1:
            raise InvalidArgumentError(f"max_attempts must be positive, got {max_attempts}")
        if not durations:
            raise InvalidArgumentError("Lock duration table must not be empty")
        self.max_attempts = max_attempts
        self.durations = tuple(durations)

    def lock_duration(self, lock_cycle: int) -> int:
        """Duration in seconds of the lock entered on the given cycle."""
        return self.durations[min(lock_cycle, len(self.durations) - 1)]

    def normalize(self, state: LockoutState, now: float) -> LockoutState:
        """Clear an expired lock window, keeping the lock cycle."""
        if state.locked_until is not None and now >= state.locked_until:
            return replace(state, failed_attempts=0, locked_until=None)
        return state

    def check_status(self, state: LockoutState, now: float) -> LockStatus:
        """Report whether a lock window is active at ``now``."""
        if state.locked_until is not None and now < state.locked_until:
            return LockStatus(True, math.ceil(state.locked_until - now))
        return LockStatus(False, 0)

    def record_failure(self, state: LockoutState, now: float) -> LockoutState:
        """
        Count one failed attempt.

        When the count reaches ``max_attempts`` a lock window starts, the
        lock cycle advances and the attempt counter resets.
        """
        state = self.normalize(state, now)
        attempts = state.failed_attempts + 1
        if attempts < self.max_attempts:
            return replace(state, failed_attempts=attempts)

        duration = self.lock_duration(state.lock_cycle)
        logger.warning(f"Lock threshold reached; locking for {duration}s (cycle {state.lock_cycle + 1})")
        return LockoutState(
            failed_attempts=0,
            locked_until=now + duration,
            lock_cycle=state.lock_cycle + 1,
        )

    def record_success(self, state: LockoutState) -> LockoutState:
        """Reset the attempt counter and lock window. The lock cycle is kept."""
        return replace(state, failed_attempts=0, locked_until=None)

    def attempts_left(self, state: LockoutState) -> int:
        return max(0, self.max_attempts - state.failed_attempts)
