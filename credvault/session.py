"""
Vault session: unlock gating, master passphrase management and entry access.

LEGAL NOTICE:
This module controls access to locally stored credentials. Use only on
devices you own or administer.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from . import config, file_io
from .crypto import CredentialGuard
from .csv_codec import ImportResult
from .errors import (
    ConfirmationMismatchError,
    InvalidArgumentError,
    MasterRecordExistsError,
    MasterRecordMissingError,
    PassphraseMismatchError,
    VaultLockedError,
    WeakPassphraseError,
)
from .lockout import LockoutPolicy, LockoutState, LockStatus
from .secure_random import SecureRandom
from .storage import CredentialEntry, MasterCredentialRecord, RecordStore
from .utils import AuditLog, format_lock_time

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UnlockResult:
    """
    Outcome of an unlock attempt.

    ``lock_duration`` is the length in seconds of a lock window entered by
    this very attempt, 0 otherwise.
    """
    accepted: bool
    locked: bool = False
    remaining_seconds: int = 0
    attempts_left: int = 0
    lock_duration: int = 0


class VaultSession:
    """Single local user session over a RecordStore."""

    def __init__(self, store: RecordStore,
                 guard: Optional[CredentialGuard] = None,
                 policy: Optional[LockoutPolicy] = None,
                 rng: Optional[SecureRandom] = None,
                 clock: Callable[[], float] = time.time,
                 audit: Optional[AuditLog] = None):
        self.store = store
        self.rng = rng or SecureRandom()
        self.guard = guard or CredentialGuard(rng=self.rng)
        self.policy = policy or LockoutPolicy()
        self.clock = clock
        self.audit = audit or AuditLog(store.directory)
        self._unlocked = False
        logger.debug(f"{config.APP_NAME} session opened on {store.directory}")

    def is_set_up(self) -> bool:
        """Check if a master passphrase exists."""
        return self.store.load_master_record() is not None

    def is_unlocked(self) -> bool:
        return self._unlocked

    def lock(self) -> None:
        """Lock the session."""
        self._unlocked = False
        logger.info("Vault locked")

    def _require_unlocked(self) -> None:
        if not self._unlocked:
            raise VaultLockedError("Vault is locked")

    def _current_lockout(self, now: float) -> LockoutState:
        """Load the lockout state, persisting it if an expired lock was cleared."""
        state = self.store.load_lockout_state()
        normalized = self.policy.normalize(state, now)
        if normalized != state:
            self.store.save_lockout_state(normalized)
            logger.info("Lock window expired; attempt counter reset")
        return normalized

    def lock_status(self) -> LockStatus:
        """Report whether unlock attempts are currently refused."""
        now = self.clock()
        with self.store.transaction():
            state = self._current_lockout(now)
        return self.policy.check_status(state, now)

    def attempts_left(self) -> int:
        with self.store.transaction():
            return self.policy.attempts_left(self._current_lockout(self.clock()))

    def setup(self, passphrase: str, confirmation: str) -> None:
        """
        Create the master record on first use.

        Raises:
            MasterRecordExistsError: If a master passphrase is already set
            WeakPassphraseError: If the passphrase fails a strength rule
            ConfirmationMismatchError: If the confirmation differs
        """
        with self.store.transaction():
            if self.store.load_master_record() is not None:
                raise MasterRecordExistsError("A master passphrase is already set up")
            self._check_new_passphrase(passphrase, confirmation)
            hash_hex, salt_hex = self.guard.hash_passphrase(passphrase)
            self.store.save_master_record(MasterCredentialRecord(hash=hash_hex, salt=salt_hex))
        logger.info("Master passphrase created")
        self.audit.record("SETUP", "Master passphrase created")

    def _check_new_passphrase(self, passphrase: str, confirmation: str) -> None:
        strength = self.guard.validate_strength(passphrase)
        if not strength.valid:
            raise WeakPassphraseError(strength.reason)
        if passphrase != confirmation:
            raise ConfirmationMismatchError("Passphrases do not match")

    def unlock(self, passphrase: str) -> UnlockResult:
        """
        Attempt to unlock with the master passphrase.

        Attempts are refused without verification while a lock window is
        active. A failed verification counts towards the next lock.

        Raises:
            MasterRecordMissingError: If no master passphrase is set up
        """
        now = self.clock()
        with self.store.transaction():
            record = self.store.load_master_record()
            if record is None:
                raise MasterRecordMissingError("Master passphrase not found")

            state = self._current_lockout(now)
            status = self.policy.check_status(state, now)
            if status.locked:
                logger.warning(f"Unlock refused: locked for another {status.remaining_seconds}s")
                return UnlockResult(accepted=False, locked=True, remaining_seconds=status.remaining_seconds)

            if self.guard.verify(passphrase, record.hash, record.salt):
                self.store.save_lockout_state(self.policy.record_success(state))
                self._unlocked = True
                logger.info("Unlock accepted")
                self.audit.record("UNLOCK", "Master passphrase accepted")
                return UnlockResult(accepted=True, attempts_left=self.policy.max_attempts)

            state = self.policy.record_failure(state, now)
            self.store.save_lockout_state(state)

        status = self.policy.check_status(state, now)
        if status.locked:
            duration = self.policy.lock_duration(state.lock_cycle - 1)
            self.audit.record("LOCKOUT", f"Too many failed attempts; locked for {format_lock_time(duration)}")
            return UnlockResult(accepted=False, locked=True,
                                remaining_seconds=status.remaining_seconds,
                                lock_duration=duration)

        attempts_left = self.policy.attempts_left(state)
        logger.warning(f"Unlock rejected: {attempts_left} attempt(s) left")
        self.audit.record("UNLOCK_FAILED", f"Attempts left: {attempts_left}")
        return UnlockResult(accepted=False, attempts_left=attempts_left)

    def unlock_with_biometric(self, authenticated: bool) -> UnlockResult:
        """
        Unlock from the outcome of a biometric prompt.

        A successful prompt counts as a successful unlock. A failed or
        cancelled prompt leaves the counters untouched.
        """
        now = self.clock()
        with self.store.transaction():
            if self.store.load_master_record() is None:
                raise MasterRecordMissingError("Master passphrase not found")
            state = self._current_lockout(now)
            status = self.policy.check_status(state, now)
            if status.locked:
                return UnlockResult(accepted=False, locked=True, remaining_seconds=status.remaining_seconds)
            if not authenticated:
                logger.info("Biometric authentication cancelled or failed")
                return UnlockResult(accepted=False, attempts_left=self.policy.attempts_left(state))
            self.store.save_lockout_state(self.policy.record_success(state))

        self._unlocked = True
        logger.info("Biometric unlock accepted")
        self.audit.record("UNLOCK", "Biometric authentication accepted")
        return UnlockResult(accepted=True, attempts_left=self.policy.max_attempts)

    def change_master_password(self, current: str, new: str, confirmation: str) -> None:
        """
        Replace the master record.

        A wrong current passphrase counts as a failed unlock attempt. If it
        starts a lock window the session is locked as well.

        Raises:
            VaultLockedError: If the session is not unlocked
            WeakPassphraseError: If the new passphrase fails a strength rule
            ConfirmationMismatchError: If the confirmation differs
            PassphraseMismatchError: If the current passphrase is wrong
        """
        self._require_unlocked()
        self._check_new_passphrase(new, confirmation)
        now = self.clock()
        with self.store.transaction():
            record = self.store.load_master_record()
            if record is None:
                raise MasterRecordMissingError("Master passphrase not found")
            state = self._current_lockout(now)
            if not self.guard.verify(current, record.hash, record.salt):
                state = self.policy.record_failure(state, now)
                self.store.save_lockout_state(state)
                if self.policy.check_status(state, now).locked:
                    self._unlocked = False
                    duration = self.policy.lock_duration(state.lock_cycle - 1)
                    self.audit.record("LOCKOUT", f"Too many failed attempts; locked for {format_lock_time(duration)}")
                else:
                    self.audit.record("CHANGE_PASSWORD_FAILED", f"Attempts left: {self.policy.attempts_left(state)}")
                raise PassphraseMismatchError("Current passphrase is incorrect")
            hash_hex, salt_hex = self.guard.hash_passphrase(new)
            self.store.save_master_record(MasterCredentialRecord(hash=hash_hex, salt=salt_hex))
            self.store.save_lockout_state(self.policy.record_success(state))
        logger.info("Master passphrase changed")
        self.audit.record("CHANGE_PASSWORD", "Master passphrase changed")

    # Entries

    def get_entries(self) -> List[CredentialEntry]:
        """Get all credential entries."""
        self._require_unlocked()
        return self.store.load_entries()

    @staticmethod
    def _clean_fields(service: str, username: str, secret: str) -> tuple:
        # Trimmed like imported CSV fields
        service, username, secret = service.strip(), username.strip(), secret.strip()
        if not service or not username or not secret:
            raise InvalidArgumentError("Service, username and password are required")
        return service, username, secret

    def add_entry(self, service: str, username: str, secret: str) -> CredentialEntry:
        """Add a new credential with a fresh id."""
        self._require_unlocked()
        service, username, secret = self._clean_fields(service, username, secret)
        entry = CredentialEntry(id=self.rng.generate_id(), service=service, username=username, secret=secret)
        with self.store.transaction():
            entries = self.store.load_entries()
            entries.append(entry)
            self.store.save_entries(entries)
        logger.info(f"Entry added: {entry.id}")
        return entry

    def update_entry(self, entry_id: str, service: str, username: str, secret: str) -> bool:
        """Update the fields of an existing entry. The id never changes."""
        self._require_unlocked()
        service, username, secret = self._clean_fields(service, username, secret)
        with self.store.transaction():
            entries = self.store.load_entries()
            for entry in entries:
                if entry.id == entry_id:
                    entry.service = service
                    entry.username = username
                    entry.secret = secret
                    self.store.save_entries(entries)
                    logger.info(f"Entry updated: {entry_id}")
                    return True
        return False

    def delete_entry(self, entry_id: str) -> bool:
        """Delete an entry."""
        self._require_unlocked()
        with self.store.transaction():
            entries = self.store.load_entries()
            remaining = [e for e in entries if e.id != entry_id]
            if len(remaining) == len(entries):
                return False
            self.store.save_entries(remaining)
        logger.info(f"Entry deleted: {entry_id}")
        return True

    # Import / export

    def export_csv(self, directory: str) -> str:
        """Export all entries to a new CSV file in ``directory``."""
        self._require_unlocked()
        filepath = file_io.export_entries(self.store.load_entries(), directory, self.rng)
        self.audit.record("EXPORT", filepath)
        return filepath

    def import_csv(self, filepath: Optional[str]) -> ImportResult:
        """
        Import entries from a CSV file, appending the new ones.

        Raises:
            NoFileSelectedError: If no file was picked
            EmptySourceError: If the file has no content
            MalformedHeaderError: If the header is wrong
        """
        self._require_unlocked()
        with self.store.transaction():
            existing = self.store.load_entries()
            result = file_io.import_entries(filepath, existing, self.rng)
            if result.entries:
                self.store.save_entries(existing + result.entries)
        self.audit.record("IMPORT", f"{len(result.entries)} imported, {result.error_count} rejected")
        return result

    def factory_reset(self) -> None:
        """Remove every record and return to the pre-setup state."""
        self.store.clear_all()
        self._unlocked = False
        logger.warning("Factory reset performed")
        self.audit.record("FACTORY_RESET", "All vault data removed")
