"""
Persistent record storage for the vault.

LEGAL NOTICE:
This module stores the credential list, the master passphrase hash and the
lockout counters on the local device only. Nothing is ever transmitted.
"""

import os
import json
import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterator, List, Optional

from . import config
from .errors import CorruptRecordError
from .lockout import LockoutState
from .utils import ensure_private_dir, write_text_atomic

logger = logging.getLogger(__name__)


@dataclass
class CredentialEntry:
    """Represents a single stored credential."""
    id: str
    service: str
    username: str
    secret: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CredentialEntry':
        """Create from dictionary."""
        return cls(**data)

    def content_key(self) -> tuple:
        """Fields that make two entries duplicates of each other."""
        return (self.service, self.username, self.secret)


@dataclass(frozen=True)
class MasterCredentialRecord:
    """Hex-encoded hash and salt of the master passphrase."""
    hash: str
    salt: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MasterCredentialRecord':
        return cls(hash=data['hash'], salt=data['salt'])


def default_store_directory() -> str:
    """Get the default directory for the vault records."""
    return os.path.join(os.path.expanduser("~"), config.CONFIG_DIR_NAME)


class RecordStore:

    """Keeps the three vault records as JSON files in one directory."""

    def __init__(self, directory: Optional[str] = None):

        """
        Initialize the record store.
        Args:
            directory: Directory holding the records (defaults to ~/.credvault)
        """
        self.directory = directory or default_store_directory()
        self._lock = threading.RLock()

    @contextmanager
    def transaction(self) -> Iterator['RecordStore']:
        """Hold the store lock across a read-modify-write sequence."""
        with self._lock:
            yield self

    def _path(self, filename: str) -> str:
        return os.path.join(self.directory, filename)

    def _read(self, filename: str) -> Optional[Any]:
        """Load a JSON record, or None if it does not exist."""
        path = self._path(filename)
        if not os.path.exists(path):
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            raise CorruptRecordError(f"Could not read {filename}: {e}") from e

    def _write(self, filename: str, data: Any) -> None:
        ensure_private_dir(self.directory)
        write_text_atomic(self._path(filename), json.dumps(data, indent=2))

    def _remove(self, filename: str) -> None:
        path = self._path(filename)
        if os.path.exists(path):
            os.remove(path)

    # Credential list

    def load_entries(self) -> List[CredentialEntry]:
        """Get all stored entries, in stored order."""
        with self._lock:
            data = self._read(config.ENTRIES_FILE)
            if data is None:
                return []
            try:
                return [CredentialEntry.from_dict(e) for e in data]
            except (TypeError, KeyError) as e:
                raise CorruptRecordError(f"Malformed credential list: {e}") from e

    def save_entries(self, entries: List[CredentialEntry]) -> None:
        """Replace the stored credential list."""
        with self._lock:
            self._write(config.ENTRIES_FILE, [e.to_dict() for e in entries])

    # Master record

    def load_master_record(self) -> Optional[MasterCredentialRecord]:
        """Get the master record, or None before first setup."""
        with self._lock:
            data = self._read(config.MASTER_RECORD_FILE)
            if data is None:
                return None
            try:
                return MasterCredentialRecord.from_dict(data)
            except (TypeError, KeyError) as e:
                raise CorruptRecordError(f"Malformed master record: {e}") from e

    def save_master_record(self, record: MasterCredentialRecord) -> None:
        with self._lock:
            self._write(config.MASTER_RECORD_FILE, record.to_dict())

    # Lockout state

    def load_lockout_state(self) -> LockoutState:
        """Get the lockout counters, defaulting to the initial state."""
        with self._lock:
            try:
                data = self._read(config.LOCKOUT_FILE)
                return LockoutState.from_dict(data) if data is not None else LockoutState()
            except (CorruptRecordError, TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Lockout record unreadable, using initial state: {e}")
                return LockoutState()

    def save_lockout_state(self, state: LockoutState) -> None:
        with self._lock:
            self._write(config.LOCKOUT_FILE, state.to_dict())

    def clear_all(self) -> None:
        """Remove every record (factory reset)."""
        with self._lock:
            for filename in (config.ENTRIES_FILE, config.MASTER_RECORD_FILE, config.LOCKOUT_FILE):
                self._remove(filename)
        logger.info(f"All vault records removed from {self.directory}")
