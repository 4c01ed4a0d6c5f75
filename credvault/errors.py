"""
Error types raised by the vault core.
"""


class VaultError(Exception):
    """Base class for every failure reported by the vault core."""


class WeakPassphraseError(VaultError):
    """The passphrase fails a strength rule; the message names the rule."""


class PassphraseMismatchError(VaultError):
    """The passphrase does not match the stored master record."""


class ConfirmationMismatchError(VaultError):
    """A passphrase and its confirmation differ."""


class MasterRecordMissingError(VaultError):
    """No master passphrase has been set up yet."""


class MasterRecordExistsError(VaultError):
    """A master passphrase is already set up."""


class VaultLockedError(VaultError):
    """The vault is not unlocked."""


class MalformedHeaderError(VaultError):
    """CSV header has the wrong column count, names or order."""


class MalformedRowError(VaultError):
    """A single CSV data row could not be used."""


class EmptySourceError(VaultError):
    """Import source has no content, or there is nothing to export."""


class NoFileSelectedError(VaultError):
    """No import source was chosen."""


class UnreadableSourceError(VaultError):
    """Import source is not a readable UTF-8 text file."""


class StorageFullError(VaultError):
    """Not enough storage to write the file."""


class InvalidArgumentError(VaultError, ValueError):
    """An argument is outside its accepted range."""


class CorruptRecordError(VaultError):
    """A persisted record could not be decoded."""
