import datetime
import errno
import logging
import os
import platform
import shutil
import stat
from typing import Optional

from . import config
from .errors import StorageFullError

logger = logging.getLogger(__name__)


def setup_logging(level: Optional[str] = None) -> None:
    """Configure root logging with the vault's format."""
    logging.basicConfig(level=getattr(logging, level or config.LOG_LEVEL), format=config.LOG_FORMAT)


def set_file_permissions(filepath: str) -> bool:
    """
    Set file to be readable/writable by owner only.

    On Windows the inherited ACL is left untouched and False is returned.
    """
    if platform.system() == 'Windows':
        logger.warning(f"Skipping owner-only permission setting for {filepath} on Windows.")
        return False
    os.chmod(filepath, stat.S_IRUSR | stat.S_IWUSR)  # 600
    return True


def ensure_private_dir(path: str) -> None:
    """Create a directory readable only by its owner, if missing."""
    os.makedirs(path, exist_ok=True)
    if platform.system() != 'Windows':
        os.chmod(path, stat.S_IRWXU)  # 700


def write_text_atomic(filepath: str, text: str) -> None:
    """
    Replace ``filepath`` with ``text`` (UTF-8) via a temp file and rename.

    Raises:
        StorageFullError: If the device has no space left
        OSError: For any other write failure
    """
    tmp_path = filepath + '.tmp'
    try:
        with open(tmp_path, 'w', encoding='utf-8', newline='') as f:
            f.write(text)
        shutil.move(tmp_path, filepath)
        if not set_file_permissions(filepath):
            logger.warning(f"Failed to set secure file permissions for {filepath}.")
    except OSError as e:
        logger.error(f"Error writing file {filepath}: {e}", exc_info=True)
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        if e.errno == errno.ENOSPC:
            raise StorageFullError(f"Not enough storage to write {os.path.basename(filepath)}") from e
        raise


def format_lock_time(seconds: int) -> str:
    """Format a lock duration, e.g. "5h" or "20 minute(s)"."""
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    if hours > 0:
        return f"{hours}h"
    return f"{minutes} minute(s)"


def format_remaining_time(seconds: int) -> str:
    """Format a countdown, e.g. "1h 23m 45s", "4m 10s" or "9s"."""
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60
    if hours > 0:
        return f"{hours}h {minutes}m {secs}s"
    if minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


def current_date_formatted(today: Optional[datetime.date] = None) -> str:
    """Current date in the export filename format (DD-MM-YYYY)."""
    return (today or datetime.date.today()).strftime(config.CSV_EXPORT_DATE_FORMAT)


class AuditLog:
    """Append-only log of security-relevant vault actions."""

    def __init__(self, directory: str):
        self.log_dir = os.path.join(directory, config.LOG_DIR_NAME)
        self.log_file = os.path.join(self.log_dir, config.AUDIT_LOG_FILE)

    def record(self, action: str, details: str = "") -> None:
        """Append a ``timestamp | action | details`` line."""
        timestamp = datetime.datetime.now().isoformat()
        try:
            ensure_private_dir(self.log_dir)
            with open(self.log_file, 'a', encoding='utf-8') as f:
                f.write(f"{timestamp} | {action} | {details}\n")
        except OSError as e:
            logger.error(f"Failed to write audit log {self.log_file}: {e}")
