"""
Reading and writing CSV files for import and export.
"""

import datetime
import logging
import os
from typing import Iterable, List, Optional

from . import config, csv_codec
from .errors import EmptySourceError, NoFileSelectedError, UnreadableSourceError
from .secure_random import SecureRandom
from .storage import CredentialEntry
from .utils import current_date_formatted, write_text_atomic

logger = logging.getLogger(__name__)


def export_filename(rng: SecureRandom, today: Optional[datetime.date] = None) -> str:
    """Build ``passwords_<DD-MM-YYYY>_<6 digits>.csv``."""
    return f"{config.CSV_EXPORT_PREFIX}_{current_date_formatted(today)}_{rng.generate_file_tag()}.csv"


def export_entries(entries: List[CredentialEntry], directory: str,
                   rng: Optional[SecureRandom] = None,
                   today: Optional[datetime.date] = None) -> str:
    """
    Write entries as a CSV file in ``directory``.

    Returns:
        Path of the written file

    Raises:
        EmptySourceError: If there are no entries
        StorageFullError: If the device has no space left
    """
    if not entries:
        raise EmptySourceError("No credentials to export. Add credentials first.")

    rng = rng or SecureRandom()
    os.makedirs(directory, exist_ok=True)
    filepath = os.path.join(directory, export_filename(rng, today))
    write_text_atomic(filepath, csv_codec.serialize(entries))
    logger.info(f"Exported {len(entries)} entries to {filepath}")
    return filepath


def read_import_source(filepath: Optional[str]) -> str:
    """
    Read the text of a picked CSV file.

    Raises:
        NoFileSelectedError: If no file was picked or it does not exist
        UnreadableSourceError: If the path cannot be read or is not UTF-8 text
        EmptySourceError: If the file has no content
    """
    if not filepath:
        raise NoFileSelectedError("No file selected.")
    try:
        with open(filepath, 'r', encoding='utf-8-sig') as f:
            content = f.read()
    except FileNotFoundError as e:
        raise NoFileSelectedError(f"File not found: {filepath}") from e
    except UnicodeDecodeError as e:
        raise UnreadableSourceError("File is not UTF-8 text. Save it as UTF-8 CSV and try again.") from e
    except (IsADirectoryError, PermissionError) as e:
        raise UnreadableSourceError(f"Cannot read file: {filepath}") from e

    if not content.strip():
        raise EmptySourceError("File is empty. Select a valid CSV file.")
    return content


def import_entries(filepath: Optional[str], existing: Iterable[CredentialEntry],
                   rng: Optional[SecureRandom] = None) -> csv_codec.ImportResult:
    """Read and parse a CSV file against the entries already in the vault."""
    content = read_import_source(filepath)
    return csv_codec.parse(content, existing, rng)
