"""
CSV import/export of the credential list.

The file format is a fixed ``url,username,password`` header followed by one
line per entry. Import validates the header strictly, then reads each data
line on its own: a bad line is counted and skipped, duplicates are dropped.
"""

import csv
import io
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from . import config
from .errors import MalformedHeaderError, MalformedRowError
from .secure_random import SecureRandom
from .storage import CredentialEntry

logger = logging.getLogger(__name__)

EXPECTED_FORMAT = ",".join(config.CSV_HEADER_COLUMNS)


@dataclass(frozen=True)
class HeaderValidation:
    valid: bool
    error: str = ""


@dataclass
class ImportResult:
    """New entries accepted from a CSV file and the number of rejected lines."""
    entries: List[CredentialEntry] = field(default_factory=list)
    error_count: int = 0


def _content_lines(content: str) -> List[str]:
    """Split on newlines and drop blank lines."""
    content = content.lstrip('\ufeff')
    return [line.rstrip('\r') for line in content.split('\n') if line.strip() != '']


def serialize(entries: Iterable[CredentialEntry]) -> str:
    """
    Convert entries to CSV text.

    Every field is quoted, with embedded quotes doubled. Columns are
    service, username and secret under the url/username/password header.
    """
    buffer = io.StringIO()
    buffer.write(EXPECTED_FORMAT + '\n')
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator='\n')
    for entry in entries:
        writer.writerow([entry.service, entry.username, entry.secret])
    return buffer.getvalue()


def validate_header(content: str) -> HeaderValidation:
    """
    Check that the first non-blank line is exactly ``url,username,password``.

    Column names are compared case-insensitively after trimming whitespace
    and surrounding quotes.
    """
    lines = _content_lines(content)
    if not lines:
        return HeaderValidation(False, "CSV file is empty.")

    columns = [col.strip().strip('"').strip() for col in lines[0].split(',')]
    expected = config.CSV_HEADER_COLUMNS

    if len(columns) != len(expected):
        return HeaderValidation(
            False,
            f"The file must have exactly {len(expected)} columns.\n\n"
            f"Found: {len(columns)} column(s): {', '.join(columns)}\n\n"
            f"Expected format:\n{EXPECTED_FORMAT}",
        )

    unexpected = [col for col, name in zip(columns, expected) if col.lower() != name]
    if unexpected:
        return HeaderValidation(
            False,
            f"Incorrect or out-of-order columns.\n\n"
            f"Found:\n{', '.join(columns)}\n\n"
            f"Unexpected column(s): {', '.join(unexpected)}\n\n"
            f"Expected format:\n{EXPECTED_FORMAT}\n\n(in this exact order)",
        )

    return HeaderValidation(True)


def split_fields(line: str) -> List[str]:
    """
    Split one CSV line into raw field values.

    Grammar::

        line   := field ("," field)*
        field  := ws* quoted ws* | bare
        quoted := '"' (any char except '"' | '""')* '"'
        bare   := any chars except ','

    Quoted fields are returned unquoted with doubled quotes collapsed.

    Raises:
        MalformedRowError: On an unterminated quote or text after a closing quote
    """
    fields = []
    pos = 0
    length = len(line)
    while True:
        start = pos
        while start < length and line[start] in ' \t':
            start += 1

        if start < length and line[start] == '"':
            chars = []
            pos = start + 1
            while True:
                if pos >= length:
                    raise MalformedRowError("Unterminated quoted field")
                char = line[pos]
                if char == '"':
                    if pos + 1 < length and line[pos + 1] == '"':
                        chars.append('"')
                        pos += 2
                        continue
                    pos += 1
                    break
                chars.append(char)
                pos += 1
            while pos < length and line[pos] in ' \t':
                pos += 1
            fields.append(''.join(chars))
        else:
            comma = line.find(',', pos)
            end = length if comma == -1 else comma
            fields.append(line[pos:end])
            pos = end

        if pos >= length:
            return fields
        if line[pos] != ',':
            raise MalformedRowError("Unexpected text after quoted field")
        pos += 1


def _parse_row(line: str) -> tuple:
    fields = split_fields(line)
    if len(fields) < len(config.CSV_HEADER_COLUMNS):
        raise MalformedRowError(f"Expected {len(config.CSV_HEADER_COLUMNS)} fields, found {len(fields)}")
    service, username, secret = (value.strip() for value in fields[:3])
    if not service or not username or not secret:
        raise MalformedRowError("Empty required field")
    return service, username, secret


def parse(content: str, existing: Iterable[CredentialEntry],
          rng: Optional[SecureRandom] = None) -> ImportResult:
    """
    Parse CSV text into new credential entries.

    Args:
        content: CSV text including the header line
        existing: Entries already in the vault, used for duplicate suppression
        rng: Random source for the ids of accepted entries

    Returns:
        ImportResult with accepted entries in file order and the count of bad lines

    Raises:
        MalformedHeaderError: If the header is missing or wrong
    """
    header = validate_header(content)
    if not header.valid:
        raise MalformedHeaderError(header.error)

    rng = rng or SecureRandom()
    seen = {entry.content_key() for entry in existing}
    result = ImportResult()

    for row_number, line in enumerate(_content_lines(content)[1:], start=2):
        try:
            key = _parse_row(line)
        except MalformedRowError as e:
            logger.debug(f"Skipping CSV row {row_number}: {e}")
            result.error_count += 1
            continue

        if key in seen:
            continue
        seen.add(key)
        service, username, secret = key
        result.entries.append(CredentialEntry(
            id=rng.generate_id(),
            service=service,
            username=username,
            secret=secret,
        ))

    logger.info(f"Parsed CSV: {len(result.entries)} new entries, {result.error_count} rejected lines")
    return result
