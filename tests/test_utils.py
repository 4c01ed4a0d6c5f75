import datetime
import logging
import os

import pytest

from credvault import config
from credvault.utils import AuditLog, current_date_formatted, format_lock_time, format_remaining_time, setup_logging


@pytest.mark.parametrize("seconds, expected", [
    (5 * 60, "5 minute(s)"),
    (20 * 60, "20 minute(s)"),
    (5 * 60 * 60, "5h"),
])
def test_format_lock_time(seconds, expected):
    assert format_lock_time(seconds) == expected


@pytest.mark.parametrize("seconds, expected", [
    (9, "9s"),
    (250, "4m 10s"),
    (3600 + 23 * 60 + 45, "1h 23m 45s"),
])
def test_format_remaining_time(seconds, expected):
    assert format_remaining_time(seconds) == expected


def test_current_date_formatted():
    assert current_date_formatted(datetime.date(2025, 1, 9)) == "09-01-2025"


def test_audit_log_appends(tmp_path):
    audit = AuditLog(str(tmp_path))
    audit.record("EXPORT", "file.csv")
    audit.record("IMPORT", "2 imported")
    with open(os.path.join(str(tmp_path), config.LOG_DIR_NAME, config.AUDIT_LOG_FILE)) as f:
        lines = f.read().splitlines()
    assert len(lines) == 2
    assert lines[0].endswith("| EXPORT | file.csv")


def test_setup_logging_uses_requested_level(monkeypatch):
    calls = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))
    setup_logging("DEBUG")
    assert calls == {"level": logging.DEBUG, "format": config.LOG_FORMAT}
